from typing import Dict, List, Optional, Sequence, Tuple, Union

from . import settings
from .models import Product, ScoredProduct
from .utils import truncate


DEFAULT_LANGUAGE = "en-IN"

DESCRIPTION_LIMIT = 80
LIST_PREVIEW = 2

# Category browse layout
ITEMS_PER_TIER = 3
MAX_DISPLAY = 8
PRICE_TIERS: List[Tuple[str, float, Optional[float]]] = [
    # (key, min inclusive, max exclusive)
    ("premium", 100, None),
    ("standard", 70, 100),
    ("budget", 0, 70),
]

CATEGORY_BROWSE_INTENTS = {
    "broom_inquiry": "Brooms",
    "brush_inquiry": "Brushes",
    "mop_inquiry": "Mops",
    "wiper_inquiry": "Wipers",
    "cleaning_tools_inquiry": "Cleaning Tools",
}

NO_RESULTS: Dict[str, str] = {
    "en-IN": "Sorry, I couldn't find any products matching your query. Please try different keywords or ask about our main categories: DIY Kits, Raw Materials, Ready-to-use products.",
    "ta-IN": "மன்னிக்கவும், உங்கள் தேடலுக்கு பொருந்தும் தயாரிப்புகள் எதுவும் கிடைக்கவில்லை. வேறு முக்கிய வார்த்தைகளை முயற்சிக்கவும்.",
    "hi-IN": "क्षमा करें, आपकी खोज से मेल खाने वाले कोई उत्पाद नहीं मिले। कृपया अलग कीवर्ड आज़माएं।",
    "ml-IN": "ക്ഷമിക്കണം, നിങ്ങളുടെ തിരയലുമായി പൊരുത്തപ്പെടുന്ന ഉൽപ്പന്നങ്ങളൊന്നും കണ്ടെത്തിയില്ല. ദയവായി മറ്റ് വാക്കുകൾ ഉപയോഗിച്ച് ശ്രമിക്കുക.",
    "te-IN": "క్షమించండి, మీ శోధనకు సరిపోయే ఉత్పత్తులు ఏవీ కనుగొనబడలేదు. దయచేసి వేరే పదాలతో ప్రయత్నించండి.",
    "kn-IN": "ಕ್ಷಮಿಸಿ, ನಿಮ್ಮ ಹುಡುಕಾಟಕ್ಕೆ ಹೊಂದುವ ಯಾವುದೇ ಉತ್ಪನ್ನಗಳು ಸಿಗಲಿಲ್ಲ. ದಯವಿಟ್ಟು ಬೇರೆ ಪದಗಳನ್ನು ಪ್ರಯತ್ನಿಸಿ.",
}

_LABELS: Dict[str, Dict[str, str]] = {
    "en-IN": {
        "diy_header": "🌸 *Our DIY Manufacturing Kits:*",
        "price_header": "💰 *Current Pricing:*",
        "found_header": "✨ *Found {count} products for you:*",
        "price": "Price",
        "makes": "Makes",
        "cost_per_liter": "Cost/L",
        "making_time": "Making time",
        "fragrances": "Fragrances",
        "includes": "Includes",
        "and_more": " & more",
        "more_items": "➕ ...and {count} more. Ask for a specific item to see it.",
    },
    "hi-IN": {
        "diy_header": "🌸 *हमारे DIY मैन्युफैक्चरिंग किट:*",
        "price_header": "💰 *वर्तमान कीमतें:*",
        "found_header": "✨ *आपके लिए {count} उत्पाद मिले:*",
        "price": "कीमत",
        "makes": "बनता है",
        "cost_per_liter": "लागत/लीटर",
        "making_time": "बनाने का समय",
        "fragrances": "खुशबू",
        "includes": "शामिल",
        "and_more": " और अधिक",
        "more_items": "➕ ...और {count} उत्पाद।",
    },
    "ta-IN": {
        "diy_header": "🌸 *எங்கள் DIY உற்பத்தி கிட்கள்:*",
        "price_header": "💰 *தற்போதைய விலைகள்:*",
        "found_header": "✨ *உங்களுக்காக {count} தயாரிப்புகள்:*",
        "price": "விலை",
        "makes": "தயாரிப்பு",
        "cost_per_liter": "லிட்டருக்கு",
        "making_time": "தயாரிக்கும் நேரம்",
        "fragrances": "நறுமணங்கள்",
        "includes": "உள்ளடக்கம்",
        "and_more": " மேலும்",
        "more_items": "➕ ...மேலும் {count} தயாரிப்புகள்.",
    },
}

TIER_LABELS: Dict[str, str] = {
    "premium": "⭐ *Premium (₹100 & above)*",
    "standard": "👍 *Standard (₹70 - ₹99)*",
    "budget": "💚 *Budget (below ₹70)*",
}

_CONTEXT: Dict[str, Tuple[str, str]] = {
    "diy_kit_inquiry": (
        "Our DIY Kits are perfect for starting your cleaning product business! Here's what we offer:",
        "Each kit includes complete formulation, ingredients, and step-by-step video guidance!\nCall {phone} for technical support",
    ),
    "price_inquiry": (
        "Here are our current prices:",
        "For bulk orders or franchise pricing, call {phone}\nAll DIY kits include yield information and cost per liter",
    ),
    "product_details": (
        "Here are the detailed specifications:",
        "For technical guidance and video tutorials, call {phone}",
    ),
    "franchise": (
        "Rose Chemicals Franchise Opportunities:",
        "Call {phone} to discuss franchise requirements and investment details",
    ),
    "general": (
        "Rose Chemicals - Your Manufacturing Partner:",
        "For more information, call {phone}",
    ),
}

_QUICK_REPLIES: Dict[str, List[str]] = {
    "diy_kit_inquiry": ["Fabric Conditioner Kit", "Liquid Detergent Kit", "Dish Wash Kit", "Floor Cleaner Kit"],
    "price_inquiry": ["DIY Kit Prices", "Ready Product Prices", "Franchise Investment", "Bulk Pricing"],
    "franchise": ["Investment Required", "Franchise Benefits", "Territory Rights", "Training Program"],
    "product_details": ["Product Features", "How to Use", "Ingredients", "Shelf Life"],
    "general": ["View Products", "DIY Kits", "Franchise Info", "Contact Support"],
}


ProductLike = Union[Product, ScoredProduct]


def _unwrap(items: Sequence[ProductLike]) -> List[Product]:
    return [i.item if isinstance(i, ScoredProduct) else i for i in items]


def _labels(language: str) -> Dict[str, str]:
    return _LABELS.get(language) or _LABELS[DEFAULT_LANGUAGE]


def no_results_message(language: str = DEFAULT_LANGUAGE) -> str:
    return NO_RESULTS.get(language) or NO_RESULTS[DEFAULT_LANGUAGE]


def format_price(value: Optional[float]) -> str:
    if value is None:
        return "-"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def _preview(items: List[str], marker: str) -> str:
    head = ", ".join(items[:LIST_PREVIEW])
    return head + (marker if len(items) > LIST_PREVIEW else "")


def _product_block(index: int, product: Product, labels: Dict[str, str]) -> List[str]:
    lines = [f"{index}. *{product.name}*"]
    price_line = f"   💰 {labels['price']}: ₹{format_price(product.price)}"
    if product.yield_:
        price_line += f" | {labels['makes']}: {product.yield_}"
    if product.cost_per_liter is not None:
        price_line += f" | {labels['cost_per_liter']}: ₹{format_price(product.cost_per_liter)}"
    lines.append(price_line)

    if product.description:
        lines.append(f"   📝 {truncate(product.description, DESCRIPTION_LIMIT)}")

    if product.category_key == "diy_kits":
        if product.manufacturing_time:
            lines.append(f"   ⏱️ {labels['making_time']}: {product.manufacturing_time}")
        if product.fragrances:
            lines.append(f"   🌸 {labels['fragrances']}: {_preview(product.fragrances, '...')}")
        if product.kit_contents:
            lines.append(f"   📦 {labels['includes']}: {_preview(product.kit_contents, labels['and_more'])}")
    return lines


def _footer(intent: str) -> List[str]:
    phone = settings.SUPPORT_PHONE
    if intent == "diy_kit_inquiry":
        return [
            "🎯 *Each kit includes:* Complete formulation + PDF guide + Video tutorial",
            f"📞 *Technical Support:* {phone}",
        ]
    if intent == "price_inquiry":
        return [
            f"📞 *For bulk pricing:* {phone}",
            "🚚 *Free delivery* on orders above ₹5000",
        ]
    return [
        "💡 *Need more details?* Ask about specific products",
        f"📞 *Contact:* {phone}",
    ]


def format_product_list(products: Sequence[ProductLike], intent: str, language: str = DEFAULT_LANGUAGE) -> str:
    """Render ranked products as a WhatsApp message with an intent header and call-to-action."""
    items = [p for p in _unwrap(products) if p.is_complete]
    if not items:
        return no_results_message(language)

    labels = _labels(language)
    if intent == "diy_kit_inquiry":
        header = labels["diy_header"]
    elif intent == "price_inquiry":
        header = labels["price_header"]
    else:
        header = labels["found_header"].format(count=len(items))

    lines = [header, ""]
    for i, product in enumerate(items, start=1):
        lines.extend(_product_block(i, product, labels))
        lines.append("")
    lines.extend(_footer(intent))
    return "\n".join(lines)


def price_tier(price: float) -> str:
    for key, low, high in PRICE_TIERS:
        if price >= low and (high is None or price < high):
            return key
    return PRICE_TIERS[-1][0]


def format_category_listing(products: Sequence[ProductLike], intent: str, language: str = DEFAULT_LANGUAGE) -> str:
    """Group browse results into price tiers, a few per tier, with an overflow counter."""
    items = [p for p in _unwrap(products) if p.is_complete]
    if not items:
        return no_results_message(language)

    labels = _labels(language)
    title = CATEGORY_BROWSE_INTENTS.get(intent, "Cleaning Tools")
    buckets: Dict[str, List[Product]] = {key: [] for key, _, _ in PRICE_TIERS}
    for p in items:
        buckets[price_tier(p.price)].append(p)

    lines = [f"🧹 *Our {title}* ({len(items)} available)", ""]
    shown = 0
    for key, _, _ in PRICE_TIERS:
        tier_items = buckets[key]
        if not tier_items or shown >= MAX_DISPLAY:
            continue
        lines.append(TIER_LABELS[key])
        for p in tier_items[:ITEMS_PER_TIER]:
            if shown >= MAX_DISPLAY:
                break
            lines.append(f"• {p.name} - ₹{format_price(p.price)}")
            shown += 1
        lines.append("")

    if len(items) > shown:
        lines.append(labels["more_items"].format(count=len(items) - shown))
    lines.append(f"📞 *Bulk orders:* {settings.SUPPORT_PHONE}")
    return "\n".join(lines)


def format_response(products: Sequence[ProductLike], intent: str, language: str = DEFAULT_LANGUAGE) -> str:
    if intent in CATEGORY_BROWSE_INTENTS:
        return format_category_listing(products, intent, language)
    return format_product_list(products, intent, language)


def contextual_response(intent: str) -> Dict[str, str]:
    """Prefix/suffix text used to frame generated replies for an intent."""
    prefix, suffix = _CONTEXT.get(intent) or _CONTEXT["general"]
    return {"prefix": prefix, "suffix": suffix.format(phone=settings.SUPPORT_PHONE)}


def quick_replies(intent: str) -> List[str]:
    return list(_QUICK_REPLIES.get(intent) or _QUICK_REPLIES["general"])
