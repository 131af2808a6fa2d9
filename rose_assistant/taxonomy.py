"""Static keyword and boost tables for intent detection and product ranking.

The taxonomy is an ordered tuple: when two intents tie, the one declared
first wins.
"""

from typing import Dict, Tuple


DEFAULT_INTENT = "general"

INTENT_TAXONOMY: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("diy_kit_inquiry", (
        "kit", "diy", "make", "manufacture", "how to make", "fabric conditioner kit",
        "liquid detergent kit", "dish wash kit", "floor cleaner kit", "soap oil kit",
        "glass cleaner kit", "toilet bowl cleaner", "room freshener kit", "phenyl kit",
        "manufacturing kit", "production kit", "formula kit",
    )),
    ("price_inquiry", (
        "price", "cost", "rate", "mrp", "how much", "kitna", "cost per liter",
        "per litre", "pricing", "charges", "amount", "rupees", "rupee",
    )),
    ("product_details", (
        "details", "information", "about", "tell me", "specification", "yield",
        "what is", "describe", "explain", "features", "benefits",
    )),
    ("franchise", (
        "franchise", "business", "dealership", "investment", "partner", "distributorship",
        # "dealership" appears twice and scores twice.
        "business opportunity", "dealership", "tie up", "collaboration",
    )),
    ("technical_support", (
        "how to", "guidance", "help", "support", "training", "video", "pdf",
        "tutorial", "instruction", "process", "method", "procedure",
    )),
    ("samples", (
        "sample", "trial", "test", "demo", "try", "testing", "check quality",
    )),
    ("fragrance", (
        "fragrance", "perfume", "scent", "smell", "aroma", "fragrance options",
        "perfume options", "flavour", "variants",
    )),
    ("ordering", (
        "order", "buy", "purchase", "delivery", "shipping", "payment", "book",
        "place order", "want to buy", "need to order",
    )),
    ("contact", (
        "contact", "phone", "address", "location", "visit", "call", "reach",
        "office", "where are you", "contact details",
    )),
    ("working_hours", (
        "working hours", "office hours", "timing", "when open", "available when",
        "office time", "business hours",
    )),
    ("greeting", (
        "hi", "hello", "hey", "menu", "good morning", "good afternoon", "good evening",
        "namaste", "vanakkam", "namaskar", "adaab",
    )),
    ("ready_products", (
        "ready products", "finished products", "readymade", "pre made", "prepared products",
    )),
    ("raw_materials", (
        "raw material", "raw materials", "chemical", "chemicals", "acid", "caustic",
        "sles", "labsa", "soda ash",
    )),
    ("broom_inquiry", (
        "broom", "brrom", "brum", "cleaning broom", "sweep", "sweeper", "sweeping broom",
        "house broom", "floor broom", "what brooms", "broom available", "show broom",
        "broom types", "broom varieties", "delux broom", "supriya broom", "tulsi broom",
    )),
    ("brush_inquiry", (
        "brush", "toilet brush", "scrub brush", "cleaning brush", "kitchen brush",
        "sink brush", "what brushes", "brush available", "show brush", "brushes you have",
    )),
    ("mop_inquiry", (
        "mop", "mopping", "floor mop", "wet mop", "dry mop", "what mops", "mop available",
        "microfiber mop", "string mop", "show mop",
    )),
    ("wiper_inquiry", (
        "wiper", "squeegee", "window wiper", "glass wiper", "floor wiper",
        "what wipers", "wiper available", "show wiper",
    )),
    ("cleaning_tools_inquiry", (
        "cleaning tools", "cleaning equipment", "household tools", "what tools",
        "cleaning accessories", "tools available", "show tools",
    )),
    ("floor_cleaner_inquiry", (
        "floor cleaner", "phenyl", "mopping liquid", "floor cleaning", "tile cleaner",
        "surface cleaner", "floor wash",
    )),
    ("dish_cleaner_inquiry", (
        "dish wash", "dishwash", "utensil cleaner", "kitchen cleaner", "grease remover",
        "dish liquid", "plate cleaner",
    )),
    ("toilet_cleaner_inquiry", (
        "toilet cleaner", "bathroom cleaner", "wc cleaner", "commode cleaner",
        "washroom cleaner", "toilet bowl",
    )),
    ("fabric_care_inquiry", (
        "fabric conditioner", "softener", "clothes conditioner", "laundry softener",
        "fabric softener", "conditioner",
    )),
    ("container_inquiry", (
        "container", "bottle", "packaging", "storage", "what containers",
        "container available", "packaging material",
    )),
    ("faq_training", (
        "training", "workshop", "learn", "teach", "session", "course",
        "hands on", "online training", "manufacturing video", "pdf guide",
    )),
    ("faq_delivery", (
        "delivery", "shipping", "dispatch", "courier", "transport",
        "how long", "delivery time", "when reach", "tracking",
    )),
    ("faq_payment", (
        "payment", "pay", "upi", "bank transfer", "payment method",
        "credit", "advance payment", "how to pay",
    )),
    ("faq_formulation", (
        "formulation", "formula", "recipe", "process sheet",
        "raw material list", "documentation", "customize formula",
    )),
    ("faq_customization", (
        "customize", "custom", "personalize", "adjust", "modify",
        "private label", "oem", "white label", "own brand",
    )),
    ("faq_safety", (
        "safety", "precaution", "sds", "msds", "safety data sheet",
        "protective gear", "safety standard", "compliance",
    )),
    ("faq_catalogue", (
        "catalogue", "catalog", "brochure", "product list", "download",
    )),
    (DEFAULT_INTENT, (
        "help", "info", "thanks", "okay", "ok", "yes", "no",
    )),
)

INTENT_LABELS: Tuple[str, ...] = tuple(label for label, _ in INTENT_TAXONOMY)

# "what do you have" / "show me" / "available"
LISTING_PATTERN = r"what.*do.*you.*have|show.*me|available"
LISTING_BOOST = 3

# Intent -> catalog categories, first entry is the primary category.
INTENT_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "diy_kit_inquiry": ("diy_kits",),
    "ready_products": ("ready_to_use_chemicals",),
    "raw_materials": ("chemical_raw_materials",),
    "broom_inquiry": ("brooms",),
    "brush_inquiry": ("brushes",),
    "mop_inquiry": ("mops",),
    "wiper_inquiry": ("wipers",),
    "cleaning_tools_inquiry": ("cleaning_tools", "brooms", "brushes", "mops", "wipers"),
    "container_inquiry": ("containers",),
    "floor_cleaner_inquiry": ("ready_to_use_chemicals", "diy_kits"),
    "dish_cleaner_inquiry": ("ready_to_use_chemicals", "diy_kits"),
    "toilet_cleaner_inquiry": ("ready_to_use_chemicals", "diy_kits"),
    "fabric_care_inquiry": ("diy_kits", "ready_to_use_chemicals"),
}

# Intents whose category-restricted name match runs before general scoring.
PRIORITY_INTENTS = frozenset({
    "broom_inquiry",
    "brush_inquiry",
    "mop_inquiry",
    "wiper_inquiry",
    "cleaning_tools_inquiry",
    "container_inquiry",
})

PRIORITY_THRESHOLD = 10
PRIORITY_EXACT_NAME = 100
PRIORITY_NAME_PREFIX = 80
PRIORITY_NAME_SUBSTRING = 50
PRIORITY_PRIMARY_ALIGNMENT = 20
PRIORITY_SECONDARY_ALIGNMENT = 10

# General scoring field weights
WEIGHT_NAME = 15
WEIGHT_DESCRIPTION = 8
WEIGHT_KEYWORDS = 10
WEIGHT_USES = 6
WEIGHT_SEARCH_TERMS = 12
WEIGHT_CATEGORY_NAME = 7
WEIGHT_FEATURES = 5

# Intent -> {category_key: boost}
INTENT_CATEGORY_BOOSTS: Dict[str, Dict[str, float]] = {
    "diy_kit_inquiry": {"diy_kits": 20},
    "ready_products": {"ready_to_use_chemicals": 15},
    "raw_materials": {"chemical_raw_materials": 15},
    "fabric_care_inquiry": {"diy_kits": 5, "ready_to_use_chemicals": 5},
    "floor_cleaner_inquiry": {"ready_to_use_chemicals": 5},
    "dish_cleaner_inquiry": {"ready_to_use_chemicals": 5},
    "toilet_cleaner_inquiry": {"ready_to_use_chemicals": 5},
}
FRAGRANCE_KEYWORD_BOOST = 10

CLEANING_TOOL_KEYWORDS: Tuple[str, ...] = (
    "broom", "brush", "mop", "wiper", "squeegee", "scrubber", "duster", "sweeper",
)
REMOTE_CLEANING_TOOL_BOOST = 30

# Intent -> storefront category name used for live listings
REMOTE_CATEGORY_NAMES: Dict[str, str] = {
    "broom_inquiry": "Brooms",
    "brush_inquiry": "Brushes",
    "mop_inquiry": "Mops",
    "wiper_inquiry": "Wipers",
    "cleaning_tools_inquiry": "Cleaning Tools",
    "container_inquiry": "Containers",
    "diy_kit_inquiry": "DIY Kits",
}

POPULAR_FALLBACK_MIN = 50
POPULAR_PRODUCTS_MIN = 70

FAQ_KEYWORDS: Tuple[str, ...] = (
    "how", "what", "when", "where", "can i", "do you",
    "working hours", "contact", "address", "phone", "email",
    "franchise", "training", "delivery", "payment", "order",
    "samples", "catalogue", "formulation", "customiz",
)
