import json
import os
import re
from typing import Any, Dict, List, Optional, Sequence

from . import settings
from .errors import ReplyGenerationError
from .formatter import contextual_response, format_response, format_price, no_results_message
from .log import get_logger
from .models import ChatMessage, KnowledgeEntry, Product


logger = get_logger(__name__)

LANGUAGE_NAMES = {
    "en-IN": "English",
    "ta-IN": "Tamil",
    "hi-IN": "Hindi",
    "ml-IN": "Malayalam",
    "te-IN": "Telugu",
    "kn-IN": "Kannada",
}

PROMPT_FILE = "system_support_agent.txt"


def _load_system_prompt() -> str:
    path = os.path.join(settings.PROMPT_BASE, PROMPT_FILE)
    try:
        if os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
    except OSError as e:
        logger.warning("could not read prompt file %s: %s", path, e)
    return (
        "You are the WhatsApp assistant for Rose Chemicals, a supplier of DIY cleaning-product "
        "manufacturing kits, chemical raw materials, ready-to-use cleaners and cleaning tools. "
        "You help customers pick products, understand prices, yields and cost per litre, and answer "
        "questions about franchise, training, ordering, delivery and payment."
        "\nRULES\n"
        "- Reply in the language named in BACKEND_CONTEXT.language.\n"
        "- Recommend ONLY products listed in BACKEND_CONTEXT.products and quote their prices exactly.\n"
        "- If `faq_answers` are provided, treat them as the source of truth for policy questions; "
        "do not invent fees, timelines or terms that are not there.\n"
        "- If the products list is empty, say so and suggest DIY Kits, Raw Materials or Ready-to-use products.\n"
        "- Keep replies short and easy to read on WhatsApp: short lines, simple bullets, no long paragraphs.\n"
        "- Do not include URLs.\n"
        f"- For anything you cannot answer, ask the customer to call {settings.SUPPORT_PHONE}.\n"
    )


SYSTEM_PROMPT = _load_system_prompt()


def redact_pii(text: str) -> str:
    t = text or ""
    t = re.sub(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}", "[redacted-email]", t)
    t = re.sub(r"(?:\+?91[\s-]?)?\b[6-9]\d{4}[\s-]?\d{5}\b", "[redacted-phone]", t)
    return t


def language_name(language: str) -> str:
    return LANGUAGE_NAMES.get(language, LANGUAGE_NAMES[settings.DEFAULT_LANGUAGE])


def _product_context(p: Product) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "name": p.name,
        "price": p.price,
        "category": p.category_name or p.category_key,
        "description": p.description,
    }
    if p.yield_:
        d["yield"] = p.yield_
    if p.cost_per_liter is not None:
        d["cost_per_liter"] = p.cost_per_liter
    if p.fragrances:
        d["fragrances"] = p.fragrances
    if p.kit_contents:
        d["kit_contents"] = p.kit_contents
    return d


def build_backend_context(
    intent: str,
    language: str,
    products: Sequence[Product],
    faq_entries: Sequence[KnowledgeEntry] = (),
) -> Dict[str, Any]:
    framing = contextual_response(intent)
    return {
        "intent": intent,
        "language": language_name(language),
        "products": [_product_context(p) for p in products],
        "faq_answers": [{"question": e.question, "answer": e.answer} for e in faq_entries] or None,
        "reply_prefix": framing["prefix"],
        "reply_suffix": framing["suffix"],
    }


def build_messages(
    user_text: str,
    intent: str,
    language: str,
    products: Sequence[Product] = (),
    faq_entries: Sequence[KnowledgeEntry] = (),
    history: Optional[Sequence[ChatMessage]] = None,
) -> List[Dict[str, str]]:
    """Chat messages for the external model: system prompt, backend context, recent turns, then the user text."""
    context = build_backend_context(intent, language, products, faq_entries)
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "system", "content": "BACKEND_CONTEXT: " + json.dumps(context, ensure_ascii=False)},
    ]
    for m in history or []:
        content = redact_pii(m.content) if m.role == "user" else m.content
        messages.append({"role": m.role, "content": content})
    messages.append({"role": "user", "content": redact_pii(user_text)})
    return messages


def fallback_reply(
    intent: str,
    language: str,
    products: Sequence[Product] = (),
    faq_entries: Sequence[KnowledgeEntry] = (),
    prefer_faq: bool = False,
) -> str:
    """Templated reply grounded in the ranked products and FAQ matches."""
    if faq_entries and (prefer_faq or not products):
        answer = faq_entries[0].answer
        if products:
            top = products[0]
            answer += f"\n\n🛒 {top.name} - ₹{format_price(top.price)}"
        return answer
    if not products:
        return no_results_message(language)
    return format_response(products, intent, language)


def generate_reply(generate, messages: List[Dict[str, str]], language: str) -> str:
    """Call the external text generator; any failure or empty output becomes ``ReplyGenerationError``."""
    try:
        text = generate(messages, language)
    except Exception as e:
        raise ReplyGenerationError("reply generation failed", {"error": str(e)}) from e
    if not isinstance(text, str) or not text.strip():
        raise ReplyGenerationError("reply generation returned no text")
    return text.strip()
