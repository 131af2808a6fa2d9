import json

import pytest

from rose_assistant.catalog_loader import get_catalog
from rose_assistant.errors import ReplyGenerationError
from rose_assistant.formatter import NO_RESULTS
from rose_assistant.models import ChatMessage, KnowledgeEntry
from rose_assistant.prompt import (
    build_backend_context,
    build_messages,
    fallback_reply,
    generate_reply,
    language_name,
    redact_pii,
)


catalog = get_catalog()
kit = catalog.get_product("fabric_conditioner_kit")
faq = KnowledgeEntry(question="How long does delivery take?", answer="3-7 days.", keywords=["delivery"])


def test_redact_pii():
    out = redact_pii("mail me at a.b@example.com or call +91 98765 43210")
    assert "[redacted-email]" in out
    assert "[redacted-phone]" in out
    assert "98765" not in out


def test_backend_context_carries_products_and_faq():
    ctx = build_backend_context("diy_kit_inquiry", "ta-IN", [kit], [faq])
    assert ctx["language"] == "Tamil"
    assert ctx["products"][0]["name"] == "Fabric Conditioner Kit"
    assert ctx["products"][0]["price"] == 1100
    assert ctx["products"][0]["yield"] == "20 litres"
    assert ctx["faq_answers"] == [{"question": faq.question, "answer": faq.answer}]
    assert build_backend_context("general", "en-IN", [])["faq_answers"] is None


def test_build_messages_order():
    history = [
        ChatMessage(role="user", content="hi, my number is 9876543210"),
        ChatMessage(role="assistant", content="Welcome!"),
    ]
    messages = build_messages("fabric kit price?", "price_inquiry", "en-IN", [kit], [], history)
    assert [m["role"] for m in messages] == ["system", "system", "user", "assistant", "user"]
    assert messages[1]["content"].startswith("BACKEND_CONTEXT: ")
    ctx = json.loads(messages[1]["content"][len("BACKEND_CONTEXT: "):])
    assert ctx["intent"] == "price_inquiry"
    assert "9876543210" not in messages[2]["content"]
    assert messages[-1]["content"] == "fabric kit price?"


def test_unknown_language_name_defaults_to_english():
    assert language_name("xx-XX") == "English"


def test_fallback_prefers_faq_for_knowledge_intents():
    reply = fallback_reply("ordering", "en-IN", [kit], [faq], prefer_faq=True)
    assert reply.startswith("3-7 days.")
    assert "Fabric Conditioner Kit - ₹1100" in reply


def test_fallback_lists_products():
    reply = fallback_reply("diy_kit_inquiry", "en-IN", [kit], [faq])
    assert "*Fabric Conditioner Kit*" in reply


def test_fallback_without_anything():
    assert fallback_reply("general", "en-IN") == NO_RESULTS["en-IN"]
    assert fallback_reply("general", "en-IN", [], [faq]) == "3-7 days."


def test_generate_reply_strips_text():
    assert generate_reply(lambda messages, lang: "  hello  ", [], "en-IN") == "hello"


@pytest.mark.parametrize("output", ["", "   ", None, 42])
def test_generate_reply_rejects_empty_output(output):
    with pytest.raises(ReplyGenerationError):
        generate_reply(lambda messages, lang: output, [], "en-IN")


def test_generate_reply_wraps_exceptions():
    def boom(messages, lang):
        raise RuntimeError("quota exceeded")

    with pytest.raises(ReplyGenerationError) as exc:
        generate_reply(boom, [], "en-IN")
    assert exc.value.details["error"] == "quota exceeded"
