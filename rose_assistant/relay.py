import logging
import time
from typing import Callable, Dict, List, Optional, Tuple

from . import settings
from .analytics import AnalyticsSink
from .catalog_loader import Catalog, get_catalog
from .errors import OutboundMessageError, ReplyGenerationError
from .intent import classify
from .knowledge_base import KnowledgeBase, is_faq_query
from .log import get_logger, log_event
from .models import KnowledgeEntry, Product, RelayResult
from .prompt import build_messages, fallback_reply, generate_reply
from .ranker import ProductRanker
from .remote_catalog import WebsiteCatalogClient
from .sessions import SessionStore
from .whatsapp import WhatsAppClient


logger = get_logger(__name__)

# messages, language -> reply text
Generator = Callable[[List[Dict[str, str]], str], str]

# Intents answered from the knowledge base first.
KNOWLEDGE_INTENTS = {
    "greeting",
    "franchise",
    "contact",
    "working_hours",
    "technical_support",
    "samples",
    "ordering",
}


def prefers_knowledge(intent: str) -> bool:
    return intent in KNOWLEDGE_INTENTS or intent.startswith("faq_")


class ChatRelay:
    """Turns one inbound WhatsApp text into one outbound reply.

    ``process`` and ``handle_message`` never raise: collaborator failures
    are logged and the reply degrades to the templated fallback.
    """

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        remote: Optional[WebsiteCatalogClient] = None,
        sessions: Optional[SessionStore] = None,
        responder: Optional[WhatsAppClient] = None,
        analytics: Optional[AnalyticsSink] = None,
        generate: Optional[Generator] = None,
        product_limit: int = 5,
        faq_limit: int = 3,
    ):
        self.catalog = catalog if catalog is not None else get_catalog()
        self.ranker = ProductRanker(self.catalog.products, remote=remote, default_limit=product_limit)
        self.knowledge = KnowledgeBase(self.catalog.knowledge)
        self.sessions = sessions if sessions is not None else SessionStore()
        self.responder = responder
        self.analytics = analytics
        self.generate = generate
        self.faq_limit = faq_limit

    def _faq_matches(self, text: str, intent: str) -> List[KnowledgeEntry]:
        if not (is_faq_query(text) or prefers_knowledge(intent)):
            return []
        return self.knowledge.search(text, self.faq_limit)

    def _reply(self, text: str, intent: str, language: str, products: List[Product],
               faq: List[KnowledgeEntry], history) -> Tuple[str, bool]:
        prefer_faq = prefers_knowledge(intent)
        if self.generate is not None:
            messages = build_messages(text, intent, language, products, faq, history)
            try:
                return generate_reply(self.generate, messages, language), False
            except ReplyGenerationError as e:
                log_event(logger, "reply_generation_failed", level=logging.WARNING,
                          intent=intent, error=e.message, details=e.details)
        return fallback_reply(intent, language, products, faq, prefer_faq=prefer_faq), True

    def process(self, phone_number: str, text: str) -> RelayResult:
        start = time.perf_counter()
        text = text or ""
        conv = self.sessions.get_or_create(phone_number)
        language = conv.language or settings.DEFAULT_LANGUAGE
        history = self.sessions.recent(phone_number)

        intent = classify(text)
        products = self.ranker.rank(text, intent)
        faq = self._faq_matches(text, intent)
        reply, used_fallback = self._reply(text, intent, language, products, faq, history)

        self.sessions.append(phone_number, "user", text)
        self.sessions.append(phone_number, "assistant", reply)
        self.sessions.record_intent(phone_number, intent)

        elapsed_ms = (time.perf_counter() - start) * 1000
        log_event(logger, "message_processed", intent=intent, language=language,
                  products=len(products), faq=len(faq), fallback=used_fallback,
                  duration_ms=int(elapsed_ms))
        return RelayResult(
            reply=reply,
            intent=intent,
            products=products,
            faq_matches=faq,
            used_fallback=used_fallback,
            meta={"response_ms": elapsed_ms},
        )

    def _send(self, phone_number: str, reply: str) -> None:
        if self.responder is None:
            return
        try:
            self.responder.send_message(phone_number, reply)
        except OutboundMessageError as e:
            log_event(logger, "send_failed", level=logging.ERROR, status=e.status_code, details=e.details)

    def _track(self, phone_number: str, text: str, result: RelayResult) -> None:
        if self.analytics is None:
            return
        try:
            conv = self.sessions.get_or_create(phone_number)
            self.analytics.log_interaction(
                phone_number,
                text,
                result.reply,
                conv.language,
                result.intent,
                int(result.meta.get("response_ms", 0)),
                products_found=len(result.products),
                conversation_length=len(conv.messages),
            )
        except Exception as e:
            logger.error("analytics sink failed: %s", e)

    def handle_message(self, phone_number: str, text: str) -> str:
        """Process, send and track one inbound message; returns the reply text."""
        result = self.process(phone_number, text)
        self._send(phone_number, result.reply)
        self._track(phone_number, text, result)
        return result.reply


def build_default_relay(generate: Optional[Generator] = None) -> ChatRelay:
    """Relay wired from settings: bundled catalog, storefront client when enabled, WhatsApp sender, JSONL analytics."""
    remote = WebsiteCatalogClient() if settings.WEBSITE_API_ENABLED else None
    return ChatRelay(
        catalog=get_catalog(),
        remote=remote,
        responder=WhatsAppClient(),
        analytics=AnalyticsSink(),
        generate=generate,
    )
