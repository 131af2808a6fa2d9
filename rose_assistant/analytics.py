import hashlib
import json
import time
from collections import Counter
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import settings
from .log import get_logger


logger = get_logger(__name__)

MESSAGE_PREVIEW = 200


def hash_phone_number(phone_number: str) -> str:
    return hashlib.sha256((phone_number or "").encode("utf-8")).hexdigest()[:8]


class AnalyticsSink:
    """Append-only JSONL interaction log. Writing never raises."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or settings.ANALYTICS_PATH)

    def log_interaction(
        self,
        phone_number: str,
        user_message: str,
        reply: str,
        language: str,
        intent: str,
        response_ms: int,
        products_found: int = 0,
        conversation_length: int = 1,
    ) -> None:
        phone_hash = hash_phone_number(phone_number)
        self.log_event({
            "ts": datetime.utcnow().isoformat(),
            "phone_last4": (phone_number or "")[-4:],
            "phone_hash": phone_hash,
            "intent": intent,
            "user_message": (user_message or "")[:MESSAGE_PREVIEW],
            "reply": (reply or "")[:MESSAGE_PREVIEW],
            "language": language,
            "response_ms": int(response_ms),
            "products_found": int(products_found),
            "conversation_length": int(conversation_length),
            "session_id": f"{phone_hash}_{int(time.time() * 1000)}",
        })

    def log_event(self, event: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(event, ensure_ascii=False) + "\n")
        except (OSError, TypeError, ValueError) as e:
            logger.error("analytics logging error: %s", e)

    def read_events(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        events: List[Dict[str, Any]] = []
        with self.path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    events.append(json.loads(line))
                except ValueError:
                    continue
        return events

    def summarize(self, days: int = 7, now: Optional[datetime] = None) -> Optional[Dict[str, Any]]:
        """Totals over the last ``days``: interactions, unique users, average response time, top intents and languages."""
        cutoff = (now or datetime.utcnow()) - timedelta(days=days)
        recent = []
        for ev in self.read_events():
            try:
                ts = datetime.fromisoformat(ev.get("ts") or "")
            except (TypeError, ValueError):
                continue
            if ts >= cutoff:
                recent.append(ev)
        if not recent:
            return None
        times = [ev.get("response_ms") or 0 for ev in recent]
        return {
            "total_interactions": len(recent),
            "unique_users": len({ev.get("phone_hash") for ev in recent}),
            "avg_response_ms": round(sum(times) / len(times)),
            "top_intents": Counter(ev.get("intent") for ev in recent).most_common(5),
            "top_languages": Counter(ev.get("language") for ev in recent).most_common(),
        }
