import re
from functools import lru_cache
from typing import List, Optional, Sequence

from .catalog_loader import get_catalog
from .models import KnowledgeEntry, ScoredEntry
from .taxonomy import FAQ_KEYWORDS


KEYWORD_SCORE = 10
QUESTION_PREFIX_SCORE = 15
QUESTION_PREFIX_CHARS = 20

# Word-start match: "how" must not fire inside "show", while "customiz" still
# catches "customize" and "customization".
_FAQ_RE = re.compile(r"\b(?:" + "|".join(re.escape(k) for k in FAQ_KEYWORDS) + r")")


def score_entry(entry: KnowledgeEntry, query: str) -> float:
    q = (query or "").lower()
    score = 0.0
    for kw in entry.keywords:
        if kw and kw.lower() in q:
            score += KEYWORD_SCORE
    prefix = (entry.question or "").lower()[:QUESTION_PREFIX_CHARS]
    if prefix and prefix in q:
        score += QUESTION_PREFIX_SCORE
    score += (entry.priority or 0) / 10
    return score


def is_faq_query(text: str) -> bool:
    """True when the message reads like a question for the FAQ rather than a product lookup."""
    return bool(_FAQ_RE.search((text or "").lower()))


class KnowledgeBase:
    """Keyword search over the flattened FAQ sections."""

    def __init__(self, entries: Sequence[KnowledgeEntry]):
        self.entries = list(entries)

    def search_scored(self, query: str, max_results: int = 3) -> List[ScoredEntry]:
        scored = [ScoredEntry(item=e, score=score_entry(e, query)) for e in self.entries]
        scored = [s for s in scored if s.score > 0]
        scored.sort(key=lambda s: s.score, reverse=True)
        return scored[:max(max_results, 0)]

    def search(self, query: str, max_results: int = 3) -> List[KnowledgeEntry]:
        return [s.item for s in self.search_scored(query, max_results)]

    def get_answer(self, query: str) -> Optional[str]:
        """Answer of the single best match, or None."""
        results = self.search(query, 1)
        if not results:
            return None
        return results[0].answer

    def entries_in_section(self, section: str) -> List[KnowledgeEntry]:
        return [e for e in self.entries if e.section == section]

    def __len__(self) -> int:
        return len(self.entries)


@lru_cache(maxsize=1)
def get_knowledge_base() -> KnowledgeBase:
    return KnowledgeBase(get_catalog().knowledge)


def search_knowledge_base(query: str, max_results: int = 3) -> List[KnowledgeEntry]:
    return get_knowledge_base().search(query, max_results)
