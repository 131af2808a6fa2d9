import re
import string
from typing import List, Tuple

from .taxonomy import DEFAULT_INTENT, INTENT_TAXONOMY, LISTING_BOOST, LISTING_PATTERN


EXACT_MATCH_SCORE = 10
TOKEN_MATCH_SCORE = 5
SUBSTRING_MATCH_SCORE = 2

_LISTING_RE = re.compile(LISTING_PATTERN)
_STRIP_CHARS = string.punctuation + string.whitespace


def normalize_text(text: str) -> str:
    return (text or "").lower().strip(_STRIP_CHARS)


def _tokens(normalized: str) -> List[str]:
    return [tok.strip(string.punctuation) for tok in normalized.split()]


def score_intents(text: str) -> List[Tuple[str, int]]:
    """Score every intent against ``text``, keeping taxonomy declaration order."""
    msg = normalize_text(text)
    tokens = _tokens(msg)
    is_listing = bool(_LISTING_RE.search(msg))

    scores: List[Tuple[str, int]] = []
    for label, keywords in INTENT_TAXONOMY:
        score = 0
        for kw in keywords:
            if kw not in msg:
                continue
            if msg == kw:
                score += EXACT_MATCH_SCORE
            elif kw in tokens:
                score += TOKEN_MATCH_SCORE
            else:
                score += SUBSTRING_MATCH_SCORE
        if is_listing and score > 0:
            score += LISTING_BOOST
        scores.append((label, score))
    return scores


def classify(text: str) -> str:
    """Return the best-scoring intent label, or ``general`` when nothing matches.

    Only a strictly higher score replaces the current best, so ties go to the
    intent declared first.
    """
    best_label, best_score = DEFAULT_INTENT, 0
    for label, score in score_intents(text):
        if score > best_score:
            best_label, best_score = label, score
    return best_label if best_score > 0 else DEFAULT_INTENT
