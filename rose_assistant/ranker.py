import logging
import string
from typing import Iterable, List, Optional, Sequence, Tuple

from . import taxonomy as tx
from .log import get_logger, log_event
from .models import Product, ScoredProduct


logger = get_logger(__name__)

MIN_TERM_LENGTH = 3


def tokenize(query: str) -> List[str]:
    """Lower-cased whitespace tokens, punctuation stripped, shorter than 3 chars dropped."""
    tokens = (query or "").lower().split()
    terms = [t.strip(string.punctuation) for t in tokens]
    return [t for t in terms if len(t) >= MIN_TERM_LENGTH]


def _term_variants(term: str) -> List[str]:
    # brooms -> broom, brushes -> brush
    variants = [term]
    if term.endswith("es") and len(term) > 4:
        variants.append(term[:-2])
    if term.endswith("s") and len(term) > 3:
        variants.append(term[:-1])
    return variants


# Remote catalog

def fetch_remote_products(remote, query: str, intent: str) -> List[Product]:
    """Ask the storefront for candidates with a single call. Any failure is logged and yields []."""
    if remote is None:
        return []
    try:
        category_name = tx.REMOTE_CATEGORY_NAMES.get(intent)
        if intent in tx.PRIORITY_INTENTS and category_name:
            found = remote.products_by_category(category_name)
        elif tokenize(query):
            found = remote.search_products(query)
        else:
            found = remote.featured_products()
        return [p for p in found if isinstance(p, Product)]
    except Exception as e:
        log_event(logger, "remote_catalog_unavailable", level=logging.WARNING, intent=intent, error=str(e))
        return []


def merge_catalogs(local: Sequence[Product], remote: Iterable[Product]) -> List[Product]:
    """Local products first; remote ones are appended unless their id or name is already present."""
    merged = list(local)
    seen_ids = {p.id for p in merged}
    seen_names = {(p.name or "").strip().lower() for p in merged}
    for p in remote:
        name_key = (p.name or "").strip().lower()
        if p.id in seen_ids or name_key in seen_names:
            continue
        merged.append(p)
        seen_ids.add(p.id)
        seen_names.add(name_key)
    return merged


def candidate_pool(catalog: Iterable[Product]) -> List[Product]:
    return [p for p in catalog if p.is_complete]


# Empty-query fallback

def products_by_intent(intent: str, products: Sequence[Product], limit: int) -> List[ScoredProduct]:
    categories = tx.INTENT_CATEGORIES.get(intent)
    if categories:
        filtered = [p for p in products if p.category_key in categories]
    else:
        filtered = [p for p in products if p.popularity_score > tx.POPULAR_FALLBACK_MIN]
    ordered = sorted(filtered, key=lambda p: p.popularity_score, reverse=True)
    return [ScoredProduct(item=p, score=p.popularity_score) for p in ordered[:max(limit, 0)]]


# Priority pass

def _name_match_score(name: str, term: str) -> int:
    best = 0
    for variant in _term_variants(term):
        if name == variant:
            score = tx.PRIORITY_EXACT_NAME
        elif name.startswith(variant):
            score = tx.PRIORITY_NAME_PREFIX
        elif variant in name:
            score = tx.PRIORITY_NAME_SUBSTRING
        else:
            score = 0
        best = max(best, score)
    return best


def _alignment_bonus(intent: str, product: Product) -> int:
    categories = tx.INTENT_CATEGORIES.get(intent) or ()
    if not categories or product.category_key not in categories:
        return 0
    if product.category_key == categories[0]:
        return tx.PRIORITY_PRIMARY_ALIGNMENT
    return tx.PRIORITY_SECONDARY_ALIGNMENT


def priority_pass(terms: Sequence[str], intent: str, products: Sequence[Product], limit: int) -> List[ScoredProduct]:
    """Name-only scoring restricted to the intent's categories.

    Returns an empty list when no product clears the threshold, in which case
    general scoring takes over.
    """
    categories = tx.INTENT_CATEGORIES.get(intent) or ()
    scored: List[ScoredProduct] = []
    for p in products:
        if p.category_key not in categories:
            continue
        name = (p.name or "").lower()
        name_score = sum(_name_match_score(name, t) for t in terms)
        if name_score <= 0:
            continue
        total = name_score + _alignment_bonus(intent, p)
        if total > tx.PRIORITY_THRESHOLD:
            scored.append(ScoredProduct(item=p, score=total))
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored[:max(limit, 0)]


# General scoring

def _searchable_fields(product: Product) -> List[Tuple[str, int, bool]]:
    return [
        (product.name or "", tx.WEIGHT_NAME, True),
        (product.description or "", tx.WEIGHT_DESCRIPTION, False),
        (" ".join(product.keywords), tx.WEIGHT_KEYWORDS, False),
        (" ".join(product.uses), tx.WEIGHT_USES, False),
        (" ".join(product.search_terms), tx.WEIGHT_SEARCH_TERMS, False),
        (product.category_name or "", tx.WEIGHT_CATEGORY_NAME, False),
        (" ".join(product.features), tx.WEIGHT_FEATURES, False),
    ]


def intent_boost(intent: str, product: Product) -> float:
    boost = tx.INTENT_CATEGORY_BOOSTS.get(intent, {}).get(product.category_key, 0)
    if intent == "fragrance" and any("fragrance" in k.lower() for k in product.keywords):
        boost += tx.FRAGRANCE_KEYWORD_BOOST
    return boost


def mentions_cleaning_tool(text: str) -> bool:
    t = (text or "").lower()
    return any(k in t for k in tx.CLEANING_TOOL_KEYWORDS)


def is_remote_cleaning_tool(product: Product) -> bool:
    if not product.is_remote:
        return False
    haystack = f"{product.name or ''} {product.category_name}".lower()
    return any(k in haystack for k in tx.CLEANING_TOOL_KEYWORDS)


def score_product(product: Product, terms: Sequence[str], intent: str, query: str = "") -> float:
    score = 0.0
    fields = _searchable_fields(product)
    for term in terms:
        for text, weight, is_name in fields:
            if text and term in text.lower():
                # The name field containing the term counts double.
                score += weight * 2 if is_name else weight

    score += intent_boost(intent, product)
    score += product.popularity_score / 10

    if is_remote_cleaning_tool(product) and mentions_cleaning_tool(query):
        score += tx.REMOTE_CLEANING_TOOL_BOOST
    return score


def rank_scored(
    query: str,
    intent: str,
    catalog: Iterable[Product],
    limit: int = 5,
    remote=None,
) -> List[ScoredProduct]:
    """Rank ``catalog`` (plus live storefront results when ``remote`` is given) for ``query``."""
    pool = candidate_pool(catalog)
    if remote is not None:
        pool = merge_catalogs(pool, candidate_pool(fetch_remote_products(remote, query, intent)))

    terms = tokenize(query)
    if not terms:
        return products_by_intent(intent, pool, limit)

    if intent in tx.PRIORITY_INTENTS:
        prioritized = priority_pass(terms, intent, pool, limit)
        if prioritized:
            return prioritized

    scored = [ScoredProduct(item=p, score=score_product(p, terms, intent, query)) for p in pool]
    scored = [s for s in scored if s.score > 0]
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored[:max(limit, 0)]


def rank(
    query: str,
    intent: str,
    catalog: Iterable[Product],
    limit: int = 5,
    remote=None,
) -> List[Product]:
    return [s.item for s in rank_scored(query, intent, catalog, limit, remote)]


class ProductRanker:
    """Binds a catalog snapshot and an optional storefront client."""

    def __init__(self, products: Sequence[Product], remote=None, default_limit: int = 5):
        self.products = list(products)
        self.remote = remote
        self.default_limit = default_limit

    def rank_scored(self, query: str, intent: str, limit: Optional[int] = None) -> List[ScoredProduct]:
        return rank_scored(query, intent, self.products, self.default_limit if limit is None else limit, self.remote)

    def rank(self, query: str, intent: str, limit: Optional[int] = None) -> List[Product]:
        return [s.item for s in self.rank_scored(query, intent, limit)]
