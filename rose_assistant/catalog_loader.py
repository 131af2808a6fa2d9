import json
import os
from functools import lru_cache
from typing import Any, Dict, List, Optional

from . import settings
from .log import get_logger
from .models import Category, KnowledgeEntry, Product
from .taxonomy import POPULAR_PRODUCTS_MIN
from .utils import as_str_list, optional_float


logger = get_logger(__name__)

# Knowledge base sections in the order they are searched.
KNOWLEDGE_SECTIONS = [
    "product_kits",
    "formulations",
    "franchise",
    "ordering_delivery_payment",
    "training_safety",
    "contact_information",
    "working_hours",
    "general",
]


def product_from_local(raw: Dict[str, Any], category_key: str, category_name: str) -> Product:
    """Map a catalog.json product record (``mrp``, ``search_metadata``) onto ``Product``."""
    meta = raw.get("search_metadata") or {}
    price = raw.get("mrp") if raw.get("mrp") is not None else raw.get("price")
    return Product(
        id=str(raw.get("id") or raw.get("slug") or raw.get("name") or ""),
        name=raw.get("name"),
        price=optional_float(price),
        description=raw.get("description"),
        uses=as_str_list(raw.get("uses")),
        keywords=as_str_list(raw.get("keywords")),
        features=as_str_list(raw.get("features")),
        search_terms=as_str_list(meta.get("search_terms")),
        category_key=category_key,
        category_name=category_name,
        popularity_score=optional_float(meta.get("popularity_score") or raw.get("popularity_score")) or 0.0,
        source="local",
        yield_=raw.get("yield"),
        cost_per_liter=optional_float(raw.get("cost_per_liter")),
        manufacturing_time=raw.get("manufacturing_time"),
        fragrances=as_str_list(raw.get("fragrances")),
        kit_contents=as_str_list(raw.get("kit_contents")),
        related_products=as_str_list(raw.get("related_products")),
        slug=raw.get("slug"),
        url=raw.get("url"),
    )


def _entry(raw: Dict[str, Any], section: str) -> KnowledgeEntry:
    return KnowledgeEntry(
        question=raw.get("question") or "",
        answer=raw.get("answer") or "",
        keywords=as_str_list(raw.get("keywords")),
        priority=float(raw.get("priority") or 0),
        section=section,
    )


def flatten_knowledge_base(kb: Dict[str, Any]) -> List[KnowledgeEntry]:
    """Flatten the named sections into one list: main menu greeting first, then known sections, then the rest."""
    entries: List[KnowledgeEntry] = []
    greeting = (kb.get("main_menu") or {}).get("greeting")
    if isinstance(greeting, dict):
        entries.append(_entry(greeting, "main_menu"))
    ordered = KNOWLEDGE_SECTIONS + [k for k in kb if k not in KNOWLEDGE_SECTIONS and k != "main_menu"]
    for section in ordered:
        items = kb.get(section)
        if not isinstance(items, list):
            continue
        for item in items:
            if isinstance(item, dict):
                entries.append(_entry(item, section))
    return entries


class Catalog:
    """Immutable snapshot of categories and the knowledge base."""

    def __init__(self, categories: Optional[List[Category]] = None, knowledge: Optional[List[KnowledgeEntry]] = None):
        self.categories: Dict[str, Category] = {c.key: c for c in (categories or [])}
        self.products: List[Product] = [p for c in self.categories.values() for p in c.products]
        self.knowledge: List[KnowledgeEntry] = list(knowledge or [])
        self._by_id: Dict[str, Product] = {}
        for p in self.products:
            self._by_id.setdefault(p.id, p)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Catalog":
        categories: List[Category] = []
        for key, body in (data.get("categories") or {}).items():
            if not isinstance(body, dict):
                continue
            name = body.get("name") or key
            products = []
            for raw in body.get("products") or []:
                if isinstance(raw, dict):
                    products.append(product_from_local(raw, key, name))
            categories.append(Category(key=key, name=name, products=products))
        knowledge = flatten_knowledge_base(data.get("knowledge_base") or {})
        return cls(categories, knowledge)

    def complete_products(self) -> List[Product]:
        return [p for p in self.products if p.is_complete]

    def get_product(self, product_id: str) -> Optional[Product]:
        return self._by_id.get(product_id)

    def related_products(self, product_id: str, limit: int = 3) -> List[Product]:
        product = self.get_product(product_id)
        if not product or not product.related_products:
            return []
        related = [self.get_product(pid) for pid in product.related_products]
        return [p for p in related if p is not None][:limit]

    def category_products(self, category_key: str, limit: int = 10) -> List[Product]:
        category = self.categories.get(category_key)
        if not category:
            return []
        return [p for p in category.products if p.is_complete][:limit]

    def popular_products(self, limit: int = 5) -> List[Product]:
        popular = [p for p in self.complete_products() if p.popularity_score > POPULAR_PRODUCTS_MIN]
        popular.sort(key=lambda p: p.popularity_score, reverse=True)
        return popular[:limit]


def load_catalog(path: Optional[str] = None) -> Catalog:
    """Read a catalog document from disk. A missing or malformed file yields an empty catalog."""
    path = path or settings.CATALOG_PATH
    if not os.path.exists(path):
        logger.warning("catalog file not found: %s", path)
        return Catalog()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error("failed to load catalog %s: %s", path, e)
        return Catalog()
    if not isinstance(data, dict):
        logger.error("catalog %s is not a JSON object", path)
        return Catalog()
    catalog = Catalog.from_dict(data)
    logger.info("loaded %d products in %d categories, %d knowledge entries",
                len(catalog.products), len(catalog.categories), len(catalog.knowledge))
    return catalog


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    return load_catalog()
