from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import requests
from pydantic import ValidationError

from . import settings
from .cache import TTLCache
from .errors import RemoteCatalogError
from .log import get_logger
from .models import Product
from .utils import as_str_list, optional_float, parse_price


logger = get_logger(__name__)

USER_AGENT = "Rose-Chemicals-WhatsApp-Bot/1.0"


def _slugify(text: str) -> str:
    return "_".join((text or "").lower().replace("&", " ").split())


def product_from_remote(raw: Dict[str, Any]) -> Optional[Product]:
    """Normalize a storefront record (``id|slug``, ``name|title``, ``price|mrp``) into a remote ``Product``.

    Returns None for records that are not objects.
    """
    if not isinstance(raw, dict):
        return None
    name = raw.get("name") or raw.get("title")
    price_raw = raw.get("price") if raw.get("price") is not None else raw.get("mrp")
    category = raw.get("category")
    if isinstance(category, dict):
        category = category.get("name")
    category_name = str(category or "")
    tags = as_str_list(raw.get("tags"))
    meta = raw.get("search_metadata")
    if not isinstance(meta, dict):
        meta = {}
    return Product(
        id=str(raw.get("id") or raw.get("slug") or name or ""),
        name=name,
        price=parse_price(price_raw) if (name and price_raw is not None) else None,
        description=raw.get("description") or raw.get("short_description"),
        keywords=tags,
        features=as_str_list(raw.get("features")),
        search_terms=as_str_list(meta.get("search_terms")) or tags,
        uses=as_str_list(raw.get("uses")),
        category_key=_slugify(category_name) or "remote",
        category_name=category_name,
        popularity_score=optional_float(meta.get("popularity_score") or raw.get("popularity_score")) or 0.0,
        source="remote",
        slug=raw.get("slug"),
        url=raw.get("url") or raw.get("permalink"),
    )


class WebsiteCatalogClient:
    """Read-only client for the storefront's WhatsApp product API.

    Responses are cached for ``cache_ttl`` seconds. Every failure surfaces as
    ``RemoteCatalogError``; callers decide how to degrade.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        cache_ttl: Optional[float] = None,
        session: Optional[requests.Session] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.base_url = (base_url or settings.WEBSITE_API_URL).rstrip("/")
        self.timeout = settings.WEBSITE_API_TIMEOUT if timeout is None else timeout
        ttl = settings.WEBSITE_CACHE_TTL if cache_ttl is None else cache_ttl
        self.cache = TTLCache(ttl, clock) if clock else TTLCache(ttl)
        self.session = session or requests.Session()
        self.headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        }

    # Raw endpoints

    def _get(self, endpoint: str, cache_key: str) -> Dict[str, Any]:
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("cache hit for %s", cache_key)
            return cached
        url = f"{self.base_url}{endpoint}"
        try:
            resp = self.session.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteCatalogError(f"request to {endpoint} failed", {"error": str(e)}) from e
        if resp.status_code < 200 or resp.status_code >= 300:
            raise RemoteCatalogError(f"{endpoint} answered {resp.status_code}", {"status_code": resp.status_code})
        try:
            data = resp.json()
        except ValueError as e:
            raise RemoteCatalogError(f"{endpoint} returned malformed JSON", {"error": str(e)}) from e
        if isinstance(data, list):
            data = {"products": data}
        if not isinstance(data, dict):
            raise RemoteCatalogError(f"{endpoint} returned an unexpected payload", {"type": type(data).__name__})
        self.cache.set(cache_key, data)
        return data

    def _products(self, endpoint: str, cache_key: str) -> List[Product]:
        data = self._get(endpoint, cache_key)
        records = data.get("products") or []
        if not isinstance(records, list):
            raise RemoteCatalogError(f"{endpoint} products field is not a list")
        products = [self._normalize(r, endpoint) for r in records]
        return [p for p in products if p is not None]

    def _normalize(self, raw: Any, endpoint: str) -> Optional[Product]:
        # One malformed record is skipped; the rest of the batch is kept.
        try:
            return product_from_remote(raw)
        except (ValueError, TypeError, ValidationError) as e:
            rid = raw.get("id") or raw.get("slug") if isinstance(raw, dict) else None
            logger.warning("skipping malformed product %r from %s: %s", rid, endpoint, e)
            return None

    # Operations

    def search_products(self, query: str) -> List[Product]:
        q = (query or "").strip()
        if not q:
            return []
        return self._products(f"/api/whatsapp/products/search?query={quote(q, safe='')}", f"search_{q.lower()}")

    def featured_products(self) -> List[Product]:
        return self._products("/api/whatsapp/products/featured", "featured_products")

    def products_by_category(self, category_name: str) -> List[Product]:
        return self._products(
            f"/api/whatsapp/products/category/{quote(category_name, safe='')}", f"category_{category_name}"
        )

    def categories(self) -> List[Dict[str, Any]]:
        data = self._get("/api/whatsapp/categories", "categories")
        cats = data.get("categories") or []
        return [c for c in cats if isinstance(c, dict)] if isinstance(cats, list) else []

    def product_details(self, slug: str) -> Optional[Product]:
        data = self._get(f"/api/whatsapp/product/{quote(slug, safe='')}", f"product_{slug}")
        return self._normalize(data.get("product"), f"/api/whatsapp/product/{slug}")

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("website API cache cleared")

    def health_check(self) -> bool:
        try:
            resp = self.session.get(
                f"{self.base_url}/api/whatsapp/categories",
                headers={"User-Agent": USER_AGENT},
                timeout=5,
            )
        except requests.RequestException as e:
            logger.error("website API health check failed: %s", e)
            return False
        return resp.status_code == 200
