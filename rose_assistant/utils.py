import math
import re
import unicodedata
import urllib.parse
from typing import Any, List, Optional

from . import settings
from .models import Product


_PRICE_NOISE = re.compile(r"(?i)(rs\.?|inr|mrp|,|\s)")


def get_product_link(product: Product) -> dict:
    """
    Return a link dict for the storefront either as a direct product URL or a search URL.
    {"type": "direct"|"search", "url": "..."}
    """
    base = settings.WEBSITE_API_URL.rstrip("/")
    if product.url:
        return {"type": "direct", "url": product.url}
    if product.slug:
        return {"type": "direct", "url": f"{base}/product/{urllib.parse.quote(product.slug)}"}
    q = product.name or product.id
    return {"type": "search", "url": f"{base}/search?q=" + urllib.parse.quote(q)}


def _to_float(raw: Any) -> Optional[float]:
    # Finite numbers only; currency symbols (Unicode category Sc) and "Rs"/"INR"/"MRP" are stripped.
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = "".join(ch for ch in str(raw) if unicodedata.category(ch) != "Sc")
        try:
            value = float(_PRICE_NOISE.sub("", text))
        except ValueError:
            return None
    return value if math.isfinite(value) else None


def parse_price(raw: Any) -> float:
    """Coerce a storefront price ("₹1,100", "Rs. 250.50", "$99", 99) to a float; 0.0 if unparseable."""
    value = _to_float(raw)
    return 0.0 if value is None else value


def as_str_list(value: Any) -> List[str]:
    """Accept a list, a comma separated string or nothing and return a clean list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    if isinstance(value, dict):
        return [f"{k}: {v}" for k, v in value.items()]
    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for v in value:
            if isinstance(v, dict):
                v = v.get("name") or v.get("title")
            if v is not None and str(v).strip():
                out.append(str(v).strip())
        return out
    return [str(value)]


def optional_float(value: Any) -> Optional[float]:
    if value == "":
        return None
    return _to_float(value)


def truncate(text: str, limit: int, marker: str = "...") -> str:
    text = text or ""
    return text if len(text) <= limit else text[:limit] + marker
