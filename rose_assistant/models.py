from datetime import datetime
from enum import Enum
from typing import Dict, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


ProductSource = Literal["local", "remote"]

T = TypeVar("T")


class Product(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Common
    id: str
    name: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None
    uses: List[str] = []
    keywords: List[str] = []
    features: List[str] = []
    # Search metadata published by the storefront
    search_terms: List[str] = []
    category_key: str = ""
    category_name: str = ""
    popularity_score: float = 0.0
    source: ProductSource = "local"

    # DIY kit specific
    yield_: Optional[str] = Field(default=None, alias="yield")
    cost_per_liter: Optional[float] = None
    manufacturing_time: Optional[str] = None
    fragrances: List[str] = []
    kit_contents: List[str] = []
    related_products: List[str] = []

    # Link info
    slug: Optional[str] = None
    url: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        """Only products with both a name and a price may be ranked or shown."""
        return bool(self.name) and self.price is not None

    @property
    def is_remote(self) -> bool:
        return self.source == "remote"


class Category(BaseModel):
    key: str
    name: str
    products: List[Product] = []


class KnowledgeEntry(BaseModel):
    question: str = ""
    answer: str = ""
    keywords: List[str] = []
    priority: float = 0.0
    section: str = ""


class ScoredResult(BaseModel, Generic[T]):
    item: T
    score: float


class ScoredProduct(ScoredResult[Product]):
    pass


class ScoredEntry(ScoredResult[KnowledgeEntry]):
    pass


class InteractionState(str, Enum):
    IDLE = "IDLE"
    AWAITING_LANGUAGE = "AWAITING_LANGUAGE"


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class Conversation(BaseModel):
    phone_number: str
    messages: List[ChatMessage] = []
    language: str = "en-IN"
    interaction_state: InteractionState = InteractionState.IDLE
    last_intent: str = "general"
    total_interactions: int = 0
    last_updated: datetime = Field(default_factory=datetime.utcnow)


class RelayResult(BaseModel):
    reply: str
    intent: str
    products: List[Product] = []
    faq_matches: List[KnowledgeEntry] = []
    used_fallback: bool = False
    meta: Dict[str, float] = {}
