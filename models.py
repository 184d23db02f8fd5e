"""
Data models for the OmnIA shopping assistant.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Tuple


class Intent(Enum):
    SIMPLE_CHAT   = "simple_chat"
    PRODUCT_CHAT  = "product_chat"
    PRODUCT_SHOW  = "product_show"


class SearchIntent(Enum):
    PRODUCT_SEARCH      = "product_search"
    NEED_QUALIFICATION  = "need_qualification"


class ChatMode(Enum):
    CONVERSATION  = "conversation"
    PRODUCT_SHOW  = "product_show"


MESSAGE_ROLES = ("user", "assistant", "system")

# Widget / transcript spellings of the assistant role
ASSISTANT_ROLE_ALIASES = ("bot", "ai", "agent", "model", "omnia")


@dataclass
class ChatMessage:
    role: str
    content: str

    def __post_init__(self):
        # Completion APIs reject any role outside MESSAGE_ROLES
        role = str(self.role or "").strip().lower()
        if role in ASSISTANT_ROLE_ALIASES:
            role = "assistant"
        self.role = role if role in MESSAGE_ROLES else "user"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatMessage":
        # Session transcripts store the text under "message"
        content = data.get("content")
        if content is None:
            content = data.get("message", "")
        return cls(role=str(data.get("role", "user")), content=str(content or ""))

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class PriceRange:
    min: Optional[float] = None
    max: Optional[float] = None

    def is_empty(self) -> bool:
        return self.min is None and self.max is None

    def to_dict(self) -> Dict[str, float]:
        d = {}
        if self.min is not None: d["min"] = self.min
        if self.max is not None: d["max"] = self.max
        return d


@dataclass
class AttributeFilter:
    intent: SearchIntent = SearchIntent.NEED_QUALIFICATION

    # Primary search anchor
    type: Optional[str] = None
    query: Optional[str] = None

    # Attributes
    style: Optional[str] = None
    color: Optional[str] = None
    material: Optional[str] = None
    room: Optional[str] = None
    shape: Optional[str] = None
    size: Optional[str] = None
    price_range: Optional[PriceRange] = None

    # Flags
    on_sale: bool = False
    in_stock: bool = False

    @property
    def is_search(self) -> bool:
        return self.intent == SearchIntent.PRODUCT_SEARCH

    def to_dict(self) -> Dict[str, Any]:
        """Compact dict with only the attributes that were found."""
        d: Dict[str, Any] = {"intent": self.intent.value}
        for name in ("type", "query", "style", "color", "material", "room", "shape", "size"):
            value = getattr(self, name)
            if value:
                d[name] = value
        if self.price_range and not self.price_range.is_empty():
            d["price_range"] = self.price_range.to_dict()
        if self.on_sale:  d["on_sale"] = True
        if self.in_stock: d["in_stock"] = True
        return d


@dataclass
class Product:
    id: str
    title: str
    price: float = 0.0
    compare_at_price: Optional[float] = None
    category: str = ""
    sub_category: str = ""
    product_type: str = ""
    vendor: str = ""

    # Merchandising / AI-derived attributes
    style: Optional[str] = None
    color: Optional[str] = None
    ai_color: Optional[str] = None
    material: Optional[str] = None
    ai_material: Optional[str] = None
    ai_shape: Optional[str] = None
    room: Optional[str] = None
    tags: str = ""
    description: Optional[str] = None
    chat_text: Optional[str] = None

    # Dimensions
    smart_width: Optional[float] = None
    smart_height: Optional[float] = None
    smart_length: Optional[float] = None
    smart_width_unit: Optional[str] = None
    smart_height_unit: Optional[str] = None
    smart_length_unit: Optional[str] = None

    # Storefront
    image_url: Optional[str] = None
    inventory_quantity: Optional[int] = None
    currency: Optional[str] = None
    handle: Optional[str] = None
    shop_name: Optional[str] = None
    store_id: Optional[str] = None
    seller_id: Optional[str] = None

    @property
    def color_value(self) -> Optional[str]:
        return self.ai_color or self.color

    @property
    def material_value(self) -> Optional[str]:
        return self.ai_material or self.material

    @property
    def is_on_sale(self) -> bool:
        return self.compare_at_price is not None and self.compare_at_price > self.price

    @property
    def in_stock(self) -> Optional[bool]:
        if self.inventory_quantity is None:
            return None
        return self.inventory_quantity > 0


@dataclass
class ScoredProduct:
    product: Product
    relevance_score: int


@dataclass
class CatalogQuery:
    """A read against the products table, executed by a catalog client."""
    table: str
    select: str = "*"
    equals: Dict[str, str] = field(default_factory=dict)
    # Each group is OR-ed internally; groups are AND-ed together
    or_groups: List[List[Tuple[str, str]]] = field(default_factory=list)
    # (column, operator, value) with operator in gt/gte/lt/lte
    ranges: List[Tuple[str, str, float]] = field(default_factory=list)
    limit: int = 12
    description: str = ""


@dataclass
class ChatResponse:
    content: str
    intent: Intent
    mode: ChatMode
    products: List[Product] = field(default_factory=list)
    search_filters: Optional[AttributeFilter] = None
    role: str = "assistant"
    sector: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)
