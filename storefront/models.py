from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .catalog import Product
from .segmenter import TextSegment


class ConversationTurn(BaseModel):
    """One entry of the in-memory conversation log."""
    role: Literal["user", "assistant"]
    text: str
    timestamp: float


class ProductOut(BaseModel):
    """Product payload for the storefront views."""
    id: str
    name: str
    price: str
    category: str
    image: str
    description: str
    fabric: str
    care: str
    colors: List[str]

    @classmethod
    def from_product(cls, product: Product) -> "ProductOut":
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            category=product.category.value,
            image=product.image,
            description=product.description,
            fabric=product.fabric,
            care=product.care,
            colors=list(product.colors),
        )


class SegmentOut(BaseModel):
    """Rendered text fragment; product fragments carry the id to open on click."""
    kind: Literal["text", "product"]
    text: str
    product_id: Optional[str] = None

    @classmethod
    def from_segment(cls, segment: TextSegment) -> "SegmentOut":
        return cls(kind=segment.kind, text=segment.text, product_id=segment.product_id)


class TurnOut(BaseModel):
    role: Literal["user", "assistant"]
    text: str
    timestamp: float
    segments: List[SegmentOut]


class ChatRequest(BaseModel):
    """Request payload for chat API."""
    message: str = Field(min_length=1)


class ChatResponse(BaseModel):
    """Response payload returned by the chat API."""
    answer_text: str
    segments: List[SegmentOut]


class CatalogResponse(BaseModel):
    brand: str
    products: List[ProductOut]
    categories: List[str]
    sizes: List[str]
    colors: List[str]


class ProductListResponse(BaseModel):
    count: int
    products: List[ProductOut]


class ProductDetailResponse(BaseModel):
    product: ProductOut
    recommendations: List[ProductOut]


class OrderLinkResponse(BaseModel):
    whatsapp_url: str
    form_url: str


class FilterToggleRequest(BaseModel):
    facet: Literal["category", "size", "color"]
    value: str


class NavigateRequest(BaseModel):
    page: str


class ViewByNameRequest(BaseModel):
    name: str


class WishlistResponse(BaseModel):
    ids: List[str]
    products: List[ProductOut]


class StateResponse(BaseModel):
    """Snapshot of controller state for the presentational layer."""
    page: str
    selected_categories: List[str]
    selected_sizes: List[str]
    selected_colors: List[str]
    filters_active: bool
    wishlist_ids: List[str]
    wishlist_count: int
    selected_product: Optional[ProductOut] = None
