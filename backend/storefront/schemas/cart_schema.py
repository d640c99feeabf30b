from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class AddItemIn(BaseModel):
    variant_id: int
    qty: int = 1


class UpdateItemIn(BaseModel):
    action: Literal["increment", "decrement", "set", "add_more"]
    quantity: Optional[int] = None


class CartLineOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    item_id: int
    variant_id: int
    sku: str
    name: str
    quantity: int
    unit_price_cents: int
    total_price_cents: int
    currency: str


class CartOut(BaseModel):
    cart_token: str
    total_quantity: int
    total_price_cents: int
    currency: str
    items_count: int
    items: List[CartLineOut] = Field(default_factory=list)
    notification: Optional[str] = None
    errors: List[str] = Field(default_factory=list)
