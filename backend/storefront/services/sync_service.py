from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.models.cart import Cart
from storefront.services.results import CartResult


@dataclass
class CartLineView:
    item_id: int
    variant_id: int
    sku: str
    name: str
    quantity: int
    unit_price_cents: int
    total_price_cents: int
    currency: str


@dataclass
class CartSummary:
    total_quantity: int = 0
    total_price_cents: int = 0
    currency: str = settings.DEFAULT_CURRENCY
    items_count: int = 0
    lines: List[CartLineView] = field(default_factory=list)


class CartSyncService:
    """Read-only summary of a cart after a mutation, for the rendering layer."""

    def __init__(self, db: Session):
        self.db = db

    def call(
        self,
        cart: Optional[Cart],
        notification: Optional[str] = None,
        variant=None,
        cleared_variants=None,
    ) -> CartResult:
        if cart is not None and cart.id is not None:
            self.db.expire(cart)
        return CartResult.ok(
            cart=cart,
            notification=notification,
            variant=variant,
            cleared_variants=cleared_variants or [],
            summary=self.summarize(cart),
        )

    @staticmethod
    def summarize(cart: Optional[Cart]) -> CartSummary:
        if cart is None:
            return CartSummary()
        lines = [
            CartLineView(
                item_id=it.id,
                variant_id=it.variant_id,
                sku=it.variant.sku,
                name=it.variant.display_name,
                quantity=it.quantity,
                unit_price_cents=it.unit_price_cents,
                total_price_cents=it.total_price_cents,
                currency=it.price_snapshot_currency,
            )
            for it in cart.items
        ]
        return CartSummary(
            total_quantity=sum(line.quantity for line in lines),
            total_price_cents=sum(line.total_price_cents for line in lines),
            currency=lines[0].currency if lines else settings.DEFAULT_CURRENCY,
            items_count=len(lines),
            lines=lines,
        )
