from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from storefront.db import Base


class CartItem(Base):
    __tablename__ = "cart_items"
    id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(
        Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    variant_id = Column(
        Integer, ForeignKey("product_variants.id"), nullable=False, index=True
    )
    quantity = Column(Integer, nullable=False, default=1)
    # unit price frozen when the line is first created
    price_snapshot_cents = Column(Integer, nullable=False, default=0)
    price_snapshot_currency = Column(String(3), nullable=False, default="USD")
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    cart = relationship("Cart", back_populates="items")
    variant = relationship("ProductVariant", lazy="joined")

    __table_args__ = (
        UniqueConstraint("cart_id", "variant_id", name="uq_cart_items_cart_variant"),
        CheckConstraint("quantity > 0", name="ck_cart_items_quantity_positive"),
        CheckConstraint("price_snapshot_cents >= 0", name="ck_cart_items_price_non_negative"),
    )

    @property
    def unit_price_cents(self) -> int:
        return self.price_snapshot_cents

    @property
    def total_price_cents(self) -> int:
        return self.price_snapshot_cents * self.quantity

    def __repr__(self):
        return f"<CartItem cart={self.cart_id} variant={self.variant_id} qty={self.quantity}>"
