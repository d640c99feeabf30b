from sqlalchemy import Boolean, Column, Integer, String

from storefront.db import Base


class ProductVariant(Base):
    """
    Stock-bearing variant. The cart engines only read it: availability,
    backorder policy and the current unit price.
    """

    __tablename__ = "product_variants"

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String(64), unique=True, index=True, nullable=False)
    name = Column(String(256), nullable=False)
    product_name = Column(String(256), nullable=False)
    price_cents = Column(Integer, nullable=False, default=0)
    currency = Column(String(3), nullable=True)
    stock_quantity = Column(Integer, nullable=False, default=0)
    track_inventory = Column(Boolean, nullable=False, default=True)
    allow_backorder = Column(Boolean, nullable=False, default=False)
    active = Column(Boolean, nullable=False, default=True)

    @property
    def in_stock(self) -> bool:
        if not self.track_inventory:
            return True
        return (self.stock_quantity or 0) > 0 or bool(self.allow_backorder)

    @property
    def limits_quantity(self) -> bool:
        """True when stock caps how many units may sit in a cart line."""
        return bool(self.track_inventory) and not self.allow_backorder

    @property
    def display_name(self) -> str:
        return f"{self.product_name} - {self.name}"

    def __repr__(self):
        return f"<ProductVariant sku={self.sku} stock={self.stock_quantity}>"
