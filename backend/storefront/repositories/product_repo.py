from typing import Optional

from sqlalchemy.orm import Session

from storefront.models.product import ProductVariant


class VariantRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, variant_id: int) -> Optional[ProductVariant]:
        return (
            self.db.query(ProductVariant)
            .filter(ProductVariant.id == variant_id, ProductVariant.active == True)
            .first()
        )

    def create_or_update(
        self,
        sku: str,
        name: str,
        product_name: str,
        price_cents: int,
        stock_quantity: int = 0,
        track_inventory: bool = True,
        allow_backorder: bool = False,
        currency: str = None,
    ) -> ProductVariant:
        v = self.db.query(ProductVariant).filter(ProductVariant.sku == sku).first()
        if v is None:
            v = ProductVariant(sku=sku)
            self.db.add(v)
        v.name = name
        v.product_name = product_name
        v.price_cents = price_cents
        v.stock_quantity = stock_quantity
        v.track_inventory = track_inventory
        v.allow_backorder = allow_backorder
        v.currency = currency
        self.db.flush()
        return v
