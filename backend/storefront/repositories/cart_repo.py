import secrets
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from storefront.models.cart import Cart, CartStatus
from storefront.models.cart_item import CartItem
from storefront.models.product import ProductVariant

SESSION_TOKEN_BYTES = 16  # hex-encoded -> 32 characters


class CartRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_active_by_token(self, session_token: str) -> Optional[Cart]:
        return (
            self.db.query(Cart)
            .filter(Cart.session_token == session_token, Cart.status == CartStatus.ACTIVE)
            .first()
        )

    def get_active_by_user(self, user_id: int) -> Optional[Cart]:
        return (
            self.db.query(Cart)
            .filter(Cart.user_id == user_id, Cart.status == CartStatus.ACTIVE)
            .first()
        )

    def create_cart(self, user_id: Optional[int] = None) -> Cart:
        c = Cart(user_id=user_id, session_token=secrets.token_hex(SESSION_TOKEN_BYTES))
        self.db.add(c)
        self.db.flush()
        return c

    def get_item(self, item_id: int, cart: Optional[Cart] = None) -> Optional[CartItem]:
        qry = self.db.query(CartItem).filter(CartItem.id == item_id)
        if cart is not None:
            qry = qry.filter(CartItem.cart_id == cart.id)
        return qry.first()

    def find_item(self, cart: Cart, variant: ProductVariant) -> Optional[CartItem]:
        return (
            self.db.query(CartItem)
            .filter(CartItem.cart_id == cart.id, CartItem.variant_id == variant.id)
            .first()
        )

    def items_with_variants(self, cart: Cart) -> List[CartItem]:
        return (
            self.db.query(CartItem)
            .options(joinedload(CartItem.variant))
            .filter(CartItem.cart_id == cart.id)
            .order_by(CartItem.id)
            .all()
        )

    def create_item(self, cart: Cart, variant: ProductVariant, qty: int, currency: str) -> CartItem:
        item = CartItem(
            cart=cart,
            variant=variant,
            quantity=qty,
            price_snapshot_cents=variant.price_cents or 0,
            price_snapshot_currency=variant.currency or currency,
        )
        self.db.add(item)
        self.db.flush()
        return item

    def update_quantity(self, item: CartItem, qty: int) -> CartItem:
        item.quantity = qty
        self.db.flush()
        return item

    def move_item(self, item: CartItem, target: Cart) -> CartItem:
        item.cart = target
        self.db.flush()
        return item

    def delete_item(self, item: CartItem):
        cart = item.cart
        if cart is not None and item in cart.items:
            cart.items.remove(item)
        self.db.delete(item)
        self.db.flush()

    def reload_items(self, cart: Cart) -> Cart:
        self.db.expire(cart, ["items"])
        return cart
