# imported together so Base.metadata knows every table before create_all

from storefront.models.product import ProductVariant
from storefront.models.cart import Cart, CartStatus
from storefront.models.cart_item import CartItem

__all__ = ["ProductVariant", "Cart", "CartStatus", "CartItem"]
