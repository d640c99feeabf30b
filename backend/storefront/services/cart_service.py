from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.i18n import translate
from storefront.models.cart import Cart
from storefront.models.cart_item import CartItem
from storefront.models.product import ProductVariant
from storefront.repositories.cart_repo import CartRepository
from storefront.services.quantity_policy import QuantityPolicy
from storefront.services.results import CartResult
from storefront.utils.logging import get_logger
from storefront.utils.transactions import smart_transaction

logger = get_logger(__name__)


class CartServiceException(Exception):
    pass


class _ClearRejected(CartServiceException):
    def __init__(self, errors):
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class CartService:
    """
    Quantity lifecycle of cart lines: add, increment, decrement, set,
    add-more and clear. Each public method runs in one transaction and
    always returns a CartResult.
    """

    def __init__(
        self,
        db: Session,
        policy: Optional[QuantityPolicy] = None,
        locale: Optional[str] = None,
    ):
        self.db = db
        self.locale = locale
        self.policy = policy or QuantityPolicy(locale=locale)
        self.cart_repo = CartRepository(db)

    def _t(self, key: str, **kwargs) -> str:
        return translate(key, self.locale, **kwargs)

    # ------------------------------------------------------------------
    # lookup
    # ------------------------------------------------------------------
    def find_or_create(
        self, user_id: Optional[int] = None, cart_token: Optional[str] = None
    ) -> CartResult:
        """
        Locate the caller's cart by user, then by session token, creating one
        lazily. A guest cart found by token is merged into the user's cart.
        """
        from storefront.services.merge_service import CartMergeService

        try:
            with smart_transaction(self.db):
                cart = None
                if user_id is not None:
                    cart = self.cart_repo.get_active_by_user(user_id)
                if cart is None and cart_token:
                    cart = self.cart_repo.get_active_by_token(cart_token)
                    if cart is not None and user_id is not None and cart.user_id is None:
                        # first request after login: the guest cart becomes the user's
                        cart.user_id = user_id
                        self.db.flush()
                    elif cart is not None and user_id is not None and cart.user_id != user_id:
                        cart = None
                if cart is None:
                    cart = self.cart_repo.create_cart(user_id=user_id)
        except Exception:
            logger.exception("Cart lookup failed")
            return CartResult.fail([self._t("cart.generic_failure")])

        if user_id is not None and cart_token and cart.session_token != cart_token:
            guest_cart = self.cart_repo.get_active_by_token(cart_token)
            if guest_cart is not None and guest_cart.user_id is None:
                merge = CartMergeService(self.db, cart_service=self).merge(cart, guest_cart)
                if merge.failure:
                    logger.warning(f"Cart merge failed: {', '.join(merge.errors)}")
                elif merge.merged_any:
                    logger.info(f"Merged {merge.merged_line_count} lines from guest cart")

        return CartResult.ok(cart=cart, resource=cart)

    # ------------------------------------------------------------------
    # add
    # ------------------------------------------------------------------
    def add_item(
        self, cart: Optional[Cart], variant: Optional[ProductVariant], qty=1
    ) -> CartResult:
        errors = []
        if cart is None:
            errors.append(self._t("cart.required"))
        if variant is None:
            errors.append(self._t("cart.variant_required"))
        if errors:
            return CartResult.fail(errors, cart=cart, error_type="precondition")

        cart_id, variant_id = cart.id, variant.id
        try:
            with smart_transaction(self.db):
                item = self.cart_repo.find_item(cart, variant)
                existing = item.quantity if item is not None else 0
                decision = self.policy.validate_new_line(qty, variant, existing)
                if decision.rejected:
                    return CartResult.fail(decision.errors, cart=cart, error_type="policy")

                if item is not None:
                    self.cart_repo.update_quantity(item, existing + decision.quantity)
                else:
                    item = self.cart_repo.create_item(
                        cart, variant, decision.quantity, settings.DEFAULT_CURRENCY
                    )
        except IntegrityError as e:
            # a concurrent request created the same (cart, variant) line first
            logger.error(f"Cart line uniqueness conflict cart={cart_id} variant={variant_id}: {e}")
            return CartResult.fail([self._t("cart.add_failed")], cart=cart, error_type="unexpected")
        except Exception:
            logger.exception(f"Unexpected error adding variant {variant_id} to cart {cart_id}")
            return CartResult.fail([self._t("cart.generic_failure")], cart=cart, error_type="unexpected")

        return CartResult.ok(cart=cart, resource=item)

    # ------------------------------------------------------------------
    # line updates
    # ------------------------------------------------------------------
    def update_item(self, item: Optional[CartItem], action: str, quantity=None) -> CartResult:
        if item is None:
            return CartResult.fail([self._t("cart.item_required")], error_type="precondition")
        if action == "increment":
            return self.increment(item)
        if action == "decrement":
            return self.decrement(item)
        if action == "set" and quantity is not None:
            return self.set_quantity(item, quantity)
        if action == "add_more" and quantity is not None:
            return self.add_more(item, quantity)
        return CartResult.fail([self._t("cart.invalid_action")], cart=item.cart)

    def increment(self, item: CartItem) -> CartResult:
        decision = self.policy.can_increment(item)
        if decision.rejected:
            return CartResult.fail(decision.errors, cart=item.cart, error_type="policy")
        return self._write_quantity(item, decision.quantity)

    def decrement(self, item: CartItem) -> CartResult:
        new_quantity = item.quantity - 1
        if new_quantity <= 0:
            return self._destroy(item)
        return self._write_quantity(item, new_quantity)

    def add_more(self, item: CartItem, extra_qty) -> CartResult:
        decision = self.policy.validate_new_line(extra_qty, item.variant, item.quantity)
        if decision.rejected:
            return CartResult.fail(decision.errors, cart=item.cart, error_type="policy")
        return self._write_quantity(item, item.quantity + decision.quantity)

    def set_quantity(self, item: CartItem, new_quantity) -> CartResult:
        try:
            target = int(new_quantity)
        except (TypeError, ValueError):
            target = 0
        # anything at or below zero means "remove the line"
        target = max(target, 0)
        decision = self.policy.validate_set_quantity(item, target)
        if decision.rejected:
            return CartResult.fail(decision.errors, cart=item.cart, error_type="policy")
        if decision.quantity <= 0:
            return self._destroy(item)
        return self._write_quantity(item, decision.quantity)

    def remove_item(self, item: CartItem) -> CartResult:
        return self.set_quantity(item, 0)

    def _write_quantity(self, item: CartItem, new_quantity: int) -> CartResult:
        cart = item.cart
        item_id = item.id
        try:
            with smart_transaction(self.db):
                self.cart_repo.update_quantity(item, new_quantity)
        except IntegrityError as e:
            logger.error(f"Cart line update rejected by the database item={item_id}: {e}")
            return CartResult.fail([self._t("cart.update_failed")], cart=cart, error_type="unexpected")
        except Exception:
            logger.exception(f"Unexpected error updating cart item {item_id}")
            return CartResult.fail([self._t("cart.generic_failure")], cart=cart, error_type="unexpected")
        return CartResult.ok(cart=cart, resource=item)

    def _destroy(self, item: CartItem) -> CartResult:
        cart = item.cart
        item_id = item.id
        try:
            with smart_transaction(self.db):
                self.cart_repo.delete_item(item)
        except Exception:
            logger.exception(f"Unexpected error removing cart item {item_id}")
            return CartResult.fail([self._t("cart.generic_failure")], cart=cart, error_type="unexpected")
        return CartResult.ok(cart=cart)

    # ------------------------------------------------------------------
    # clear
    # ------------------------------------------------------------------
    def clear(self, cart: Optional[Cart]) -> CartResult:
        """
        Remove every line, all or nothing. An empty cart succeeds without
        opening a transaction.
        """
        if cart is None or cart.is_empty:
            return CartResult.ok(cart=cart, cleared_variants=[], cleared_line_count=0)

        cart_id = cart.id
        try:
            with smart_transaction(self.db):
                items = self.cart_repo.items_with_variants(cart)
                cleared_variants = [it.variant for it in items]
                cleared_line_count = len(items)
                for item in items:
                    result = self.set_quantity(item, 0)
                    if result.failure:
                        if result.error_type == "unexpected":
                            raise _ClearRejected([])
                        raise _ClearRejected(result.errors)
            self.cart_repo.reload_items(cart)
        except _ClearRejected as e:
            if e.errors:
                logger.warning(f"Clearing cart {cart_id} rolled back: {e}")
            else:
                logger.error(f"Clearing cart {cart_id} rolled back after a failed line removal")
            self.cart_repo.reload_items(cart)
            return CartResult.fail(e.errors or [self._t("cart.clear_failed")], cart=cart)
        except Exception:
            logger.exception(f"Unexpected error clearing cart {cart_id}")
            return CartResult.fail([self._t("cart.clear_failed")], cart=cart)

        return CartResult.ok(
            cart=cart,
            cleared_variants=cleared_variants,
            cleared_line_count=cleared_line_count,
        )

    # ------------------------------------------------------------------
    # checkout readiness
    # ------------------------------------------------------------------
    def validate_for_checkout(self, cart: Optional[Cart]) -> CartResult:
        if cart is None or cart.id is None or cart.is_empty or cart.total_quantity == 0:
            return CartResult.fail([self._t("cart.empty")], cart=cart, error_type="validation")
        return CartResult.ok(cart=cart)
