from typing import Optional

from sqlalchemy.orm import Session

from storefront.i18n import translate
from storefront.models.cart import Cart
from storefront.repositories.cart_repo import CartRepository
from storefront.services.cart_service import CartService, CartServiceException
from storefront.services.results import CartResult
from storefront.utils.logging import get_logger
from storefront.utils.transactions import smart_transaction

logger = get_logger(__name__)


class CartMergeService:
    """
    Folds a guest cart into the user's cart at login.

    Colliding lines are absorbed with CartService.add_more; a policy
    rejection skips that line and the merge carries on. Lines with no
    counterpart are re-pointed at the user cart. The guest cart is retired
    afterwards, even when some lines stayed behind. Any unexpected failure
    rolls the whole merge back and leaves the guest cart untouched.
    """

    def __init__(self, db: Session, cart_service: Optional[CartService] = None, locale=None):
        self.db = db
        self.locale = locale
        self.cart_service = cart_service or CartService(db, locale=locale)
        self.cart_repo = CartRepository(db)

    def merge(self, user_cart: Optional[Cart], guest_cart: Optional[Cart]) -> CartResult:
        if user_cart is None or guest_cart is None:
            return CartResult.ok(cart=user_cart, merged_line_count=0)
        if user_cart is guest_cart or (user_cart.id is not None and user_cart.id == guest_cart.id):
            logger.info("Skipping merge - same cart")
            return CartResult.ok(cart=user_cart, merged_line_count=0)

        guest_items = self.cart_repo.items_with_variants(guest_cart)
        if not guest_items:
            return CartResult.ok(cart=user_cart, merged_line_count=0)

        guest_token = guest_cart.session_token
        merged = 0
        skipped_variants = []
        errors = []
        log_queue = []

        try:
            with smart_transaction(self.db):
                user_items = {
                    it.variant_id: it for it in self.cart_repo.items_with_variants(user_cart)
                }
                for guest_item in guest_items:
                    variant = guest_item.variant
                    existing = user_items.get(guest_item.variant_id)
                    if existing is None:
                        self.cart_repo.move_item(guest_item, user_cart)
                        merged += 1
                        log_queue.append(f"Moved item {variant.display_name} to user cart")
                        continue

                    result = self.cart_service.add_more(existing, guest_item.quantity)
                    if result.success:
                        self.cart_repo.delete_item(guest_item)
                        merged += 1
                        log_queue.append(
                            f"Merged {guest_item.quantity} items of {variant.display_name} "
                            f"into existing cart item"
                        )
                    elif result.error_type == "policy":
                        logger.warning(
                            f"Failed to merge item {variant.display_name}: {', '.join(result.errors)}"
                        )
                        skipped_variants.append(variant)
                        errors.extend(result.errors)
                    else:
                        raise CartServiceException(
                            f"Absorbing {variant.display_name} failed unexpectedly"
                        )

                guest_cart.mark_abandoned()
                self.db.flush()
                log_queue.append(f"Marked guest cart {guest_token} as abandoned")
            self.cart_repo.reload_items(user_cart)
        except Exception:
            logger.exception("Cart merge rolled back")
            return CartResult.fail([translate("cart.merge_failed", self.locale)], cart=user_cart)

        for message in log_queue:
            logger.info(message)

        return CartResult(
            success=True,
            cart=user_cart,
            errors=errors,
            metadata={"merged_line_count": merged, "skipped_variants": skipped_variants},
        )
