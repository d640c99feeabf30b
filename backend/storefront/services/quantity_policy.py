import enum
from dataclasses import dataclass, field
from typing import List, Optional

from storefront.i18n import translate
from storefront.models.cart_item import CartItem
from storefront.models.product import ProductVariant

MAX_QUANTITY = 99


class Reason(enum.Enum):
    NOT_POSITIVE = "not_positive"
    NEGATIVE = "negative"
    EXCEEDS_MAXIMUM = "exceeds_maximum"
    OUT_OF_STOCK = "out_of_stock"
    LIMITED_STOCK = "limited_stock"
    NO_MORE_AVAILABLE = "no_more_available"
    CANNOT_ADD_MORE = "cannot_add_more"


@dataclass
class Decision:
    accepted: bool
    quantity: Optional[int] = None
    reasons: List[Reason] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def rejected(self) -> bool:
        return not self.accepted


class _Collector:
    def __init__(self, locale):
        self.locale = locale
        self.reasons = []
        self.errors = []

    def reject(self, reason: Reason, key: str, **kwargs):
        self.reasons.append(reason)
        self.errors.append(translate(key, self.locale, **kwargs))

    def has(self, reason: Reason) -> bool:
        return reason in self.reasons

    def decision(self, quantity: int) -> Decision:
        if self.reasons:
            return Decision(False, None, self.reasons, self.errors)
        return Decision(True, quantity)


class QuantityPolicy:
    """
    Pure quantity checks for cart lines. Nothing here touches the session;
    every method answers with a Decision instead of raising.
    """

    def __init__(self, maximum: int = MAX_QUANTITY, locale: Optional[str] = None):
        self.maximum = maximum
        self.locale = locale

    def validate_new_line(
        self,
        quantity,
        variant: Optional[ProductVariant],
        existing_quantity: int = 0,
    ) -> Decision:
        """Validate adding `quantity` units on top of `existing_quantity`."""
        out = _Collector(self.locale)
        quantity = _to_int(quantity)
        existing_quantity = _to_int(existing_quantity)

        if quantity <= 0:
            out.reject(Reason.NOT_POSITIVE, "quantity.not_positive")
        elif quantity > self.maximum:
            out.reject(Reason.EXCEEDS_MAXIMUM, "quantity.exceeds_maximum", maximum=self.maximum)

        if variant is None:
            return out.decision(quantity)

        final_quantity = existing_quantity + quantity
        if variant.limits_quantity:
            stock = variant.stock_quantity or 0
            if not variant.in_stock:
                out.reject(Reason.OUT_OF_STOCK, "quantity.out_of_stock", name=variant.display_name)
            elif quantity > 0 and final_quantity > stock:
                available = stock - existing_quantity
                if available > 0:
                    out.reject(
                        Reason.LIMITED_STOCK,
                        "quantity.only_more_available",
                        available=available,
                        name=variant.display_name,
                    )
                else:
                    out.reject(
                        Reason.NO_MORE_AVAILABLE,
                        "quantity.no_more_available",
                        name=variant.display_name,
                    )

        if (
            final_quantity > self.maximum
            and not out.has(Reason.EXCEEDS_MAXIMUM)
            and quantity > 0
        ):
            out.reject(Reason.CANNOT_ADD_MORE, "quantity.cannot_add_more", maximum=self.maximum)

        return out.decision(quantity)

    def validate_set_quantity(self, cart_item: CartItem, new_quantity) -> Decision:
        """
        Validate an absolute target. Zero always passes (it means "remove the
        line") even for a variant that is out of stock; negatives never pass.
        """
        out = _Collector(self.locale)
        new_quantity = _to_int(new_quantity)

        if new_quantity < 0:
            out.reject(Reason.NEGATIVE, "quantity.negative")
        elif new_quantity > self.maximum:
            out.reject(Reason.EXCEEDS_MAXIMUM, "quantity.exceeds_maximum", maximum=self.maximum)

        variant = cart_item.variant if cart_item is not None else None
        if new_quantity > 0 and variant is not None and variant.limits_quantity:
            stock = variant.stock_quantity or 0
            current = cart_item.quantity or 0
            if not variant.in_stock:
                out.reject(Reason.OUT_OF_STOCK, "quantity.out_of_stock", name=variant.display_name)
            elif new_quantity > stock:
                if new_quantity > current and stock - current <= 0:
                    out.reject(
                        Reason.NO_MORE_AVAILABLE,
                        "quantity.no_more_available",
                        name=variant.display_name,
                    )
                else:
                    out.reject(
                        Reason.LIMITED_STOCK,
                        "quantity.only_available",
                        available=stock,
                        name=variant.display_name,
                    )

        return out.decision(new_quantity)

    def can_increment(self, cart_item: CartItem) -> Decision:
        return self.validate_set_quantity(cart_item, (cart_item.quantity or 0) + 1)


def _to_int(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
