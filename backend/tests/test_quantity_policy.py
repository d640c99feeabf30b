from storefront.models.cart_item import CartItem
from storefront.models.product import ProductVariant
from storefront.services.quantity_policy import MAX_QUANTITY, QuantityPolicy, Reason


def _variant(stock=5, track_inventory=True, allow_backorder=False):
    return ProductVariant(
        sku="CB-1L",
        name="1L",
        product_name="Cold Brew",
        price_cents=900,
        stock_quantity=stock,
        track_inventory=track_inventory,
        allow_backorder=allow_backorder,
    )


def _line(variant, quantity):
    return CartItem(variant=variant, quantity=quantity, price_snapshot_cents=900)


policy = QuantityPolicy()


def test_new_line_within_stock_is_accepted():
    decision = policy.validate_new_line(3, _variant(stock=5))
    assert decision.accepted
    assert decision.quantity == 3
    assert decision.errors == []


def test_new_line_rejects_zero_and_negative():
    for qty in (0, -2):
        decision = policy.validate_new_line(qty, _variant())
        assert decision.rejected
        assert "Quantity must be greater than 0" in decision.errors
        assert Reason.NOT_POSITIVE in decision.reasons


def test_new_line_rejects_non_numeric_as_not_positive():
    decision = policy.validate_new_line("abc", _variant())
    assert decision.reasons == [Reason.NOT_POSITIVE]


def test_new_line_above_maximum():
    decision = policy.validate_new_line(MAX_QUANTITY + 1, _variant(stock=500))
    assert decision.rejected
    assert decision.errors == ["Quantity cannot exceed 99"]


def test_new_line_out_of_stock():
    decision = policy.validate_new_line(1, _variant(stock=0))
    assert decision.errors == ["Cold Brew - 1L is out of stock"]


def test_new_line_partial_stock_reports_remaining():
    decision = policy.validate_new_line(3, _variant(stock=5), existing_quantity=4)
    assert decision.reasons == [Reason.LIMITED_STOCK]
    assert decision.errors == ["Only 1 more items can be added for Cold Brew - 1L"]


def test_new_line_when_line_already_holds_all_stock():
    decision = policy.validate_new_line(1, _variant(stock=5), existing_quantity=5)
    assert decision.errors == ["No more items available for Cold Brew - 1L"]


def test_new_line_combined_quantity_above_maximum():
    decision = policy.validate_new_line(10, _variant(track_inventory=False), existing_quantity=95)
    assert decision.reasons == [Reason.CANNOT_ADD_MORE]
    assert decision.errors == ["Cannot add more items. Maximum quantity is 99"]


def test_backorder_and_untracked_variants_ignore_stock():
    assert policy.validate_new_line(50, _variant(stock=0, allow_backorder=True)).accepted
    assert policy.validate_new_line(50, _variant(stock=0, track_inventory=False)).accepted


def test_set_quantity_zero_always_allowed():
    line = _line(_variant(stock=0), 2)
    decision = policy.validate_set_quantity(line, 0)
    assert decision.accepted
    assert decision.quantity == 0


def test_set_quantity_negative_rejected():
    decision = policy.validate_set_quantity(_line(_variant(), 2), -1)
    assert decision.errors == ["Quantity cannot be negative"]


def test_set_quantity_above_stock():
    decision = policy.validate_set_quantity(_line(_variant(stock=5), 2), 7)
    assert decision.errors == ["Only 5 items available for Cold Brew - 1L"]


def test_increment_at_stock_limit():
    decision = policy.can_increment(_line(_variant(stock=5), 5))
    assert decision.rejected
    assert decision.reasons == [Reason.NO_MORE_AVAILABLE]


def test_increment_at_maximum():
    decision = policy.can_increment(_line(_variant(track_inventory=False), MAX_QUANTITY))
    assert decision.errors == ["Quantity cannot exceed 99"]


def test_messages_follow_locale():
    decision = QuantityPolicy(locale="fr").validate_new_line(0, _variant())
    assert decision.errors == ["La quantité doit être supérieure à 0"]


def test_custom_maximum():
    decision = QuantityPolicy(maximum=5).validate_new_line(6, _variant(stock=50))
    assert decision.errors == ["Quantity cannot exceed 5"]


def test_zero_stock_backorder_variant_counts_as_in_stock():
    variant = _variant(stock=0, allow_backorder=True)
    assert variant.in_stock
    assert policy.validate_set_quantity(_line(variant, 1), 5).accepted
