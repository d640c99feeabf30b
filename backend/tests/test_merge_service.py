from storefront.models.cart import Cart, CartStatus
from storefront.repositories.cart_repo import CartRepository
from storefront.services.cart_service import CartService
from storefront.services.merge_service import CartMergeService
from storefront.services.results import CartResult


def _quantities(db, cart):
    db.expire_all()
    return {it.variant_id: it.quantity for it in CartRepository(db).items_with_variants(cart)}


def _status(db, cart_id):
    db.expire_all()
    return db.get(Cart, cart_id).status


def test_merge_moves_and_absorbs_lines(db, make_cart, make_variant):
    user_cart, guest = make_cart(user_id=1), make_cart()
    shared, guest_only = make_variant(stock=20), make_variant(stock=20)
    svc = CartService(db)
    svc.add_item(user_cart, shared, 3)
    svc.add_item(guest, shared, 2)
    svc.add_item(guest, guest_only, 1)

    result = CartMergeService(db).merge(user_cart, guest)

    assert result.success
    assert result.merged_line_count == 2
    assert result.merged_any
    assert result.errors == []
    assert _quantities(db, user_cart) == {shared.id: 5, guest_only.id: 1}
    assert _quantities(db, guest) == {}
    assert _status(db, guest.id) == CartStatus.ABANDONED


def test_merge_skips_line_that_exceeds_stock(db, make_cart, make_variant):
    user_cart, guest = make_cart(user_id=1), make_cart()
    variant = make_variant(stock=4)
    svc = CartService(db)
    svc.add_item(user_cart, variant, 3)
    svc.add_item(guest, variant, 2)

    result = CartMergeService(db).merge(user_cart, guest)

    assert result.success
    assert result.merged_line_count == 0
    assert [v.id for v in result.metadata["skipped_variants"]] == [variant.id]
    assert result.errors == [f"Only 1 more items can be added for {variant.display_name}"]
    assert _quantities(db, user_cart) == {variant.id: 3}
    assert _status(db, guest.id) == CartStatus.ABANDONED


def test_merge_same_cart_is_a_no_op(db, make_cart, make_variant):
    cart = make_cart(user_id=1)
    CartService(db).add_item(cart, make_variant(), 1)

    result = CartMergeService(db).merge(cart, cart)

    assert result.success
    assert result.merged_line_count == 0
    assert _status(db, cart.id) == CartStatus.ACTIVE


def test_merge_with_empty_or_missing_guest(db, make_cart):
    user_cart = make_cart(user_id=1)
    svc = CartMergeService(db)

    assert svc.merge(user_cart, None).merged_line_count == 0
    assert svc.merge(None, user_cart).merged_line_count == 0

    empty_guest = make_cart()
    result = svc.merge(user_cart, empty_guest)
    assert result.success
    assert not result.merged_any
    assert _status(db, empty_guest.id) == CartStatus.ACTIVE


def test_merge_rolls_back_everything_on_unexpected_failure(db, make_cart, make_variant):
    user_cart, guest = make_cart(user_id=1), make_cart()
    guest_only, shared = make_variant(), make_variant()
    svc = CartService(db)
    svc.add_item(user_cart, shared, 1)
    svc.add_item(guest, guest_only, 2)
    svc.add_item(guest, shared, 1)

    class _BrokenCartService(CartService):
        def add_more(self, item, extra_qty):
            return CartResult.fail(["disk full"], cart=item.cart, error_type="unexpected")

    result = CartMergeService(db, cart_service=_BrokenCartService(db)).merge(user_cart, guest)

    assert result.failure
    assert result.cart is user_cart
    assert result.errors == ["We couldn't merge your cart items. Please try again."]
    assert _quantities(db, user_cart) == {shared.id: 1}
    assert _quantities(db, guest) == {guest_only.id: 2, shared.id: 1}
    assert _status(db, guest.id) == CartStatus.ACTIVE


def test_merge_again_after_guest_was_emptied(db, make_cart, make_variant):
    user_cart, guest = make_cart(user_id=1), make_cart()
    CartService(db).add_item(guest, make_variant(), 2)
    svc = CartMergeService(db)

    assert svc.merge(user_cart, guest).merged_line_count == 1
    again = svc.merge(user_cart, guest)

    assert again.success
    assert again.merged_line_count == 0
