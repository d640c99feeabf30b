from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response
from sqlalchemy.orm import Session

from storefront.config import settings
from storefront.db import get_db
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import VariantRepository
from storefront.schemas.cart_schema import AddItemIn, CartLineOut, CartOut, UpdateItemIn
from storefront.services.cart_service import CartService
from storefront.services.results import CartResult
from storefront.services.sync_service import CartSyncService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def _get_cart_token_cookie(request: Request) -> Optional[str]:
    return request.cookies.get(settings.CART_TOKEN_COOKIE)


def _load_cart(request: Request, response: Response, db: Session, user_id: Optional[int]):
    svc = CartService(db)
    found = svc.find_or_create(user_id=user_id, cart_token=_get_cart_token_cookie(request))
    if found.failure:
        raise HTTPException(status_code=500, detail={"errors": found.errors})
    cart = found.cart
    response.set_cookie(
        settings.CART_TOKEN_COOKIE, cart.session_token, httponly=True, samesite="Lax"
    )
    return svc, cart


def _render(db: Session, result: CartResult, notification: Optional[str] = None) -> CartOut:
    synced = CartSyncService(db).call(result.cart, notification=notification)
    summary = synced.metadata["summary"]
    return CartOut(
        cart_token=result.cart.session_token,
        total_quantity=summary.total_quantity,
        total_price_cents=summary.total_price_cents,
        currency=summary.currency,
        items_count=summary.items_count,
        items=[CartLineOut.model_validate(line) for line in summary.lines],
        notification=notification,
        errors=result.errors,
    )


def _raise_on_failure(result: CartResult):
    if result.failure:
        raise HTTPException(status_code=400, detail={"errors": result.errors})


@router.get("", summary="Get cart", response_model=CartOut)
def get_cart(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    x_user_id: Optional[int] = Header(default=None),
):
    _, cart = _load_cart(request, response, db, x_user_id)
    return _render(db, CartResult.ok(cart=cart))


@router.post("/items", summary="Add item to cart", response_model=CartOut)
def add_item(
    payload: AddItemIn,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    x_user_id: Optional[int] = Header(default=None),
):
    svc, cart = _load_cart(request, response, db, x_user_id)
    variant = VariantRepository(db).get(payload.variant_id)
    if variant is None:
        raise HTTPException(status_code=404, detail="Variant not found")
    result = svc.add_item(cart, variant, payload.qty)
    _raise_on_failure(result)
    return _render(db, result, notification=f"{variant.display_name} added to cart")


@router.patch("/items/{item_id}", summary="Change item quantity", response_model=CartOut)
def update_item(
    item_id: int,
    payload: UpdateItemIn,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    x_user_id: Optional[int] = Header(default=None),
):
    svc, cart = _load_cart(request, response, db, x_user_id)
    item = CartRepository(db).get_item(item_id, cart=cart)
    if item is None:
        raise HTTPException(status_code=404, detail="Cart item not found")
    result = svc.update_item(item, payload.action, payload.quantity)
    _raise_on_failure(result)
    return _render(db, CartResult.ok(cart=cart))


@router.delete("/items/{item_id}", summary="Remove item", response_model=CartOut)
def remove_item(
    item_id: int,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    x_user_id: Optional[int] = Header(default=None),
):
    svc, cart = _load_cart(request, response, db, x_user_id)
    item = CartRepository(db).get_item(item_id, cart=cart)
    if item is None:
        raise HTTPException(status_code=404, detail="Cart item not found")
    result = svc.remove_item(item)
    _raise_on_failure(result)
    return _render(db, CartResult.ok(cart=cart))


@router.delete("", summary="Clear cart", response_model=CartOut)
def clear_cart(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    x_user_id: Optional[int] = Header(default=None),
):
    svc, cart = _load_cart(request, response, db, x_user_id)
    result = svc.clear(cart)
    _raise_on_failure(result)
    return _render(db, result)
