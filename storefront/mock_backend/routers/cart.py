# storefront/mock_backend/routers/cart.py
from fastapi import APIRouter, Depends

from storefront.domain.schemas import AddToCartIn, UpdateQuantityIn
from storefront.mock_backend.deps import get_store, ok, to_http
from storefront.mock_backend.store import Conflict, MockStore, NotFound

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("")
def get_cart(store: MockStore = Depends(get_store)):
    return ok(store.cart_payload())


@router.post("/items", status_code=201)
def add_item(payload: AddToCartIn, store: MockStore = Depends(get_store)):
    try:
        store.add_item(payload.variant_id, payload.quantity)
    except (NotFound, Conflict) as e:
        raise to_http(e)
    return ok(store.cart_payload(), message="Item added to cart")


@router.patch("/items/{item_id}")
def update_item(item_id: str, payload: UpdateQuantityIn, store: MockStore = Depends(get_store)):
    try:
        store.update_item(item_id, payload.quantity)
    except NotFound as e:
        raise to_http(e)
    return ok(store.cart_payload(), message="Quantity updated")


@router.delete("/items/{item_id}")
def remove_item(item_id: str, store: MockStore = Depends(get_store)):
    try:
        store.remove_item(item_id)
    except NotFound as e:
        raise to_http(e)
    return ok(store.cart_payload(), message="Item removed from cart")


@router.delete("")
def clear_cart(store: MockStore = Depends(get_store)):
    store.clear_cart()
    return ok(store.cart_payload(), message="Cart cleared")
