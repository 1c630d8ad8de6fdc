# storefront/mock_backend/routers/payments.py
from fastapi import APIRouter, Depends

from storefront.domain.order_rules import can_pay
from storefront.domain.schemas import CreatePaymentIn, PaymentStatus
from storefront.mock_backend.deps import get_store, ok, to_http
from storefront.mock_backend.store import Conflict, MockStore, NotFound

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("", status_code=201)
def create_payment(payload: CreatePaymentIn, store: MockStore = Depends(get_store)):
    try:
        order = store.get_order(payload.order_number)
        if not can_pay(order["status"]):
            raise Conflict(f"Order {payload.order_number} cannot be paid")
    except (NotFound, Conflict) as e:
        raise to_http(e)

    order["payment_method"] = payload.payment_method.value
    return ok({
        "order_number": payload.order_number,
        "payment_method": payload.payment_method.value,
        "payment_url": f"https://pay.example.com/{payload.order_number}",
        "token": f"tok-{payload.order_number}",
        "currency": order["currency"],
        "amount": order["total"],
    }, message="Payment created")


@router.get("/{order_number}/status")
def get_payment_status(order_number: str, store: MockStore = Depends(get_store)):
    try:
        return ok(store.payment_status(order_number))
    except NotFound as e:
        raise to_http(e)


#dev only: symulacja webhooka bramki platnosci
@router.post("/{order_number}/simulate/{status}")
def simulate_payment(order_number: str, status: PaymentStatus, store: MockStore = Depends(get_store)):
    try:
        store.resolve_payment(order_number, status)
        return ok(store.payment_status(order_number))
    except NotFound as e:
        raise to_http(e)
