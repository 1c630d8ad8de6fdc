# storefront/mock_backend/routers/invoice.py
from fastapi import APIRouter, Depends, Response

from storefront.domain.schemas import ShippingType
from storefront.mock_backend.deps import get_store, to_http
from storefront.mock_backend.store import Conflict, MockStore, NotFound

router = APIRouter(prefix="/invoice", tags=["invoice"])

_FAKE_PDF = b"%PDF-1.4\n% storefront mock\n%%EOF\n"


@router.get("/{order_number}")
def download_invoice(order_number: str, store: MockStore = Depends(get_store)):
    try:
        store.get_order(order_number)
    except NotFound as e:
        raise to_http(e)
    return Response(content=_FAKE_PDF, media_type="application/pdf")


@router.get("/{order_number}/shipping-label")
def download_shipping_label(order_number: str, store: MockStore = Depends(get_store)):
    try:
        order = store.require_label(order_number)
    except (NotFound, Conflict) as e:
        raise to_http(e)

    # krajowe: link do kuriera, zagraniczne: PDF
    if order.get("shipping_type") == ShippingType.DOMESTIC.value:
        return {
            "type": "url",
            "url": f"https://courier.example.com/labels/{order_number}",
            "message": "Open the courier label in a new tab",
        }
    return Response(content=_FAKE_PDF, media_type="application/pdf")
