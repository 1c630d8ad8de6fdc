# storefront/services/invoice_service.py
from typing import Any

from storefront.domain.schemas import ShippingLabelUrl
from storefront.services.api_client import ApiClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def is_shipping_label_url(value: Any) -> bool:
    """Etykieta jako link (kurier krajowy) zamiast pliku PDF."""
    return (
        isinstance(value, dict)
        and value.get("type") == "url"
        and isinstance(value.get("url"), str)
    )


class InvoiceService:
    def __init__(self, api_client: ApiClient):
        self.api = api_client

    def invoice_url(self, order_number: str) -> str:
        return f"{self.api.base_url}/invoice/{order_number}"

    def invoice_preview_url(self, order_number: str) -> str:
        return f"{self.api.base_url}/invoice/{order_number}/preview"

    def shipping_label_url(self, order_number: str) -> str:
        return f"{self.api.base_url}/invoice/{order_number}/shipping-label"

    def shipping_label_preview_url(self, order_number: str) -> str:
        return f"{self.api.base_url}/invoice/{order_number}/shipping-label/preview"

    def download_invoice(self, order_number: str) -> bytes:
        resp = self.api.get_response(f"/invoice/{order_number}")
        return resp.content

    def download_shipping_label(self, order_number: str) -> ShippingLabelUrl | bytes:
        resp = self.api.get_response(f"/invoice/{order_number}/shipping-label")

        content_type = resp.headers.get("content-type", "")
        if "json" in content_type:
            body = resp.json()
            if is_shipping_label_url(body):
                logger.info(f"Shipping label for {order_number} is an external URL")
                return ShippingLabelUrl.model_validate(body)

        return resp.content
