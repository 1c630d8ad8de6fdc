# storefront/services/payment_service.py
from typing import List

from storefront.domain.schemas import (
    CreatePaymentIn,
    Currency,
    PaymentMethod,
    PaymentOut,
    PaymentStatusData,
)
from storefront.services.api_client import ApiClient, unwrap_data
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#Midtrans obsluguje tylko IDR, PayPal tylko USD
_METHODS_BY_CURRENCY = {
    Currency.IDR: [PaymentMethod.MIDTRANS_SNAP],
    Currency.USD: [PaymentMethod.PAYPAL],
}


def available_payment_methods(currency: Currency | str) -> List[PaymentMethod]:
    return list(_METHODS_BY_CURRENCY[Currency(currency)])


def is_payment_method_available(method: PaymentMethod | str, currency: Currency | str) -> bool:
    return PaymentMethod(method) in _METHODS_BY_CURRENCY[Currency(currency)]


class PaymentService:
    def __init__(self, api_client: ApiClient):
        self.api = api_client

    def create_payment(self, order_number: str, payment_method: PaymentMethod | str) -> PaymentOut:
        payload = CreatePaymentIn(order_number=order_number, payment_method=payment_method)
        logger.info(f"Creating {payload.payment_method.value} payment for order {order_number}")
        #API platnosci przyjmuje snake_case
        body = self.api.post("/payments", json=payload.model_dump(mode="json"))
        return PaymentOut.model_validate(unwrap_data(body))

    def get_payment_status(self, order_number: str) -> PaymentStatusData:
        body = self.api.get(f"/payments/{order_number}/status")
        return PaymentStatusData.model_validate(unwrap_data(body))
