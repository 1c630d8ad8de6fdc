# storefront/domain/pricing.py
"""
Ceny i sumy w checkoucie. Czyste funkcje, bez I/O.

Kwoty zawsze jako Decimal; int/float/str sa konwertowane przez str(),
tak samo jak cena z product-service.
"""
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from storefront.domain.schemas import (
    CartItem,
    CartSummary,
    Currency,
    Promotion,
    ShippingType,
)

IDR_TAX_RATE = Decimal("0.11")
_WHOLE = Decimal("1")
_CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _round_whole(amount: Decimal) -> Decimal:
    return amount.quantize(_WHOLE, rounding=ROUND_HALF_UP)


#porownanie po wartosci, nieznana waluta to po prostu nie-IDR
def _is_idr(currency) -> bool:
    return getattr(currency, "value", currency) == Currency.IDR.value


def is_promotion_active(promotion: Promotion | None, now: datetime | None = None) -> bool:
    # start_date celowo pomijany, liczy sie tylko end_date > now
    if promotion is None or promotion.end_date is None:
        return False
    now = now or datetime.now(timezone.utc)
    end = promotion.end_date
    if end.tzinfo is None:
        end = end.replace(tzinfo=timezone.utc)
    return end > now


def final_unit_price(base_price, promotion: Promotion | None = None, now: datetime | None = None) -> Decimal:
    price = to_decimal(base_price)
    if is_promotion_active(promotion, now):
        return price * (Decimal("1") - promotion.discount)
    return price


def line_subtotal(unit_price, quantity: int) -> Decimal:
    return to_decimal(unit_price) * quantity


def tax(subtotal, currency: Currency | str) -> Decimal:
    """PPN 11% tylko dla IDR, zaokraglony do pelnej rupii."""
    if _is_idr(currency):
        return _round_whole(to_decimal(subtotal) * IDR_TAX_RATE)
    return Decimal("0")


def order_total(subtotal, shipping_cost, discount, currency: Currency | str) -> Decimal:
    #podatek od kwoty po rabacie, bez wysylki
    taxable = to_decimal(subtotal) - to_decimal(discount)
    return taxable + to_decimal(shipping_cost) + tax(taxable, currency)


def currency_for_shipping(shipping_type: ShippingType | str, country: str | None = None) -> Currency:
    if getattr(shipping_type, "value", shipping_type) == ShippingType.DOMESTIC.value or country == "ID":
        return Currency.IDR
    return Currency.USD


def discounted_price(original_price, discount_rate) -> Decimal:
    return _round_whole(to_decimal(original_price) * (Decimal("1") - to_decimal(discount_rate)))


def savings(original_price, discount_rate) -> Decimal:
    return _round_whole(to_decimal(original_price) * to_decimal(discount_rate))


def format_discount_percentage(discount_rate) -> str:
    return f"{_round_whole(to_decimal(discount_rate) * 100)}%"


def unit_price_for_currency(item: CartItem, currency: Currency | str, now: datetime | None = None) -> Decimal:
    if item.product is None:
        return Decimal("0")
    base = item.product.id_price if _is_idr(currency) else item.product.en_price
    return final_unit_price(base, item.product.promotion, now)


def summarize_cart(items: Iterable[CartItem], currency: Currency | str = Currency.IDR, now: datetime | None = None) -> CartSummary:
    """
    Podsumowanie koszyka liczone lokalnie.
    Niedostepne pozycje nie wchodza do subtotalu, ale sa liczone osobno.
    """
    items = list(items)
    available = [i for i in items if i.is_available]
    subtotal = sum(
        (line_subtotal(unit_price_for_currency(i, currency, now), i.quantity) for i in available),
        Decimal("0"),
    )
    unavailable = len(items) - len(available)
    return CartSummary(
        total_items=len(items),
        total_quantity=sum(i.quantity for i in items),
        subtotal=subtotal,
        unavailable_items=unavailable,
        has_unavailable_items=unavailable > 0,
    )


def format_currency(amount, currency: Currency | str = Currency.IDR) -> str:
    value = to_decimal(amount)
    if _is_idr(currency):
        # format id-ID: kropka jako separator tysiecy, bez groszy
        whole = int(_round_whole(value))
        sign = "-" if whole < 0 else ""
        return f"{sign}Rp {abs(whole):,}".replace(",", ".")
    cents = value.quantize(_CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if cents < 0 else ""
    return f"{sign}${abs(cents):,.2f}"
