# storefront/domain/order_rules.py
from datetime import datetime, timedelta, timezone
from typing import Dict, List

from storefront.domain.schemas import OrderStatus
from storefront.utils.settings import PAYMENT_DEADLINE_HOURS

CANCELLABLE = frozenset({OrderStatus.PENDING, OrderStatus.FAILED})
FINAL = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})
WITH_LABEL = frozenset({OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.COMPLETED})

FORWARD_PROGRESSION = [
    OrderStatus.PENDING,
    OrderStatus.PAID,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
    OrderStatus.COMPLETED,
]

#dozwolone przejscia dla panelu admina
_TRANSITIONS: Dict[OrderStatus, List[OrderStatus]] = {
    OrderStatus.PENDING: [OrderStatus.PAID, OrderStatus.CANCELLED, OrderStatus.FAILED],
    OrderStatus.PAID: [OrderStatus.PROCESSING, OrderStatus.CANCELLED],
    OrderStatus.PROCESSING: [OrderStatus.SHIPPED, OrderStatus.CANCELLED],
    OrderStatus.SHIPPED: [OrderStatus.DELIVERED, OrderStatus.CANCELLED],
    OrderStatus.DELIVERED: [OrderStatus.COMPLETED],
    OrderStatus.COMPLETED: [],
    OrderStatus.CANCELLED: [],
    OrderStatus.FAILED: [OrderStatus.PENDING],
}

_PROGRESS = {
    OrderStatus.PENDING: 0,
    OrderStatus.PAID: 20,
    OrderStatus.PROCESSING: 40,
    OrderStatus.SHIPPED: 60,
    OrderStatus.DELIVERED: 80,
    OrderStatus.COMPLETED: 100,
    OrderStatus.CANCELLED: 0,
    OrderStatus.FAILED: 0,
}


def can_cancel(status: OrderStatus | str) -> bool:
    return OrderStatus(status) in CANCELLABLE


def can_pay(status: OrderStatus | str) -> bool:
    return OrderStatus(status) == OrderStatus.PENDING


def is_final(status: OrderStatus | str) -> bool:
    return OrderStatus(status) in FINAL


def has_label(status: OrderStatus | str) -> bool:
    return OrderStatus(status) in WITH_LABEL


def next_statuses(status: OrderStatus | str) -> List[OrderStatus]:
    return list(_TRANSITIONS[OrderStatus(status)])


def is_valid_transition(current: OrderStatus | str, target: OrderStatus | str) -> bool:
    return OrderStatus(target) in _TRANSITIONS[OrderStatus(current)]


def status_progress(status: OrderStatus | str) -> int:
    return _PROGRESS[OrderStatus(status)]


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def payment_deadline(created_at: datetime) -> datetime:
    return _aware(created_at) + timedelta(hours=PAYMENT_DEADLINE_HOURS)


def is_payment_expired(created_at: datetime, now: datetime | None = None) -> bool:
    now = _aware(now) if now else datetime.now(timezone.utc)
    return now > payment_deadline(created_at)


def payment_time_remaining(created_at: datetime, now: datetime | None = None) -> str:
    now = _aware(now) if now else datetime.now(timezone.utc)
    remaining = payment_deadline(created_at) - now
    if remaining <= timedelta(0):
        return "Expired"

    total_minutes = int(remaining.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes}m"
