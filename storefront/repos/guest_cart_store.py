# storefront/repos/guest_cart_store.py
import json
from datetime import datetime, timezone
from typing import Callable, List

from pydantic import TypeAdapter, ValidationError

from storefront.data.kv_store import KeyValueStore
from storefront.domain.schemas import GuestCartItem
from storefront.utils.logging import get_logger
from storefront.utils.settings import GUEST_CART_KEY

logger = get_logger(__name__)

_items_adapter = TypeAdapter(List[GuestCartItem])


class GuestCartStore:
    """
    Koszyk goscia trzymany lokalnie, bez zadnych wywolan sieciowych.
    Kazda operacja to read-modify-write calej listy pod jednym kluczem.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        key: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.kv = kv
        self.key = key or GUEST_CART_KEY
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def get(self) -> List[GuestCartItem]:
        raw = self.kv.get(self.key)
        if not raw:
            return []
        try:
            return _items_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Guest cart under {self.key} is unreadable, treating as empty: {e}")
            return []

    def _save(self, items: List[GuestCartItem]) -> None:
        payload = [i.model_dump(mode="json", by_alias=True) for i in items]
        self.kv.set(self.key, json.dumps(payload))

    def add(self, variant_id: str, quantity: int) -> None:
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        items = self.get()
        existing = next((i for i in items if i.variant_id == variant_id), None)

        if existing:
            existing.quantity += quantity
            existing.added_at = self.clock()
        else:
            items.append(GuestCartItem(variant_id=variant_id, quantity=quantity, added_at=self.clock()))

        self._save(items)

    def update(self, variant_id: str, quantity: int) -> None:
        items = self.get()
        existing = next((i for i in items if i.variant_id == variant_id), None)
        if existing is None:
            return

        if quantity == 0:
            items.remove(existing)
        elif quantity < 0:
            raise ValueError("Quantity cannot be negative")
        else:
            existing.quantity = quantity

        self._save(items)

    def remove(self, variant_id: str) -> None:
        items = self.get()
        remaining = [i for i in items if i.variant_id != variant_id]
        if len(remaining) != len(items):
            self._save(remaining)

    def clear(self) -> None:
        self.kv.remove(self.key)

    def total_quantity(self) -> int:
        return sum(i.quantity for i in self.get())
