# storefront/services/cart_reconciliation.py
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Set

from storefront.repos.guest_cart_store import GuestCartStore
from storefront.utils.logging import get_logger

if TYPE_CHECKING:
    from storefront.services.cart_service import CartService

logger = get_logger(__name__)


@dataclass
class MergeResult:
    added: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


class CartReconciliation:
    """
    Przeniesienie koszyka goscia do koszyka serwera po zalogowaniu.

    Best-effort, at-most-once:
    - pozycja ktora juz jest na serwerze (ten sam variant_id) jest pomijana,
      ilosc na serwerze sie nie zmienia
    - blad pobrania koszyka albo pojedynczego dodania jest logowany,
      reszta pozycji jest przetwarzana dalej
    - koszyk goscia jest czyszczony zawsze, takze po czesciowym bledzie

    Brak locka: wolajacy musi serializowac wywolania (jeden hook po loginie).
    """

    def __init__(self, cart_service: "CartService", guest_store: GuestCartStore):
        self.cart_service = cart_service
        self.guest_store = guest_store

    def _server_variant_ids(self) -> Set[str]:
        try:
            cart = self.cart_service.get_cart()
        except Exception as e:
            # bez koszyka serwera probujemy dodac wszystko, serwer pilnuje unikalnosci
            logger.error(f"Failed to fetch server cart before merge: {e}")
            return set()
        return {item.variant_id for item in cart.items}

    def merge(self) -> MergeResult:
        result = MergeResult()
        guest_items = self.guest_store.get()

        if not guest_items:
            return result

        logger.info(f"Merging {len(guest_items)} guest cart item(s) into server cart")

        try:
            existing = self._server_variant_ids()

            #po kolei, bez rownoleglych requestow
            for item in guest_items:
                if item.variant_id in existing:
                    logger.info(f"Variant {item.variant_id} already in server cart, skipping")
                    result.skipped.append(item.variant_id)
                    continue

                try:
                    self.cart_service.add_item(item.variant_id, item.quantity)
                    existing.add(item.variant_id)
                    result.added.append(item.variant_id)
                except Exception as e:
                    logger.error(f"Failed to merge guest item {item.variant_id}: {e}")
                    result.failed.append(item.variant_id)
        finally:
            self.guest_store.clear()

        logger.info(
            f"Guest cart merged: added={len(result.added)} "
            f"skipped={len(result.skipped)} failed={len(result.failed)}"
        )
        return result
