# storefront/services/notification_service.py
from typing import List, Protocol, Tuple

from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class Notifier(Protocol):
    """Powiadomienia dla uzytkownika (toasty w UI)."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LoggingNotifier:
    def success(self, message: str) -> None:
        logger.info(f"[NOTIFICATION] {message}")

    def error(self, message: str) -> None:
        logger.warning(f"[NOTIFICATION] {message}")


class RecordingNotifier:
    """Zbiera powiadomienia w liscie, np. do wyswietlenia przez UI."""

    def __init__(self):
        self.messages: List[Tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    @property
    def errors(self) -> List[str]:
        return [m for kind, m in self.messages if kind == "error"]

    @property
    def successes(self) -> List[str]:
        return [m for kind, m in self.messages if kind == "success"]
