# storefront/repos/locale_store.py
from storefront.data.kv_store import KeyValueStore
from storefront.utils.settings import DEFAULT_LOCALE, LOCALE_KEY, LOCALE_TTL_SECONDS

SUPPORTED_LOCALES = ("en", "id")


class LocalePreferenceStore:
    def __init__(self, kv: KeyValueStore, key: str | None = None, ttl: int | None = None):
        self.kv = kv
        self.key = key or LOCALE_KEY
        self.ttl = ttl or LOCALE_TTL_SECONDS

    def get(self) -> str:
        stored = self.kv.get(self.key)
        if stored in SUPPORTED_LOCALES:
            return stored
        return DEFAULT_LOCALE

    def set(self, locale: str) -> None:
        if locale not in SUPPORTED_LOCALES:
            raise ValueError(f"Unsupported locale: {locale}")
        self.kv.set(self.key, locale, ttl=self.ttl)
