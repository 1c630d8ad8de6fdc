# storefront/data/kv_store.py
"""
Lokalny magazyn klucz-wartosc (odpowiednik localStorage / cookies).

Trzy implementacje z tym samym kontraktem get/set/remove:
- MemoryKeyValueStore: slownik w pamieci procesu
- RedisKeyValueStore: redis, TTL przez SET ... EX
- SqlKeyValueStore: tabela kv_entries przez SQLAlchemy
"""
import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Protocol, Tuple

import redis

from storefront.data.database import Base, make_engine, make_session_factory
from storefront.data.models.kv_entry import KeyValueEntryModel
from storefront.utils.logging import get_logger
from storefront.utils.retry import redis_retry
from storefront.utils.settings import KV_BACKEND, REDIS_URL

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl: int | None = None) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryKeyValueStore:
    def __init__(self, clock: Callable[[], float] | None = None):
        self._data: Dict[str, Tuple[str, float | None]] = {}
        self._lock = threading.Lock()
        self._clock = clock or time.monotonic

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at is not None and expires_at <= self._clock():
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        expires_at = self._clock() + ttl if ttl else None
        with self._lock:
            self._data[key] = (value, expires_at)

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class RedisKeyValueStore:
    def __init__(self, url: str | None = None, client: redis.Redis | None = None, prefix: str = "storefront:"):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    @redis_retry()
    def get(self, key: str) -> str | None:
        return self.redis.get(self._key(key))

    @redis_retry()
    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        #ex=None -> klucz bez wygasania
        self.redis.set(name=self._key(key), value=value, ex=ttl)

    @redis_retry()
    def remove(self, key: str) -> None:
        self.redis.delete(self._key(key))


class SqlKeyValueStore:
    def __init__(self, url: str | None = None, session_factory=None):
        if session_factory is None:
            engine = make_engine(url)
            Base.metadata.create_all(bind=engine)
            session_factory = make_session_factory(engine)
        self.session_factory = session_factory

    @staticmethod
    def _expired(entry: KeyValueEntryModel, now: datetime) -> bool:
        if entry.expires_at is None:
            return False
        expires_at = entry.expires_at
        # sqlite gubi strefe czasowa
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at <= now

    def get(self, key: str) -> str | None:
        db = self.session_factory()
        try:
            entry = db.get(KeyValueEntryModel, key)
            if entry is None:
                return None
            if self._expired(entry, datetime.now(timezone.utc)):
                db.delete(entry)
                db.commit()
                return None
            return entry.value
        finally:
            db.close()

    def set(self, key: str, value: str, ttl: int | None = None) -> None:
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl) if ttl else None
        db = self.session_factory()
        try:
            db.merge(KeyValueEntryModel(key=key, value=value, expires_at=expires_at))
            db.commit()
        finally:
            db.close()

    def remove(self, key: str) -> None:
        db = self.session_factory()
        try:
            entry = db.get(KeyValueEntryModel, key)
            if entry is not None:
                db.delete(entry)
                db.commit()
        finally:
            db.close()


def create_kv_store(backend: str | None = None) -> KeyValueStore:
    backend = (backend or KV_BACKEND).lower()
    logger.info(f"Using {backend} key-value store")

    if backend == "memory":
        return MemoryKeyValueStore()
    if backend == "redis":
        return RedisKeyValueStore()
    if backend == "sql":
        return SqlKeyValueStore()
    raise ValueError(f"Unknown KV backend: {backend}")
