"""Wspolne fixtures: wirtualny czas dla pollera, magazyn KV w pamieci, mock backend."""
import heapq
import itertools

import pytest
from fastapi.testclient import TestClient

from storefront.data.kv_store import MemoryKeyValueStore
from storefront.mock_backend.main import API_PREFIX, create_app
from storefront.mock_backend.store import MockStore
from storefront.repos.guest_cart_store import GuestCartStore
from storefront.services.api_client import ApiClient
from storefront.services.notification_service import RecordingNotifier


class FakeTimer:
    def __init__(self, due: float, callback, interval: float | None = None):
        self.due = due
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Scheduler na wirtualnym czasie; advance() odpala timery po kolei."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = itertools.count()

    def _push(self, timer: FakeTimer) -> None:
        heapq.heappush(self._queue, (timer.due, next(self._seq), timer))

    def call_later(self, delay, callback):
        timer = FakeTimer(self.now + delay, callback)
        self._push(timer)
        return timer

    def call_every(self, interval, callback):
        timer = FakeTimer(self.now + interval, callback, interval)
        self._push(timer)
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for _, _, t in self._queue if not t.cancelled)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = due
            timer.callback()
            if timer.interval is not None and not timer.cancelled:
                timer.due = due + timer.interval
                self._push(timer)
        self.now = target


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def guest_store(kv):
    return GuestCartStore(kv)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def mock_store():
    return MockStore()


@pytest.fixture
def api(mock_store):
    client = TestClient(create_app(mock_store))
    return ApiClient(base_url=f"http://testserver{API_PREFIX}", session=client, token="test-token")
