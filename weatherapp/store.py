# ABOUTME: Observable per-city store of fetch states (pending / success / error).
# ABOUTME: Serializes writes, drops stale resolutions by generation token and pushes snapshots to subscribers.

import asyncio
import logging
import threading
from collections import deque
from collections.abc import AsyncIterator, Callable, Mapping
from types import MappingProxyType
from typing import Any

from weatherapp.models import Error, FetchState, Pending, Success

logger = logging.getLogger(__name__)

Snapshot = Mapping[str, FetchState]
Subscriber = Callable[[Snapshot], None]


class WeatherStore:
    """Owns exactly one FetchState per city key.

    Entries are created by the first `begin_fetch` for a key and overwritten by
    every later write; nothing is ever removed. Every change is pushed to
    subscribers as a full read-only snapshot, in write order. A write made from
    inside a subscriber callback is delivered after the current snapshot has
    reached every subscriber.

    `begin_fetch` returns a generation token. Passing it back to `resolve_success`
    or `resolve_error` discards the write when a newer fetch for the same key has
    started since. Without a token the last write wins.
    """

    def __init__(self) -> None:
        self._states: dict[str, FetchState] = {}
        self._generations: dict[str, int] = {}
        self._subscribers: list[Subscriber] = []
        self._outbox: deque[Snapshot] = deque()
        self._delivering = False
        self._lock = threading.RLock()

    def begin_fetch(self, key: str) -> int:
        with self._lock:
            token = self._generations.get(key, 0) + 1
            self._generations[key] = token
            self._write(key, Pending())
        self._deliver()
        return token

    def resolve_success(self, key: str, payload: Any, token: int | None = None) -> bool:
        return self._resolve(key, Success(payload=payload), token)

    def resolve_error(self, key: str, message: str, token: int | None = None) -> bool:
        return self._resolve(key, Error(message=message), token)

    def _resolve(self, key: str, state: FetchState, token: int | None) -> bool:
        with self._lock:
            if token is not None and token != self._generations.get(key):
                logger.debug("Dropping stale %s for %r (token %s, current %s)",
                             state.status, key, token, self._generations.get(key))
                return False
            self._write(key, state)
        self._deliver()
        return True

    def _write(self, key: str, state: FetchState) -> None:
        # Caller holds the lock, so snapshots enter the outbox in write order.
        self._states[key] = state
        self._outbox.append(MappingProxyType(dict(self._states)))

    def snapshot(self) -> Snapshot:
        with self._lock:
            return MappingProxyType(dict(self._states))

    def get(self, key: str) -> FetchState | None:
        """State for `key`, or None when it was never fetched."""
        with self._lock:
            return self._states.get(key)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for every change. Returns a function that unsubscribes it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    async def updates(self) -> AsyncIterator[Snapshot]:
        """Yield the current snapshot, then one snapshot per change, until the consumer stops."""
        queue: asyncio.Queue[Snapshot] = asyncio.Queue()
        unsubscribe = self.subscribe(queue.put_nowait)
        try:
            yield self.snapshot()
            while True:
                yield await queue.get()
        finally:
            unsubscribe()

    def _deliver(self) -> None:
        """Drain the outbox to subscribers unless another call is already draining it.

        Only one caller delivers at a time, whether the competing write comes from
        another thread or from a subscriber callback; its snapshot is left in the
        outbox for the active drain loop.
        """
        with self._lock:
            if self._delivering:
                return
            self._delivering = True
        try:
            while True:
                with self._lock:
                    if not self._outbox:
                        self._delivering = False
                        return
                    snapshot = self._outbox.popleft()
                    subscribers = list(self._subscribers)
                for callback in subscribers:
                    try:
                        callback(snapshot)
                    except Exception:
                        logger.exception("Store subscriber %r failed", callback)
        except BaseException:
            with self._lock:
                self._delivering = False
            raise
