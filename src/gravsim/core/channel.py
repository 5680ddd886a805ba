"""Bounded, ordered, non-blocking snapshot channel between two threads."""

from __future__ import annotations

import threading
from queue import Empty, Full, Queue
from typing import Generic, TypeVar


T = TypeVar("T")

OVERFLOW_POLICIES = ("drop_oldest", "drop_newest")


class SnapshotChannel(Generic[T]):
    """Single-producer / single-consumer queue with an overflow policy.

    ``send`` never blocks. When the queue is full, ``drop_oldest`` evicts the
    oldest pending item so the newest one always gets through ("latest value
    wins"); ``drop_newest`` refuses the incoming item instead. Delivered items
    keep their production order.
    """

    def __init__(self, capacity: int = 1, overflow: str = "drop_oldest") -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        if overflow not in OVERFLOW_POLICIES:
            raise ValueError(f"unsupported overflow policy: {overflow}")
        self.capacity = int(capacity)
        self.overflow = overflow
        self._queue: Queue[T] = Queue(maxsize=self.capacity)
        self._closed = threading.Event()
        self._lock = threading.Lock()
        self.sent = 0
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        self._closed.set()

    def send(self, item: T) -> bool:
        """Enqueue without blocking; return False if the item was not queued."""
        if self.closed:
            return False
        with self._lock:
            try:
                self._queue.put_nowait(item)
            except Full:
                if self.overflow == "drop_newest":
                    self.dropped += 1
                    return False
                try:
                    self._queue.get_nowait()
                    self.dropped += 1
                except Empty:
                    pass
                self._queue.put_nowait(item)
            self.sent += 1
        return True

    def receive(self, timeout: float | None = None) -> T:
        """Blocking get; raises ``queue.Empty`` when ``timeout`` expires."""
        return self._queue.get(timeout=timeout)

    def try_receive(self) -> T | None:
        try:
            return self._queue.get_nowait()
        except Empty:
            return None

    def drain(self) -> list[T]:
        items: list[T] = []
        while True:
            item = self.try_receive()
            if item is None:
                return items
            items.append(item)

    def latest(self) -> T | None:
        """Drain pending items and return only the newest one."""
        items = self.drain()
        return items[-1] if items else None

    def __len__(self) -> int:
        return self._queue.qsize()
