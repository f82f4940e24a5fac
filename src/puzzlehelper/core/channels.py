from __future__ import annotations

import queue
import threading
from typing import Callable, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")

_CLOSED = object()


class ChannelClosedError(RuntimeError):
    pass


class ResultChannel(Generic[T]):
    """
    Many-producer / single-consumer pipe with an explicit close.

    Producers call send() from any thread. Exactly one consumer iterates the
    channel; iteration ends once close() has been called and everything sent
    before it has been handed out. maxsize=0 means unbounded.
    """

    def __init__(self, maxsize: int = 0):
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def send(self, item: T) -> None:
        if self._closed.is_set():
            raise ChannelClosedError("send on closed channel")
        self._queue.put(item)

    def close(self) -> None:
        if self._closed.is_set():
            return
        self._closed.set()
        self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]


class Collector(Generic[T]):
    """
    Drains a ResultChannel into a list on its own thread.
    Items rejected by `accept` are dropped as they arrive.
    """

    def __init__(
        self,
        channel: ResultChannel[T],
        *,
        accept: Optional[Callable[[T], bool]] = None,
        name: str = "collector",
    ):
        self._channel = channel
        self._accept = accept
        self._items: list[T] = []
        self._error: Optional[BaseException] = None
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        try:
            for item in self._channel:
                if self._accept is None or self._accept(item):
                    self._items.append(item)
        except BaseException as e:  # re-raised on join()
            self._error = e

    def join(self) -> list[T]:
        """Wait for the channel to be closed and drained, then return what arrived."""
        self._thread.join()
        if self._error is not None:
            raise self._error
        return self._items
