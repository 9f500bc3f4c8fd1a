"""Fault pipeline: many producers, one consumer, one ordered output stream.

Producers push faults through a bounded channel. Senders wait while the buffer
is full and fail with :class:`SendError` once the consumer is gone; the fault
travels back to the caller on the exception. The single :class:`Reporter` task
renders each fault as it arrives and flushes the sink exactly once, after the
last sender has closed and the buffer is drained.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar

from fussel.core.fault import Fault, Level

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CAPACITY = 64


class SendError(Exception, Generic[T]):
    """The receiving side is closed; ``message`` was not delivered."""

    def __init__(self, message: T) -> None:
        super().__init__("channel receiver is closed")
        self.message = message


class RecvError(Exception):
    """Every sender is closed and the buffer is drained."""


class _Channel(Generic[T]):
    def __init__(self, capacity: int | None) -> None:
        if capacity is not None and capacity < 1:
            raise ValueError(f"Channel capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.buffer: deque[T] = deque()
        self.condition = asyncio.Condition()
        self.senders = 0
        self.receiver_open = True
        self.wakers: set[asyncio.Task[None]] = set()

    def has_room(self) -> bool:
        return self.capacity is None or len(self.buffer) < self.capacity


class Sender(Generic[T]):
    def __init__(self, channel: _Channel[T]) -> None:
        self._channel = channel
        self._closed = False
        channel.senders += 1

    async def send(self, message: T) -> None:
        if self._closed:
            raise RuntimeError("send on a closed sender")
        channel = self._channel
        async with channel.condition:
            await channel.condition.wait_for(lambda: not channel.receiver_open or channel.has_room())
            if not channel.receiver_open:
                raise SendError(message)
            channel.buffer.append(message)
            channel.condition.notify_all()

    def clone(self) -> Sender[T]:
        if self._closed:
            raise RuntimeError("clone of a closed sender")
        return Sender(self._channel)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._channel.senders -= 1
        _notify(self._channel)

    async def __aenter__(self) -> Sender[T]:
        return self

    async def __aexit__(self, *_: object) -> None:
        self.close()


class Receiver(Generic[T]):
    def __init__(self, channel: _Channel[T]) -> None:
        self._channel = channel

    async def recv(self) -> T:
        channel = self._channel
        async with channel.condition:
            await channel.condition.wait_for(lambda: bool(channel.buffer) or channel.senders == 0)
            if not channel.buffer:
                raise RecvError
            message = channel.buffer.popleft()
            channel.condition.notify_all()
            return message

    def close(self) -> None:
        self._channel.receiver_open = False
        _notify(self._channel)

    def __aiter__(self) -> Receiver[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.recv()
        except RecvError:
            raise StopAsyncIteration from None


def _notify(channel: _Channel[T]) -> None:
    """Wake every waiter from synchronous code."""

    async def _wake() -> None:
        async with channel.condition:
            channel.condition.notify_all()

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return
    task = loop.create_task(_wake())
    channel.wakers.add(task)
    task.add_done_callback(channel.wakers.discard)


def channel(capacity: int | None = DEFAULT_CAPACITY) -> tuple[Sender[T], Receiver[T]]:
    """Create a channel; ``capacity=None`` makes it unbounded."""
    inner: _Channel[T] = _Channel(capacity)
    return Sender(inner), Receiver(inner)


class Sink(Protocol):
    def write(self, data: bytes, /) -> object: ...

    def flush(self) -> None: ...


@dataclass
class ReportSummary:
    counts: Counter[Level | None] = field(default_factory=Counter)

    def record(self, fault: Fault) -> None:
        self.counts[fault.level] += 1

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def errors(self) -> int:
        return self.counts[Level.ERROR]

    @property
    def warnings(self) -> int:
        return self.counts[Level.WARNING]


class Reporter:
    """The single consumer of a fault channel."""

    def __init__(self, receiver: Receiver[Fault], sink: Sink) -> None:
        self._receiver = receiver
        self._sink = sink
        self._task: asyncio.Task[ReportSummary] | None = None

    def spawn(self) -> asyncio.Task[ReportSummary]:
        if self._task is None:
            self._task = asyncio.create_task(self._run())
        return self._task

    async def _run(self) -> ReportSummary:
        summary = ReportSummary()
        try:
            async for fault in self._receiver:
                self._sink.write(fault.render().encode("utf-8"))
                summary.record(fault)
        finally:
            self._receiver.close()
        self._sink.flush()
        logger.debug("Reported %d fault(s)", summary.total)
        return summary
