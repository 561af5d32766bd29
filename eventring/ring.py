"""Fixed-size event records and the ring buffer that stores them."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum

MAX_RING_BYTES = 1_048_576
"""Upper bound on the payload bytes a single ring buffer may hold."""


class EventSize(Enum):
    """T-shirt sizing of events."""

    XS = "xs"  # up to 64 bytes
    S = "s"  # up to 256 bytes
    M = "m"  # up to 1 KiB
    L = "l"  # up to 4 KiB
    XL = "xl"  # up to 16 KiB
    XXL = "xxl"  # larger than any pool


@dataclass
class PooledEvent:
    """An event stored in a fixed-size payload buffer."""

    data: bytearray
    length: int = 0
    event_type: int = 0

    @classmethod
    def zeroed(cls, size: int) -> PooledEvent:
        """Return an empty event whose buffer holds ``size`` zero bytes."""
        if size < 0:
            raise ValueError("event size must not be negative")
        return cls(bytearray(size))

    def payload(self) -> bytes:
        """The meaningful part of the buffer: its first ``length`` bytes."""
        return bytes(self.data[: self.length])

    def copy(self) -> PooledEvent:
        """Return an independent copy of this event."""
        return PooledEvent(bytearray(self.data), self.length, self.event_type)


@dataclass
class SlotMetadata:
    """Per-slot bookkeeping: reference count, generation and allocation flag."""

    ref_count: int = 0
    generation: int = 0
    is_allocated: int = 0
    lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )


class RingBuffer:
    """A fixed number of equally sized event slots with a shared write cursor."""

    def __init__(self, tshirt_size: int, capacity: int) -> None:
        if tshirt_size <= 0:
            raise ValueError("slot size must be positive")
        if capacity <= 0:
            raise ValueError("ring capacity must be positive")
        if tshirt_size * capacity > MAX_RING_BYTES:
            raise ValueError(
                "Ring buffer too large! Reduce RING_CAPACITY or TSHIRT_SIZE"
            )
        self.tshirt_size = tshirt_size
        self.capacity = capacity
        self.data = [PooledEvent.zeroed(tshirt_size) for _ in range(capacity)]
        self.metadata = [SlotMetadata() for _ in range(capacity)]
        self.write_cursor = 0
        self._lock = threading.Lock()

    def reader(self) -> Reader:
        """Return a reader starting at the beginning of the ring."""
        return Reader(self)

    def writer(self) -> Writer:
        """Return a writer appending at the shared write cursor."""
        return Writer(self)

    def __repr__(self) -> str:
        return (
            f"RingBuffer(tshirt_size={self.tshirt_size}, capacity={self.capacity}, "
            f"write_cursor={self.write_cursor})"
        )


class Reader:
    """Iterates over events written to a ring buffer after its cursor."""

    def __init__(self, ringbuffer: RingBuffer) -> None:
        self.ringbuffer = ringbuffer
        self.cursor = 0
        self.last_ts = 0

    def __iter__(self) -> Reader:
        return self

    def __next__(self) -> PooledEvent:
        ring = self.ringbuffer
        with ring._lock:
            writer_pos = ring.write_cursor
            if self.cursor >= writer_pos:
                raise StopIteration
            event = ring.data[self.cursor].copy()
        self.cursor = (self.cursor + 1) % ring.capacity
        return event


class Writer:
    """Writes events into consecutive slots of a ring buffer."""

    def __init__(self, ringbuffer: RingBuffer) -> None:
        self.ringbuffer = ringbuffer
        self.last_ts = 0

    def add(self, event: PooledEvent) -> bool:
        """Store a copy of ``event`` at the write cursor and advance it."""
        ring = self.ringbuffer
        if len(event.data) != ring.tshirt_size:
            raise ValueError(
                f"event buffer of {len(event.data)} bytes does not fit "
                f"slots of {ring.tshirt_size} bytes"
            )
        with ring._lock:
            cursor = ring.write_cursor
            ring.data[cursor] = event.copy()
            ring.write_cursor = (cursor + 1) % ring.capacity
        return True