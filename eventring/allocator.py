"""Size-classed allocation of events into reference-counted pool slots."""

from __future__ import annotations

from eventring.allocated_event import AllocatedEvent
from eventring.pool import EventPools
from eventring.pool_id import PoolId
from eventring.pooled_event_ptr import PooledEventPtr
from eventring.ring import EventSize, PooledEvent, Reader, Writer
from eventring.ring_ptr import RingPtr

_MAX_EVENT_TYPE = (1 << 32) - 1
_LARGEST_POOL_SIZE = PoolId.XL.max_size()

_SIZE_LIMITS = (
    (PoolId.XS.max_size(), EventSize.XS),
    (PoolId.S.max_size(), EventSize.S),
    (PoolId.M.max_size(), EventSize.M),
    (PoolId.L.max_size(), EventSize.L),
    (PoolId.XL.max_size(), EventSize.XL),
)


class AllocationError(Exception):
    """Base class for failures to allocate an event into a pool."""


class EventCreationError(AllocationError):
    """The event could not be built for the requested slot size."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Event creation failed: {reason}")
        self.reason = reason


class PoolFullError(AllocationError):
    """Every slot of the pool is in use."""

    def __init__(self, pool_id: PoolId) -> None:
        pool_id = PoolId(pool_id)
        super().__init__(f"Pool {pool_id.name} is full")
        self.pool_id = pool_id


class TooLargeError(AllocationError):
    """The payload is larger than the largest pool can hold."""

    def __init__(self, data_len: int, max_size: int) -> None:
        super().__init__(f"Data too large: {data_len} bytes > max {max_size} bytes")
        self.data_len = data_len
        self.max_size = max_size


class EventAllocator:
    """Places events into the smallest pool that fits them."""

    def __init__(self) -> None:
        self.pools = EventPools()

    def writer(self, pool_id: PoolId) -> Writer:
        """Return a sequential writer for the given pool's ring."""
        return self.pools.ring(pool_id).writer()

    def reader(self, pool_id: PoolId) -> Reader:
        """Return a sequential reader for the given pool's ring."""
        return self.pools.ring(pool_id).reader()

    @staticmethod
    def estimate_size(data_len: int) -> EventSize:
        """Return the size class for a payload of ``data_len`` bytes."""
        if data_len < 0:
            raise ValueError("data length must not be negative")
        for limit, size in _SIZE_LIMITS:
            if data_len <= limit:
                return size
        return EventSize.XXL

    @staticmethod
    def create_pooled_event(size: int, data: bytes, event_type: int) -> PooledEvent:
        """Build an event with a ``size``-byte buffer holding ``data``."""
        if not 0 <= event_type <= _MAX_EVENT_TYPE:
            raise ValueError("event type must fit in 32 unsigned bits")
        payload = bytes(data)
        if len(payload) > size:
            raise EventCreationError("Data too large for this pool size")
        event = PooledEvent.zeroed(size)
        event.data[: len(payload)] = payload
        event.length = len(payload)
        event.event_type = event_type
        return event

    def find_available_slot(self, pool_id: PoolId) -> int | None:
        """Claim the first free slot of the pool, or return None if it is full."""
        pool_id = PoolId(pool_id)
        return next(
            (
                index
                for index in range(pool_id.capacity())
                if self.pools.try_allocate_slot(pool_id, index)
            ),
            None,
        )

    def allocate_in_pool(self, pool_id: PoolId, data: bytes, event_type: int) -> RingPtr:
        """Place an event into a slot of the given pool and return a handle to it."""
        pool_id = PoolId(pool_id)
        event = self.create_pooled_event(pool_id.max_size(), data, event_type)
        slot_index = self.find_available_slot(pool_id)
        if slot_index is None:
            raise PoolFullError(pool_id)
        self.pools.place_event(pool_id, event, slot_index)
        generation = self.pools.get_generation(pool_id, slot_index)
        return RingPtr(pool_id, slot_index, generation, self.pools)

    def _allocate_sized(self, data: bytes, event_type: int) -> RingPtr:
        payload = bytes(data)
        size = self.estimate_size(len(payload))
        if size is EventSize.XXL:
            raise TooLargeError(len(payload), _LARGEST_POOL_SIZE)
        return self.allocate_in_pool(PoolId.from_size(size), payload, event_type)

    def allocate_event(self, data: bytes, event_type: int) -> AllocatedEvent:
        """Allocate into the smallest pool that fits ``data``."""
        return AllocatedEvent(self._allocate_sized(data, event_type))

    def allocate_and_get_pooled_event_ptr(
        self, data: bytes, event_type: int
    ) -> PooledEventPtr:
        """Allocate into the smallest fitting pool and return a uniform handle."""
        return PooledEventPtr(self._allocate_sized(data, event_type))