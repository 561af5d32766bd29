"""The five size-classed event pools and their per-slot bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass

from eventring.pool_id import PoolId
from eventring.ring import PooledEvent, RingBuffer, SlotMetadata

_REF_COUNT_MODULUS = 1 << 8
_GENERATION_MODULUS = 1 << 16


@dataclass(frozen=True)
class PoolStats:
    """A snapshot of how a pool's slots are used."""

    pool_id: PoolId
    total_slots: int
    allocated_slots: int
    available_slots: int
    total_references: int
    utilization_percent: float

    def __str__(self) -> str:
        return (
            f"Pool {self.pool_id.name}: {self.allocated_slots}/{self.total_slots} "
            f"slots ({self.utilization_percent:.1f}%), "
            f"{self.total_references} total refs"
        )


class EventPools:
    """One ring buffer per pool size, with reference-counted slots."""

    def __init__(self) -> None:
        self._rings = {
            pool_id: RingBuffer(pool_id.max_size(), pool_id.capacity())
            for pool_id in PoolId
        }

    def ring(self, pool_id: PoolId) -> RingBuffer:
        """Return the ring buffer backing the given pool."""
        return self._rings[PoolId(pool_id)]

    def _check_index(self, ring: RingBuffer, slot_index: int) -> None:
        if not 0 <= slot_index < ring.capacity:
            raise IndexError(
                f"slot index {slot_index} out of range for {ring.capacity} slots"
            )

    def _metadata(self, pool_id: PoolId, slot_index: int) -> SlotMetadata:
        ring = self.ring(pool_id)
        self._check_index(ring, slot_index)
        return ring.metadata[slot_index]

    def get_slot_data(self, pool_id: PoolId, slot_index: int) -> PooledEvent:
        """Return the event stored in a slot, without copying it."""
        ring = self.ring(pool_id)
        self._check_index(ring, slot_index)
        return ring.data[slot_index]

    def inc_ref_count(self, pool_id: PoolId, slot_index: int) -> int:
        """Increment a slot's reference count and return its previous value."""
        slot = self._metadata(pool_id, slot_index)
        with slot.lock:
            previous = slot.ref_count
            slot.ref_count = (previous + 1) % _REF_COUNT_MODULUS
        return previous

    def dec_ref_count(self, pool_id: PoolId, slot_index: int) -> int:
        """Decrement a slot's reference count and return its previous value."""
        slot = self._metadata(pool_id, slot_index)
        with slot.lock:
            previous = slot.ref_count
            slot.ref_count = (previous - 1) % _REF_COUNT_MODULUS
        return previous

    def mark_slot_reusable(self, pool_id: PoolId, slot_index: int) -> None:
        """Bump the slot's generation and mark it free."""
        slot = self._metadata(pool_id, slot_index)
        with slot.lock:
            slot.generation = (slot.generation + 1) % _GENERATION_MODULUS
            slot.is_allocated = 0

    def get_generation(self, pool_id: PoolId, slot_index: int) -> int:
        """Return the slot's generation number."""
        slot = self._metadata(pool_id, slot_index)
        with slot.lock:
            return slot.generation

    def is_slot_available(self, pool_id: PoolId, slot_index: int) -> bool:
        """True when the slot has no references and is not allocated."""
        slot = self._metadata(pool_id, slot_index)
        with slot.lock:
            return slot.ref_count == 0 and slot.is_allocated == 0

    def try_allocate_slot(self, pool_id: PoolId, slot_index: int) -> bool:
        """Atomically claim a free slot, giving it a reference count of one."""
        slot = self._metadata(pool_id, slot_index)
        with slot.lock:
            if slot.ref_count != 0 or slot.is_allocated != 0:
                return False
            slot.is_allocated = 1
            slot.ref_count = 1
            return True

    def place_event(self, pool_id: PoolId, event: PooledEvent, slot_index: int) -> None:
        """Store a copy of ``event`` in the given slot."""
        ring = self.ring(pool_id)
        self._check_index(ring, slot_index)
        if len(event.data) != ring.tshirt_size:
            raise ValueError(
                f"event buffer of {len(event.data)} bytes does not fit "
                f"slots of {ring.tshirt_size} bytes"
            )
        ring.data[slot_index] = event.copy()

    def get_ref_count(self, pool_id: PoolId, slot_index: int) -> int:
        """Return the slot's current reference count."""
        slot = self._metadata(pool_id, slot_index)
        with slot.lock:
            return slot.ref_count

    def get_pool_stats(self, pool_id: PoolId) -> PoolStats:
        """Summarise allocation and references across a pool."""
        pool_id = PoolId(pool_id)
        ring = self.ring(pool_id)
        allocated = 0
        references = 0
        for slot in ring.metadata:
            with slot.lock:
                if slot.is_allocated != 0:
                    allocated += 1
                references += slot.ref_count
        capacity = ring.capacity
        return PoolStats(
            pool_id=pool_id,
            total_slots=capacity,
            allocated_slots=allocated,
            available_slots=capacity - allocated,
            total_references=references,
            utilization_percent=allocated / capacity * 100.0,
        )