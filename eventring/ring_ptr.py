"""Reference-counted handles to events living in pool slots."""

from __future__ import annotations

from eventring.pool import EventPools
from eventring.pool_id import PoolId
from eventring.ring import PooledEvent


class RingPtr:
    """A counted reference to one slot of an event pool.

    The slot's reference count must already include this handle when it is
    constructed. Cloning adds a reference; releasing removes one, and the
    last release frees the slot and advances its generation.
    """

    def __init__(
        self, pool_id: PoolId, slot_index: int, generation: int, pools: EventPools
    ) -> None:
        self.pool_id = PoolId(pool_id)
        self.slot_index = slot_index
        self.generation = generation
        self._pools = pools
        self._released = False

    @property
    def event(self) -> PooledEvent:
        """The event stored in the slot, shared rather than copied."""
        return self._pools.get_slot_data(self.pool_id, self.slot_index)

    @property
    def data(self) -> bytearray:
        """The slot's whole payload buffer."""
        return self.event.data

    @property
    def length(self) -> int:
        """Number of meaningful bytes in the payload."""
        return self.event.length

    @property
    def event_type(self) -> int:
        """The event's type tag."""
        return self.event.event_type

    @property
    def released(self) -> bool:
        """True once this handle has given up its reference."""
        return self._released

    def clone(self) -> RingPtr:
        """Return a new handle to the same slot, adding a reference."""
        if self._released:
            raise ValueError("cannot clone a released RingPtr")
        self._pools.inc_ref_count(self.pool_id, self.slot_index)
        return RingPtr(self.pool_id, self.slot_index, self.generation, self._pools)

    def release(self) -> None:
        """Drop this handle's reference; a second call does nothing."""
        if self._released:
            return
        self._released = True
        previous = self._pools.dec_ref_count(self.pool_id, self.slot_index)
        if previous == 1:
            self._pools.mark_slot_reusable(self.pool_id, self.slot_index)

    def __enter__(self) -> RingPtr:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __del__(self) -> None:
        try:
            self.release()
        except Exception:
            pass

    def __repr__(self) -> str:
        return (
            f"RingPtr(pool_id={self.pool_id.name}, slot_index={self.slot_index}, "
            f"generation={self.generation})"
        )