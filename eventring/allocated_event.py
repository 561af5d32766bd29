"""The handle returned when an event is allocated into a pool slot."""

from __future__ import annotations

from eventring.pool_id import PoolId
from eventring.pooled_event_ptr import PooledEventPtr
from eventring.ring_ptr import RingPtr

_VARIANT_NAMES = {
    PoolId.XS: "Xs",
    PoolId.S: "S",
    PoolId.M: "M",
    PoolId.L: "L",
    PoolId.XL: "Xl",
}


class AllocatedEvent:
    """An event that has been placed in a pool slot, of any size class.

    The handle owns one reference to the slot through the wrapped
    :class:`RingPtr`. Converting it with :meth:`into_pooled_event_ptr`
    hands that reference over, after which this handle can no longer be used.
    """

    def __init__(self, ring_ptr: RingPtr) -> None:
        if not isinstance(ring_ptr, RingPtr):
            raise TypeError("AllocatedEvent wraps a RingPtr")
        self._ring_ptr: RingPtr | None = ring_ptr

    @property
    def ring_ptr(self) -> RingPtr:
        """The wrapped ring pointer."""
        return self._live()

    @property
    def variant(self) -> str:
        """Name of the size class this event was allocated in."""
        return _VARIANT_NAMES[self._live().pool_id]

    def _live(self) -> RingPtr:
        if self._ring_ptr is None:
            raise ValueError("AllocatedEvent has been converted and can no longer be used")
        return self._ring_ptr

    def data(self) -> bytes:
        """The event's payload, ``length()`` bytes long."""
        return self._live().event.payload()

    def slot_index(self) -> int:
        """Index of the slot holding the event."""
        return self._live().slot_index

    def into_pooled_event_ptr(self) -> PooledEventPtr:
        """Hand this event's reference over to a :class:`PooledEventPtr`."""
        ring_ptr = self._live()
        self._ring_ptr = None
        return PooledEventPtr(ring_ptr)

    def event_type(self) -> int:
        """The event's type tag."""
        return self._live().event_type

    def length(self) -> int:
        """Number of payload bytes."""
        return self._live().length

    def pool_id(self) -> PoolId:
        """The pool the event lives in."""
        return self._live().pool_id

    def clone(self) -> AllocatedEvent:
        """Return another handle to the same slot, adding a reference."""
        return AllocatedEvent(self._live().clone())

    def release(self) -> None:
        """Give up this handle's reference; does nothing once converted."""
        if self._ring_ptr is not None:
            self._ring_ptr.release()

    def __enter__(self) -> AllocatedEvent:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        if self._ring_ptr is None:
            return "AllocatedEvent(<converted>)"
        return f"AllocatedEvent.{self.variant}({self._ring_ptr!r})"