"""A uniform handle to pooled events of any size class."""

from __future__ import annotations

from eventring.pool_id import PoolId
from eventring.ring_ptr import RingPtr

_VARIANT_NAMES = {
    PoolId.XS: "Xs",
    PoolId.S: "S",
    PoolId.M: "M",
    PoolId.L: "L",
    PoolId.XL: "Xl",
}


class PooledEventPtr:
    """Wraps a :class:`RingPtr` into any pool behind one interface.

    The wrapper owns the reference held by the wrapped pointer: cloning
    adds a reference to the slot and releasing gives it up.
    """

    def __init__(self, ring_ptr: RingPtr) -> None:
        if not isinstance(ring_ptr, RingPtr):
            raise TypeError("PooledEventPtr wraps a RingPtr")
        self._ring_ptr = ring_ptr

    @property
    def ring_ptr(self) -> RingPtr:
        """The wrapped ring pointer."""
        return self._ring_ptr

    @property
    def variant(self) -> str:
        """Name of the size class this pointer refers to."""
        return _VARIANT_NAMES[self._ring_ptr.pool_id]

    def data(self) -> bytes:
        """The event's payload, ``length()`` bytes long."""
        return self._ring_ptr.event.payload()

    def event_type(self) -> int:
        """The event's type tag, truncated to a single byte."""
        return self._ring_ptr.event_type & 0xFF

    def length(self) -> int:
        """Number of payload bytes."""
        return self._ring_ptr.length

    def slot_index(self) -> int:
        """Index of the slot holding the event."""
        return self._ring_ptr.slot_index

    def pool_id(self) -> PoolId:
        """The pool the event lives in."""
        return self._ring_ptr.pool_id

    def clone(self) -> PooledEventPtr:
        """Return another handle to the same slot, adding a reference."""
        return PooledEventPtr(self._ring_ptr.clone())

    def release(self) -> None:
        """Give up this handle's reference to the slot."""
        self._ring_ptr.release()

    def __enter__(self) -> PooledEventPtr:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"PooledEventPtr.{self.variant}({self._ring_ptr!r})"