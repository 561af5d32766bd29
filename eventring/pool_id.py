"""Identifiers of the fixed-size event pools."""

from __future__ import annotations

from enum import IntEnum

from eventring.ring import EventSize

XS_CAPACITY = 2000
S_CAPACITY = 1000
M_CAPACITY = 300
L_CAPACITY = 60
XL_CAPACITY = 15

_MAX_SIZES = {0: 64, 1: 256, 2: 1024, 3: 4096, 4: 16384}
_CAPACITIES = {0: XS_CAPACITY, 1: S_CAPACITY, 2: M_CAPACITY, 3: L_CAPACITY, 4: XL_CAPACITY}


class PoolId(IntEnum):
    """One of the five event pools, numbered from the smallest."""

    XS = 0
    S = 1
    M = 2
    L = 3
    XL = 4

    @classmethod
    def from_size(cls, size: EventSize) -> PoolId:
        """Return the pool that serves events of the given size class."""
        if size is EventSize.XXL:
            raise ValueError("XXL not supported in pools")
        return cls[size.name]

    def max_size(self) -> int:
        """Largest payload, in bytes, that a slot of this pool holds."""
        return _MAX_SIZES[self.value]

    def capacity(self) -> int:
        """Number of slots in this pool."""
        return _CAPACITIES[self.value]