# eventring

Fixed-capacity ring buffers and reference-counted slot pools for event
payloads, sorted by "t-shirt size".

Events are sized into five pools (`eventring.pool_id.PoolId`):

| Pool | Max payload | Slots |
|------|-------------|-------|
| XS   | 64 bytes    | 2000  |
| S    | 256 bytes   | 1000  |
| M    | 1 KiB       | 300   |
| L    | 4 KiB       | 60    |
| XL   | 16 KiB      | 15    |

Anything larger is refused with `TooLargeError`.

## Installing

```
pip install .
```

## Allocating events

```python
from eventring.allocator import EventAllocator, TooLargeError, PoolFullError
from eventring.pool_id import PoolId

allocator = EventAllocator()

event = allocator.allocate_event(b"hello", 42)
assert event.pool_id() is PoolId.XS
assert event.data() == b"hello"
assert event.event_type() == 42
assert event.length() == 5
```

`EventAllocator.estimate_size(n)` returns the `EventSize` class for a payload
of `n` bytes, and `allocate_event` places the data into the first free slot
of the smallest pool that fits it.

Each allocated event holds a reference to its slot. `clone()` adds a
reference; `release()` drops one. When the last reference is released the
slot becomes free again and its generation counter is bumped, so stale
handles can be told apart from new ones.

```python
copy = event.clone()
print(allocator.pools.get_ref_count(PoolId.XS, event.slot_index()))  # 2
copy.release()
event.release()
print(allocator.pools.is_slot_available(PoolId.XS, event.slot_index()))  # True
```

`allocate_in_pool` places data into a chosen pool and returns a `RingPtr`.
Its `length`, `event_type`, `data` and `event` are properties, and it works
as a context manager that releases its reference on exit:

```python
with allocator.allocate_in_pool(PoolId.S, b"x" * 100, 7) as ptr:
    print(ptr.length, ptr.event_type)  # 100 7
```

A size-agnostic handle, `PooledEventPtr`, is available through
`allocate_and_get_pooled_event_ptr` or `AllocatedEvent.into_pooled_event_ptr()`.
Converting hands the reference over; the `AllocatedEvent` cannot be used
afterwards. `PooledEventPtr.event_type()` returns the type truncated to one
byte.

Pool usage can be inspected:

```python
print(allocator.pools.get_pool_stats(PoolId.XS))
# Pool XS: 0/2000 slots (0.0%), 0 total refs
```

## Sequential ring buffers

Each pool is also a ring buffer with a single write cursor:

```python
writer = allocator.writer(PoolId.XS)
reader = allocator.reader(PoolId.XS)

writer.add(EventAllocator.create_pooled_event(64, b"test event", 1))
for pooled in reader:
    print(pooled.payload(), pooled.event_type)
```

A reader yields copies of the events between its cursor and the write
cursor and stops when it catches up. Stand-alone buffers can be built with
`eventring.ring.RingBuffer(tshirt_size, capacity)` and its `reader()` /
`writer()` methods; a buffer may hold at most 1 MiB of slot payload.

## Errors

All allocation failures derive from `eventring.allocator.AllocationError`:

- `EventCreationError` — data does not fit the requested pool size
- `PoolFullError` — every slot of the pool is in use
- `TooLargeError` — data exceeds 16384 bytes

## What it does not do

- There is no fallback storage for payloads over 16 KiB; they are refused.
- Slot bookkeeping is guarded with `threading` locks; it is thread-safe but
  not lock-free.
- Ring buffer readers do not follow the write cursor across a wrap-around:
  once the cursor wraps back past a reader, that reader sees nothing new.
- Nothing is persisted; everything lives in process memory.

## Running the tests

```
pip install .[test]
pytest
```