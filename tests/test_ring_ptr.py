import threading

import pytest

from eventring.pool import EventPools
from eventring.pool_id import PoolId
from eventring.ring import PooledEvent
from eventring.ring_ptr import RingPtr


@pytest.fixture
def pools():
    return EventPools()


def make_event(pool_id, payload, event_type):
    event = PooledEvent.zeroed(pool_id.max_size())
    event.data[: len(payload)] = payload
    event.length = len(payload)
    event.event_type = event_type
    return event


def place(pools, pool_id, slot_index, payload, event_type):
    pools.place_event(pool_id, make_event(pool_id, payload, event_type), slot_index)


def create_ring_ptr(pools, pool_id, slot_index):
    assert pools.try_allocate_slot(pool_id, slot_index)
    generation = pools.get_generation(pool_id, slot_index)
    return RingPtr(pool_id, slot_index, generation, pools)


def test_basic_creation_and_deref(pools):
    place(pools, PoolId.XS, 0, b"test data", 42)
    ring_ptr = create_ring_ptr(pools, PoolId.XS, 0)
    assert ring_ptr.length == 9
    assert ring_ptr.event_type == 42
    assert bytes(ring_ptr.data[:9]) == b"test data"
    assert ring_ptr.event.payload() == b"test data"


def test_reference_counting(pools):
    place(pools, PoolId.S, 1, b"ref count test", 100)
    ring_ptr1 = create_ring_ptr(pools, PoolId.S, 1)
    assert pools.get_ref_count(PoolId.S, 1) == 1

    ring_ptr2 = ring_ptr1.clone()
    assert pools.get_ref_count(PoolId.S, 1) == 2
    assert ring_ptr1.length == ring_ptr2.length
    assert ring_ptr1.event_type == ring_ptr2.event_type

    ring_ptr1.release()
    assert pools.get_ref_count(PoolId.S, 1) == 1
    assert ring_ptr2.length == 14
    assert ring_ptr2.event_type == 100


def test_slot_reuse_on_drop(pools):
    place(pools, PoolId.M, 2, b"slot reuse test", 200)
    original_generation = pools.get_generation(PoolId.M, 2)
    with create_ring_ptr(pools, PoolId.M, 2) as ring_ptr:
        assert ring_ptr.length == 15
    assert pools.ring(PoolId.M).metadata[2].is_allocated == 0
    assert pools.get_generation(PoolId.M, 2) == original_generation + 1


def test_multi_threaded_sharing(pools):
    place(pools, PoolId.XS, 3, b"thread test", 300)
    ring_ptr = create_ring_ptr(pools, PoolId.XS, 3)
    clones = [ring_ptr.clone() for _ in range(3)]
    assert pools.get_ref_count(PoolId.XS, 3) == 4

    results = {}

    def worker(index, ptr):
        results[index] = (ptr.length, ptr.event_type, bytes(ptr.data[:11]))
        ptr.release()

    threads = [
        threading.Thread(target=worker, args=(i, ptr)) for i, ptr in enumerate(clones)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == 3
    assert all(value == (11, 300, b"thread test") for value in results.values())
    assert pools.get_ref_count(PoolId.XS, 3) == 1
    assert ring_ptr.length == 11
    assert ring_ptr.event_type == 300


def test_zero_copy_semantics(pools):
    test_data = b"zero copy validation test data for ring buffer"
    place(pools, PoolId.S, 0, test_data, 400)
    ring_ptr = create_ring_ptr(pools, PoolId.S, 0)
    assert ring_ptr.data is pools.ring(PoolId.S).data[0].data
    assert ring_ptr.length == len(test_data)
    assert bytes(ring_ptr.data[: len(test_data)]) == test_data


def test_aba_protection(pools):
    place(pools, PoolId.XS, 4, b"first event", 500)
    initial_generation = pools.get_generation(PoolId.XS, 4)
    with create_ring_ptr(pools, PoolId.XS, 4) as ring_ptr:
        assert ring_ptr.generation == initial_generation

    place(pools, PoolId.XS, 4, b"second event", 501)
    new_generation = pools.get_generation(PoolId.XS, 4)
    assert new_generation != initial_generation
    assert new_generation == initial_generation + 1


def test_different_pool_sizes(pools):
    xs_ptr = create_ring_ptr(pools, PoolId.XS, 5)
    s_ptr = create_ring_ptr(pools, PoolId.S, 5)
    m_ptr = create_ring_ptr(pools, PoolId.M, 5)
    assert xs_ptr.pool_id is PoolId.XS
    assert s_ptr.pool_id is PoolId.S
    assert m_ptr.pool_id is PoolId.M
    assert len(xs_ptr.data) == PoolId.XS.max_size()
    assert len(m_ptr.data) == PoolId.M.max_size()


def test_batch_release_pattern(pools):
    ring_ptrs = []
    for i in range(5):
        place(pools, PoolId.XS, 10 + i, f"event {i}".encode(), 600 + i)
        ring_ptrs.append(create_ring_ptr(pools, PoolId.XS, 10 + i))

    assert [ptr.event_type for ptr in ring_ptrs] == [600 + i for i in range(5)]

    cloned_ptrs = [ptr.clone() for ptr in ring_ptrs]
    assert [pools.get_ref_count(PoolId.XS, 10 + i) for i in range(5)] == [2] * 5

    for ptr in ring_ptrs:
        ptr.release()
    assert [pools.get_ref_count(PoolId.XS, 10 + i) for i in range(5)] == [1] * 5
    assert [ptr.event_type for ptr in cloned_ptrs] == [600 + i for i in range(5)]

    for ptr in cloned_ptrs:
        ptr.release()
    metadata = pools.ring(PoolId.XS).metadata
    assert [metadata[10 + i].is_allocated for i in range(5)] == [0] * 5


def test_release_is_idempotent(pools):
    ring_ptr = create_ring_ptr(pools, PoolId.L, 0)
    keeper = ring_ptr.clone()
    ring_ptr.release()
    ring_ptr.release()
    assert ring_ptr.released
    assert pools.get_ref_count(PoolId.L, 0) == 1
    assert not pools.is_slot_available(PoolId.L, 0)
    keeper.release()
    assert pools.is_slot_available(PoolId.L, 0)


def test_clone_after_release_raises(pools):
    ring_ptr = create_ring_ptr(pools, PoolId.XL, 0)
    ring_ptr.release()
    with pytest.raises(ValueError):
        ring_ptr.clone()


def test_dropping_last_handle_frees_slot(pools):
    ring_ptr = create_ring_ptr(pools, PoolId.XS, 6)
    del ring_ptr
    assert pools.is_slot_available(PoolId.XS, 6)


def test_clone_keeps_generation_snapshot(pools):
    ring_ptr = create_ring_ptr(pools, PoolId.S, 9)
    clone = ring_ptr.clone()
    assert clone.generation == ring_ptr.generation
    assert clone.slot_index == ring_ptr.slot_index
    assert clone.pool_id is ring_ptr.pool_id


def test_repr_names_fields(pools):
    ring_ptr = create_ring_ptr(pools, PoolId.XS, 1)
    text = repr(ring_ptr)
    assert text.startswith("RingPtr(")
    assert "pool_id=XS" in text
    assert "slot_index=1" in text