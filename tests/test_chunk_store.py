"""
Tests for the chunk store
"""
import numpy as np

from terrain_engine.chunk_store import Chunk, ChunkStore, chunk_key


def make_chunk(cx, cy, size=2):
    return Chunk(cx, cy, np.zeros((size, size, 4), dtype=np.uint8))


def test_chunk_key_format():
    """Test the "cx,cy" key format"""
    assert chunk_key(-1, 3) == "-1,3"
    assert make_chunk(2, -5).key == "2,-5"


def test_put_and_get():
    """Test basic storage and lookup"""
    store = ChunkStore(max_size=4)
    chunk = make_chunk(0, 0)
    store.put(chunk.key, chunk)
    assert store.get("0,0") is chunk
    assert store.get("1,1") is None
    assert "0,0" in store
    assert len(store) == 1


def test_cache_bound_evicts_oldest_inserted():
    """Test that inserting max + k keys drops exactly the k oldest"""
    store = ChunkStore(max_size=5)
    for i in range(8):
        store.put(chunk_key(i, 0), make_chunk(i, 0))
    assert store.size() == 5
    for i in range(3):
        assert chunk_key(i, 0) not in store
    assert store.keys() == [chunk_key(i, 0) for i in range(3, 8)]


def test_get_does_not_refresh_position():
    """Test that a lookup does not protect an entry from eviction"""
    store = ChunkStore(max_size=2)
    store.put("a", make_chunk(0, 0))
    store.put("b", make_chunk(1, 0))
    store.get("a")
    store.put("c", make_chunk(2, 0))
    assert "a" not in store
    assert store.keys() == ["b", "c"]


def test_replacing_a_key_does_not_evict():
    """Test that re-putting an existing key keeps the store full"""
    store = ChunkStore(max_size=2)
    store.put("a", make_chunk(0, 0))
    store.put("b", make_chunk(1, 0))
    replacement = make_chunk(0, 0)
    store.put("a", replacement)
    assert store.keys() == ["a", "b"]
    assert store.get("a") is replacement


def test_evict_except():
    """Test that only the kept keys survive"""
    store = ChunkStore(max_size=10)
    for key in ["a", "b", "c", "d"]:
        store.put(key, make_chunk(0, 0))
    removed = store.evict_except({"b", "d", "z"})
    assert removed == 2
    assert sorted(store.keys()) == ["b", "d"]


def test_clear():
    """Test that clear empties the store"""
    store = ChunkStore(max_size=3)
    store.put("a", make_chunk(0, 0))
    store.clear()
    assert store.size() == 0
    assert store.get("a") is None
