# terrain_engine/chunk_store.py

"""
================================================================================
CHUNK STORE
================================================================================
A bounded in-memory cache of generated chunks, keyed by the "cx,cy" chunk
coordinate string.

Data Contract:
---------------
- Inputs: Chunk objects produced by the TerrainGenerator.
- Outputs: Cached Chunk objects, or None on a miss.
- Side Effects: Debug logging only.
- Invariants:
    - len(store) never exceeds max_size.
    - Eviction removes the oldest-inserted entry. A lookup does not refresh
      an entry's position.
================================================================================
"""
import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from . import config as DEFAULTS


def chunk_key(chunk_x: int, chunk_y: int) -> str:
    """Returns the cache key of a chunk coordinate."""
    return f"{chunk_x},{chunk_y}"


@dataclass
class Chunk:
    """One generated square of terrain, as an RGBA pixel buffer."""
    chunk_x: int
    chunk_y: int
    pixels: np.ndarray  # (chunk_size, chunk_size, 4) uint8, indexed [y, x]
    generation_id: int = 0

    @property
    def key(self) -> str:
        return chunk_key(self.chunk_x, self.chunk_y)


class ChunkStore:
    """Insertion-ordered, size-bounded chunk cache."""

    def __init__(self, max_size: int = DEFAULTS.MAX_CACHE_SIZE, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)
        self.max_size = max(1, int(max_size))
        self._chunks: dict[str, Chunk] = {}

    def get(self, key: str) -> Chunk | None:
        return self._chunks.get(key)

    def put(self, key: str, chunk: Chunk):
        """
        Stores a chunk. When a new key arrives at capacity, the oldest-inserted
        entry is evicted first. Replacing an existing key keeps its position.
        """
        if key in self._chunks:
            self._chunks[key] = chunk
            return

        if len(self._chunks) >= self.max_size:
            oldest = next(iter(self._chunks))
            del self._chunks[oldest]
            self.logger.debug(f"Chunk cache full ({self.max_size}); evicted '{oldest}'.")

        self._chunks[key] = chunk

    def clear(self):
        if self._chunks:
            self.logger.debug(f"Clearing chunk cache ({len(self._chunks)} entries).")
        self._chunks.clear()

    def evict_except(self, keep_keys: Iterable[str]) -> int:
        """Removes every entry whose key is not in keep_keys. Returns the count removed."""
        keep = set(keep_keys)
        stale = [key for key in self._chunks if key not in keep]
        for key in stale:
            del self._chunks[key]
        if stale:
            self.logger.debug(f"Evicted {len(stale)} off-screen chunks.")
        return len(stale)

    def size(self) -> int:
        return len(self._chunks)

    def keys(self) -> list[str]:
        return list(self._chunks)

    def __contains__(self, key: str) -> bool:
        return key in self._chunks

    def __len__(self) -> int:
        return len(self._chunks)
