# terrain_engine/scheduler.py

"""
================================================================================
COOPERATIVE CHUNK SCHEDULER
================================================================================
Queues chunk generation work and runs it in small slices from the host's main
loop, so the window stays responsive while the view fills in.

Each request captures the generation id that was current when it was queued.
cancel_all() bumps the id, which invalidates everything queued or in flight.

Data Contract:
---------------
- Inputs:
    - store: The ChunkStore that finished chunks are written to.
    - generate_fn: Callable(ChunkInfo) -> Chunk doing the actual work.
    - on_ready: Optional Callable(ChunkInfo, Chunk) invoked for every
      completed, still-current chunk.
    - clock: Callable returning seconds (defaults to time.perf_counter).
- Outputs: The number of chunks completed per run_pending() call.
- Side Effects: Writes to the store, calls on_ready, logs.
- Invariants:
    - A key is never both pending and cached after a completion.
    - A result produced under an old generation id is never cached and never
      delivered.
================================================================================
"""
import heapq
import itertools
import logging
import time
from dataclasses import dataclass
from typing import Callable

from . import config as DEFAULTS
from .chunk_store import Chunk, ChunkStore
from .viewport import ChunkInfo


def idle_timeout_ms(priority: float) -> float:
    """Higher priority means a shorter wait before the work is forced to run."""
    return max(DEFAULTS.MIN_IDLE_TIMEOUT_MS, DEFAULTS.IDLE_TIMEOUT_MS - priority * DEFAULTS.PRIORITY_TIMEOUT_WEIGHT_MS)


@dataclass
class PendingRequest:
    info: ChunkInfo
    generation_id: int
    priority: float
    deadline: float  # seconds, on the scheduler's clock
    sequence: int


class AsyncChunkScheduler:
    def __init__(self, store: ChunkStore, generate_fn: Callable[[ChunkInfo], Chunk],
                 on_ready: Callable[[ChunkInfo, Chunk], None] = None,
                 clock: Callable[[], float] = time.perf_counter, logger: logging.Logger = None):
        self.store = store
        self.generate_fn = generate_fn
        self.on_ready = on_ready
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

        self._generation_id = 0
        self._pending: set[str] = set()
        self._queue: list[tuple[float, int, PendingRequest]] = []
        self._sequence = itertools.count()

    @property
    def generation_id(self) -> int:
        return self._generation_id

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    def schedule(self, info: ChunkInfo, priority: float) -> bool:
        """
        Queues a chunk unless it is already cached or pending.
        Returns True if a new request was queued.
        """
        if info.key in self._pending or info.key in self.store:
            return False

        self._pending.add(info.key)
        timeout = idle_timeout_ms(priority)
        request = PendingRequest(
            info=info,
            generation_id=self._generation_id,
            priority=priority,
            deadline=self.clock() + timeout / 1000.0,
            sequence=next(self._sequence),
        )
        heapq.heappush(self._queue, (request.deadline, request.sequence, request))
        self.logger.debug(f"Queued chunk '{info.key}' (priority {priority:.2f}, timeout {timeout:.0f}ms).")
        return True

    def run_pending(self, budget_ms: float = DEFAULTS.DEFAULT_IDLE_BUDGET_MS) -> int:
        """
        Runs queued work in deadline order until the budget is spent. Requests
        whose deadline has passed run regardless of the budget.
        """
        start = self.clock()
        completed = 0

        while self._queue:
            deadline, _, request = self._queue[0]
            now = self.clock()
            overdue = now >= deadline
            if not overdue and (now - start) * 1000.0 >= budget_ms:
                break

            heapq.heappop(self._queue)
            if self._complete(request):
                completed += 1

        return completed

    def _complete(self, request: PendingRequest) -> bool:
        info = request.info

        if request.generation_id != self._generation_id:
            self.logger.debug(f"Dropped stale request for chunk '{info.key}'.")
            return False

        cached = self.store.get(info.key)
        if cached is not None:
            self._pending.discard(info.key)
            self._deliver(info, cached)
            return True

        chunk = self.generate_fn(info)

        # generate_fn may have triggered a cancel (e.g. a redraw)
        if request.generation_id != self._generation_id:
            self.logger.debug(f"Discarded chunk '{info.key}': generation {request.generation_id} is outdated.")
            return False

        self.store.put(info.key, chunk)
        self._pending.discard(info.key)
        self._deliver(info, chunk)
        return True

    def _deliver(self, info: ChunkInfo, chunk: Chunk):
        if self.on_ready is not None:
            self.on_ready(info, chunk)

    def cancel_all(self):
        """Invalidates every queued and in-flight request."""
        self._generation_id += 1
        if self._queue:
            self.logger.debug(f"Cancelled {len(self._queue)} queued chunk requests.")
        self._queue.clear()
        self._pending.clear()
