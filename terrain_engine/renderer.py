# terrain_engine/renderer.py

"""
================================================================================
TERRAIN RENDERER
================================================================================
The TerrainRenderer is the context object that ties the pieces together: it
owns the generator, camera, input controller, chunk store and scheduler, and
draws onto any surface that follows the DrawingSurface protocol.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): Parameters overriding the internal defaults (see
      generator.consolidate_settings plus 'async_loading', 'show_grid',
      'show_center_marker', 'max_cache_size' and the camera zoom limits).
    - surface: A DrawingSurface to draw on.
    - logger: A configured Python logging object for runtime messages.
    - clock (optional): Callable returning seconds, used by the scheduler.
- Outputs: Blits and overlay lines on the surface; stats() for display.
- Side Effects: Draws on the surface, logs.
- Invariants:
    - A redraw clears the surface first, so only chunks of the current view
      survive it.
    - Any parameter change or zoom invalidates every cached chunk.
================================================================================
"""
import logging
import math
import time
from typing import Callable, Protocol

import numpy as np

from . import config as DEFAULTS
from .chunk_store import Chunk, ChunkStore
from .generator import TerrainGenerator
from .scheduler import AsyncChunkScheduler
from .viewport import Camera, CameraChange, ChunkInfo, ViewportController, chunk_priority, visible_chunks

# Parameters that only change what is drawn on top of the terrain.
OVERLAY_PARAMETERS = {'show_grid', 'show_center_marker'}
TERRAIN_PARAMETERS = {
    'seed', 'scale', 'octaves', 'persistence', 'lacunarity', 'amplitude',
    'chunk_size', 'chunk_radius', 'render_mode', 'terrain_settings', 'async_loading',
}


class DrawingSurface(Protocol):
    """
    A protocol defining what the renderer expects from a drawing target.
    Pixel buffers are (height, width, 4) uint8 RGBA arrays.
    """
    width: int
    height: int

    def clear(self) -> None: ...
    def blit(self, pixels: np.ndarray, x: int, y: int) -> None: ...
    def draw_line(self, start: tuple[int, int], end: tuple[int, int], color: tuple, width: int) -> None: ...


class TerrainRenderer:
    """Chunked, pannable and zoomable view of the procedural terrain."""

    def __init__(self, config: dict, surface: DrawingSurface, logger: logging.Logger = None,
                 clock: Callable[[], float] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.surface = surface
        self.config = dict(config)

        self.async_loading = self.config.get('async_loading', DEFAULTS.DEFAULT_ASYNC_LOADING)
        self.show_grid = self.config.get('show_grid', DEFAULTS.SHOW_GRID)
        self.show_center_marker = self.config.get('show_center_marker', DEFAULTS.SHOW_CENTER_MARKER)

        self.camera = Camera(
            surface.width, surface.height,
            min_zoom=self.config.get('min_zoom', DEFAULTS.MIN_ZOOM),
            max_zoom=self.config.get('max_zoom', DEFAULTS.MAX_ZOOM),
            zoom_sensitivity=self.config.get('zoom_sensitivity', DEFAULTS.ZOOM_SENSITIVITY),
        )
        self.viewport = ViewportController(self.camera)
        self.store = ChunkStore(self.config.get('max_cache_size', DEFAULTS.MAX_CACHE_SIZE), self.logger)
        self.generator = TerrainGenerator(self.config, self.logger)
        self.scheduler = AsyncChunkScheduler(
            self.store, self._generate_chunk, self._on_chunk_ready,
            clock=clock or time.perf_counter, logger=self.logger,
        )

        self.visible_keys: set[str] = set()
        self.destroyed = False
        self.logger.info("TerrainRenderer initialized.")

    @property
    def settings(self) -> dict:
        return self.generator.settings

    @property
    def chunk_size(self) -> int:
        return self.generator.chunk_size

    # --- Drawing ---
    def redraw(self):
        """Clears the surface, then draws terrain and overlays."""
        self.surface.clear()
        self.generate()
        if self.show_grid:
            for start, end in self.grid_lines():
                self.surface.draw_line(start, end, DEFAULTS.GRID_COLOR, 1)
        if self.show_center_marker:
            for start, end in self.center_marker():
                self.surface.draw_line(start, end, DEFAULTS.CENTER_MARKER_COLOR, 2)

    def generate(self):
        """Blits cached chunks and schedules (or builds) the missing ones."""
        if self.camera.zoom_changed:
            # Zoom is part of the noise frequency, so nothing cached is valid
            self.store.clear()
            self.camera.zoom_changed = False

        current = visible_chunks(self.camera, self.chunk_size, self.settings['chunk_radius'])
        current_keys = {info.key for info in current}

        self.store.evict_except(current_keys | self.visible_keys)

        cached = [info for info in current if info.key in self.store]
        missing = [info for info in current if info.key not in self.store]

        for info in cached:
            self._blit(info, self.store.get(info.key))

        if self.async_loading:
            self.scheduler.cancel_all()

        for info in missing:
            if self.async_loading:
                self.scheduler.schedule(info, chunk_priority(info, self.camera, self.chunk_size))
            else:
                chunk = self._generate_chunk(info)
                self.store.put(info.key, chunk)
                self._blit(info, chunk)

        self.visible_keys = current_keys

    def update(self, budget_ms: float = DEFAULTS.DEFAULT_IDLE_BUDGET_MS) -> int:
        """Gives the scheduler a slice of idle time. Call once per frame."""
        return self.scheduler.run_pending(budget_ms)

    def _generate_chunk(self, info: ChunkInfo) -> Chunk:
        return self.generator.render_chunk(
            info.world_chunk_x, info.world_chunk_y, self.camera.zoom, self.scheduler.generation_id
        )

    def _on_chunk_ready(self, info: ChunkInfo, chunk: Chunk):
        # The camera may have moved since the request was queued
        for current in visible_chunks(self.camera, self.chunk_size, self.settings['chunk_radius']):
            if current.key == info.key:
                self._blit(current, chunk)
                return

    def _blit(self, info: ChunkInfo, chunk: Chunk):
        self.surface.blit(chunk.pixels, round(info.screen_x), round(info.screen_y))

    # --- Overlays ---
    def grid_lines(self) -> list[tuple[tuple[int, int], tuple[int, int]]]:
        """Chunk boundary lines that fall inside the surface."""
        size = self.chunk_size
        width = self.surface.width
        height = self.surface.height
        center_x, center_y = self.camera.center

        nearest_x = center_x - self.camera.x % size
        nearest_y = center_y - self.camera.y % size

        lines = []
        for i in range(-math.ceil((nearest_x + size) / size), math.ceil((width - nearest_x) / size) + 1):
            x = nearest_x + i * size
            if 0 <= x <= width:
                lines.append(((round(x), 0), (round(x), height)))
        for i in range(-math.ceil((nearest_y + size) / size), math.ceil((height - nearest_y) / size) + 1):
            y = nearest_y + i * size
            if 0 <= y <= height:
                lines.append(((0, round(y)), (width, round(y))))
        return lines

    def center_marker(self) -> list[tuple[tuple[int, int], tuple[int, int]]]:
        """The two strokes of the plus sign at the screen centre."""
        cx, cy = (round(c) for c in self.camera.center)
        half = DEFAULTS.CENTER_MARKER_HALF_LENGTH
        return [((cx - half, cy), (cx + half, cy)), ((cx, cy - half), (cx, cy + half))]

    # --- Input ---
    def pointer_down(self, x, y):
        self._apply(self.viewport.pointer_down(x, y))

    def pointer_move(self, x, y):
        self._apply(self.viewport.pointer_move(x, y))

    def pointer_up(self):
        self._apply(self.viewport.pointer_up())

    def wheel(self, x, y, delta_y):
        self._apply(self.viewport.wheel(x, y, delta_y))

    def touch_start(self, touches):
        self._apply(self.viewport.touch_start(touches))

    def touch_move(self, touches):
        self._apply(self.viewport.touch_move(touches))

    def touch_end(self, touches):
        self._apply(self.viewport.touch_end(touches))

    def _apply(self, change: CameraChange):
        if change is not CameraChange.NONE:
            self.redraw()

    # --- Parameters ---
    def set_parameters(self, **changes):
        """
        Applies new parameters. Numeric values are clamped to their valid
        ranges; an unknown render mode or parameter name raises ValueError.
        """
        unknown = set(changes) - TERRAIN_PARAMETERS - OVERLAY_PARAMETERS
        if unknown:
            raise ValueError(f"Unknown parameter(s): {', '.join(sorted(unknown))}")
        if 'render_mode' in changes and changes['render_mode'] not in DEFAULTS.RENDER_MODES:
            raise ValueError(
                f"Unknown render mode '{changes['render_mode']}'. Expected one of {DEFAULTS.RENDER_MODES}."
            )
        if 'terrain_settings' in changes:
            self._check_terrain_keys(changes['terrain_settings'])

        self.config.update(changes)
        self.show_grid = self.config.get('show_grid', self.show_grid)
        self.show_center_marker = self.config.get('show_center_marker', self.show_center_marker)
        self.async_loading = self.config.get('async_loading', self.async_loading)

        if set(changes) & TERRAIN_PARAMETERS:
            # The permutation table depends on the seed alone
            table = None if 'seed' in changes else self.generator.permutation_table
            self.generator = TerrainGenerator(self.config, self.logger, permutation_table=table)
            self.scheduler.cancel_all()
            self.store.clear()
            self.logger.info(f"Parameters changed: {changes}")
        self.redraw()

    def set_terrain_settings(self, **changes):
        """Updates individual terrain thresholds or climate scales."""
        self._check_terrain_keys(changes)
        terrain_settings = {**self.settings['terrain_settings'], **changes}
        self.set_parameters(terrain_settings=terrain_settings)

    @staticmethod
    def _check_terrain_keys(terrain_settings: dict):
        unknown = set(terrain_settings) - set(DEFAULTS.TERRAIN_SETTINGS)
        if unknown:
            raise ValueError(f"Unknown terrain setting(s): {', '.join(sorted(unknown))}")

    # --- Conveniences ---
    def reset_camera(self):
        """Back to the origin at zoom 1 with an empty cache."""
        self.camera.reset()
        self.store.clear()
        self.redraw()

    def clear_cache(self):
        self.store.clear()
        self.redraw()

    def zoom_in(self):
        self._zoom_about_center(DEFAULTS.ZOOM_STEP)

    def zoom_out(self):
        self._zoom_about_center(1 / DEFAULTS.ZOOM_STEP)

    def reset_zoom(self):
        self._zoom_about_center(1 / self.camera.zoom)

    def _zoom_about_center(self, factor):
        cx, cy = self.camera.center
        if self.camera.zoom_at(cx, cy, factor):
            self._apply(CameraChange.ZOOM)

    def randomize_seed(self, rng: np.random.Generator = None) -> int:
        """Picks a new seed in [1, MAX_SEED] and regenerates."""
        rng = rng or np.random.default_rng()
        seed = int(rng.integers(1, DEFAULTS.MAX_SEED + 1))
        self.set_parameters(seed=seed)
        return seed

    def toggle_grid(self) -> bool:
        self.set_parameters(show_grid=not self.show_grid)
        return self.show_grid

    def resize(self, width: int, height: int):
        """Call after the host has resized the surface."""
        self.camera.resize(width, height)
        self.redraw()

    def stats(self) -> dict:
        return {
            'cache_size': self.store.size(),
            'visible_chunks': len(self.visible_keys),
            'pending_chunks': self.scheduler.pending_count,
            'camera_x': self.camera.x,
            'camera_y': self.camera.y,
            'zoom': self.camera.zoom,
            'seed': self.generator.seed,
            'render_mode': self.generator.render_mode,
        }

    def destroy(self):
        """Cancels outstanding work and drops every cached chunk."""
        self.scheduler.cancel_all()
        self.store.clear()
        self.visible_keys.clear()
        self.destroyed = True
        self.logger.info("TerrainRenderer destroyed.")
