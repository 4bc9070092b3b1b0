# terrain_engine/generator.py

"""
================================================================================
CORE TERRAIN GENERATOR
================================================================================
This module contains the TerrainGenerator class, responsible for turning a
chunk coordinate into a finished RGBA pixel buffer: fractal elevation is
sampled for every pixel and then colored according to the render mode.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): Parameters which can override the internal defaults.
      Expected keys include 'seed', 'scale', 'octaves', 'terrain_settings'.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - Chunk objects holding (chunk_size, chunk_size, 4) uint8 buffers.
    - NumPy elevation arrays in [-1, 1].
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same seed, configuration and zoom, the output is
  deterministic. A chunk depends only on its coordinate, never on what was
  generated before it.
================================================================================
"""

import logging

import numpy as np

from . import config as DEFAULTS
from . import noise
from . import color_maps
from .chunk_store import Chunk


def consolidate_settings(user_config: dict, logger: logging.Logger) -> dict:
    """
    Merges user values over the internal defaults and clamps numeric values
    into their valid ranges. Clamped values are reported as warnings.
    """
    settings = {
        'seed': user_config.get('seed', DEFAULTS.DEFAULT_SEED),
        'scale': user_config.get('scale', DEFAULTS.DEFAULT_SCALE),
        'octaves': user_config.get('octaves', DEFAULTS.DEFAULT_OCTAVES),
        'persistence': user_config.get('persistence', DEFAULTS.DEFAULT_PERSISTENCE),
        'lacunarity': user_config.get('lacunarity', DEFAULTS.DEFAULT_LACUNARITY),
        'amplitude': user_config.get('amplitude', DEFAULTS.DEFAULT_AMPLITUDE),
        'chunk_size': user_config.get('chunk_size', DEFAULTS.DEFAULT_CHUNK_SIZE),
        'chunk_radius': user_config.get('chunk_radius', DEFAULTS.DEFAULT_CHUNK_RADIUS),
        'render_mode': user_config.get('render_mode', DEFAULTS.DEFAULT_RENDER_MODE),
        'terrain_settings': {**DEFAULTS.TERRAIN_SETTINGS, **user_config.get('terrain_settings', {})},
    }

    def clamp(name, value, low=None, high=None):
        clamped = value
        if low is not None and clamped < low:
            clamped = low
        if high is not None and clamped > high:
            clamped = high
        if clamped != value:
            logger.warning(f"'{name}' value {value} out of range; clamped to {clamped}.")
        return clamped

    settings['seed'] = int(settings['seed'])
    settings['octaves'] = clamp('octaves', int(settings['octaves']), DEFAULTS.MIN_OCTAVES, DEFAULTS.MAX_OCTAVES)
    settings['persistence'] = clamp('persistence', float(settings['persistence']), DEFAULTS.MIN_PERSISTENCE, DEFAULTS.MAX_PERSISTENCE)
    settings['lacunarity'] = clamp('lacunarity', float(settings['lacunarity']), DEFAULTS.MIN_LACUNARITY)
    settings['chunk_size'] = clamp('chunk_size', int(settings['chunk_size']), DEFAULTS.MIN_CHUNK_SIZE)
    settings['chunk_radius'] = clamp('chunk_radius', int(settings['chunk_radius']), DEFAULTS.MIN_CHUNK_RADIUS)
    settings['scale'] = float(settings['scale'])
    settings['amplitude'] = float(settings['amplitude'])
    return settings


class TerrainGenerator:
    """
    Generates chunk pixel buffers for an infinite, seeded terrain.
    This class is backend-only and does not handle any display.
    """
    def __init__(self, config: dict, logger: logging.Logger, permutation_table: np.ndarray = None):
        """
        Initializes the terrain generator.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
            permutation_table (np.ndarray, optional): A pre-computed noise
                permutation table. If None, one will be generated from the seed.
        """
        self.logger = logger
        self.settings = consolidate_settings(config, logger)

        if self.settings['render_mode'] not in DEFAULTS.RENDER_MODES:
            self.logger.warning(
                f"Unknown render mode '{self.settings['render_mode']}'; "
                f"falling back to '{DEFAULTS.RENDER_MODE_PERLIN}'."
            )
            self.settings['render_mode'] = DEFAULTS.RENDER_MODE_PERLIN

        # --- Public Properties for easy access ---
        self.seed = self.settings['seed']
        self.chunk_size = self.settings['chunk_size']
        self.render_mode = self.settings['render_mode']
        self.terrain_settings = self.settings['terrain_settings']

        if permutation_table is not None:
            self.permutation_table = permutation_table
            self.logger.debug("Initialized with injected permutation table.")
        else:
            self.permutation_table = noise.create_permutation_table(self.seed)

        self.logger.info(
            f"TerrainGenerator initialized with seed: {self.seed} "
            f"(mode '{self.render_mode}', chunk size {self.chunk_size}px)"
        )

    def world_coordinates(self, chunk_x: int, chunk_y: int) -> tuple[np.ndarray, np.ndarray]:
        """World-pixel coordinate grids of every pixel in a chunk, indexed [y, x]."""
        size = self.chunk_size
        xs = chunk_x * size + np.arange(size, dtype=np.float64)
        ys = chunk_y * size + np.arange(size, dtype=np.float64)
        return np.meshgrid(xs, ys)

    def get_elevation(self, world_x: np.ndarray, world_y: np.ndarray, zoom: float = 1.0) -> np.ndarray:
        """Fractal elevation in [-1, 1]. The zoom is folded into the base frequency."""
        return noise.fractal_noise_2d(
            self.permutation_table, world_x, world_y,
            octaves=self.settings['octaves'],
            persistence=self.settings['persistence'],
            lacunarity=self.settings['lacunarity'],
            amplitude=self.settings['amplitude'],
            base_frequency=self.settings['scale'] * zoom,
            channel=DEFAULTS.CHANNEL_ELEVATION,
        )

    def get_color_array(self, world_x: np.ndarray, world_y: np.ndarray, zoom: float = 1.0) -> np.ndarray:
        """RGB colors (uint8, trailing axis of 3) for a block of world pixels."""
        elevation = self.get_elevation(world_x, world_y, zoom)
        return color_maps.get_chunk_color_array(
            self.render_mode, self.permutation_table, elevation, world_x, world_y, self.terrain_settings
        )

    def render_chunk(self, chunk_x: int, chunk_y: int, zoom: float = 1.0, generation_id: int = 0) -> Chunk:
        """Generates the full RGBA buffer of one chunk."""
        world_x, world_y = self.world_coordinates(chunk_x, chunk_y)
        rgb = self.get_color_array(world_x, world_y, zoom)

        pixels = np.empty(rgb.shape[:2] + (4,), dtype=np.uint8)
        pixels[..., :3] = rgb
        pixels[..., 3] = 255

        self.logger.debug(f"Generated chunk ({chunk_x}, {chunk_y}) at zoom {zoom:.3f}.")
        return Chunk(chunk_x, chunk_y, pixels, generation_id)
