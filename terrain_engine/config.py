# terrain_engine/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the terrain
generator and the chunked viewport renderer. These values are used if they
are not explicitly provided by the user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC RUN.
Instead, pass a configuration dictionary to the TerrainRenderer instance.
================================================================================
"""

# --- Noise Generation ---
DEFAULT_SEED = 100
# The base sampling frequency in noise units per world pixel. The camera zoom
# is multiplied into this value when a chunk is generated.
DEFAULT_SCALE = 0.005

DEFAULT_OCTAVES = 6
DEFAULT_PERSISTENCE = 0.6
DEFAULT_LACUNARITY = 2.0
DEFAULT_AMPLITUDE = 1.0

# Coordinate offsets (in noise units) used to derive uncorrelated fields from
# one permutation table. Channel N samples at (x + N * X, y + N * Y).
# Values are deliberately not multiples of the 256-cell lattice period.
CHANNEL_OFFSET_X = 1731.37
CHANNEL_OFFSET_Y = 2917.83

CHANNEL_ELEVATION = 0
CHANNEL_TEMPERATURE = 1
CHANNEL_MOISTURE = 2
CHANNEL_FOREST_DENSITY = 3

# --- Parameter Bounds ---
MIN_OCTAVES = 1
MAX_OCTAVES = 12
MIN_PERSISTENCE = 0.01
MAX_PERSISTENCE = 1.0
MIN_LACUNARITY = 1.01
MIN_CHUNK_SIZE = 1
MIN_CHUNK_RADIUS = 0
MAX_SEED = 10000

# --- Terrain & Biome Levels (raw noise units, -1.0 to 1.0) ---
# A dictionary is used to make it easy to pass this as a single config item.
TERRAIN_SETTINGS = {
    "sea_level": -0.1,
    "valley_threshold": 0.1,
    "hill_threshold": 0.3,
    "mountain_threshold": 0.6,
    "snow_line": 0.8,
    "temperature_scale": 0.003,
    "moisture_scale": 0.005,
    "forest_density_scale": 0.02,
}

# Elevation band above sea level that is rendered as beach.
SHORE_BAND = 0.08

# Latitude banding: temperature is lowered by sin(world_y * FREQUENCY) * STRENGTH.
LATITUDE_FREQUENCY = 0.0002
LATITUDE_STRENGTH = 0.4

# --- Render Modes ---
RENDER_MODE_PERLIN = "perlin"
RENDER_MODE_HEATMAP = "heatmap"
RENDER_MODE_TERRAIN = "terrain"
RENDER_MODES = (RENDER_MODE_PERLIN, RENDER_MODE_HEATMAP, RENDER_MODE_TERRAIN)
DEFAULT_RENDER_MODE = RENDER_MODE_TERRAIN

# --- Chunking & Caching ---
DEFAULT_CHUNK_SIZE = 400    # Pixels per chunk side (world units before zoom)
DEFAULT_CHUNK_RADIUS = 1    # Chunks around the centre chunk in each direction
MAX_CACHE_SIZE = 200

# --- Camera ---
MIN_ZOOM = 0.1
MAX_ZOOM = 10.0
ZOOM_SENSITIVITY = 0.1
# Multiplier used by the programmatic zoom-in/zoom-out actions.
ZOOM_STEP = 1.5

# --- Idle Scheduling ---
# A queued chunk is forced to run after at most this many milliseconds,
# minus PRIORITY_TIMEOUT_WEIGHT_MS per unit of priority.
IDLE_TIMEOUT_MS = 1000.0
PRIORITY_TIMEOUT_WEIGHT_MS = 200.0
MIN_IDLE_TIMEOUT_MS = 16.0
# Default per-frame time budget the host loop hands to the scheduler.
DEFAULT_IDLE_BUDGET_MS = 8.0

DEFAULT_ASYNC_LOADING = True

# --- Overlays ---
SHOW_GRID = False
SHOW_CENTER_MARKER = True
GRID_COLOR = (255, 255, 255, 56)
CENTER_MARKER_COLOR = (255, 0, 0, 204)
CENTER_MARKER_HALF_LENGTH = 10
