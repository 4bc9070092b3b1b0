# terrain_engine/color_maps.py

"""
================================================================================
SHARED COLOR MAPPING UTILITIES
================================================================================
This module converts raw fractal elevation into RGB color arrays for the three
render modes (grayscale "perlin", five-band "heatmap" and biome "terrain").

Terrain classification is a two-step process. First every pixel is assigned
an elevation tier (water, shore, snow, mountain, hill, valley, plains) by a
first-match-wins decision list. Then each tier is colored by a pure,
vectorised function looked up in TIER_COLOR_FUNCTIONS. Climate signals
(temperature, moisture, forest density) are sampled from independent noise
channels at the raw world-pixel coordinate.

It has no dependencies on Pygame, so both the interactive viewer and the
offline region exporter use it.
================================================================================
"""
import numpy as np

from . import config as DEFAULTS
from . import noise

# --- Tier ID Constants ---
TIER_WATER = 0
TIER_SHORE = 1
TIER_SNOW = 2
TIER_MOUNTAIN = 3
TIER_HILL = 4
TIER_VALLEY = 5
TIER_PLAINS = 6

TIER_NAMES = {
    TIER_WATER: "water",
    TIER_SHORE: "shore",
    TIER_SNOW: "snow",
    TIER_MOUNTAIN: "mountain",
    TIER_HILL: "hill",
    TIER_VALLEY: "valley",
    TIER_PLAINS: "plains",
}

# --- Fixed Palette Entries ---
COLOR_WATER_DEEP = (15, 30, 80)
COLOR_WATER_MEDIUM = (25, 50, 120)
COLOR_WATER_SHALLOW = (40, 80, 160)

COLOR_SHORE_TROPICAL = (245, 235, 200)
COLOR_SHORE_TEMPERATE = (220, 190, 140)
COLOR_SHORE_COLD = (150, 140, 120)

COLOR_SAVANNA = (180, 160, 90)
COLOR_GRASSLAND = (120, 150, 80)
COLOR_TUNDRA = (140, 130, 110)
COLOR_MIXED_PLAINS = (130, 140, 90)

# Heatmap band end-points over normalized intensity [0, 1].
HEATMAP_STOPS = [
    (0.0, (0, 0, 50)),
    (0.2, (0, 50, 150)),
    (0.4, (0, 200, 255)),
    (0.6, (0, 255, 0)),
    (0.8, (255, 255, 0)),
    (1.0, (255, 0, 0)),
]


def _rgb(r, g, b) -> np.ndarray:
    """Stacks three channel arrays (or scalars broadcast to them) into (n, 3)."""
    r, g, b = np.broadcast_arrays(
        np.asarray(r, dtype=np.float64),
        np.asarray(g, dtype=np.float64),
        np.asarray(b, dtype=np.float64),
    )
    return np.stack([r, g, b], axis=-1)


def _constant(color: tuple, n: int) -> np.ndarray:
    return np.tile(np.asarray(color, dtype=np.float64), (n, 1))


def _choose(conditions: list, choices: list, default: np.ndarray) -> np.ndarray:
    """np.select for (n, 3) color choices driven by (n,) boolean conditions."""
    return np.select([c[:, np.newaxis] for c in conditions], choices, default=default)


# --- Shared Sub-Palettes ---
def forest_colors(density, temperature, is_dense) -> np.ndarray:
    """Forest tones: tropical, temperate or boreal, each dense or sparse."""
    temperature = np.asarray(temperature, dtype=np.float64)
    n = np.clip(np.broadcast_to(density, temperature.shape), 0.0, 1.0)
    dense = np.broadcast_to(np.asarray(is_dense, dtype=bool), temperature.shape)

    tropical = _choose(
        [dense],
        [_rgb(np.floor(20 + n * 30), np.floor(60 + n * 40), np.floor(20 + n * 20))],
        _rgb(np.floor(40 + n * 40), np.floor(80 + n * 50), np.floor(30 + n * 30)),
    )
    temperate = _choose(
        [dense],
        [_rgb(np.floor(30 + n * 25), np.floor(70 + n * 40), np.floor(25 + n * 20))],
        _rgb(np.floor(60 + n * 30), np.floor(100 + n * 40), np.floor(45 + n * 25)),
    )
    boreal = _choose(
        [dense],
        [_rgb(np.floor(25 + n * 20), np.floor(50 + n * 30), np.floor(25 + n * 15))],
        _rgb(np.floor(50 + n * 25), np.floor(70 + n * 30), np.floor(40 + n * 20)),
    )
    return _choose([temperature > 0.4, temperature > 0.0], [tropical, temperate], boreal)


def desert_colors(temperature, moisture, is_hilly: bool) -> np.ndarray:
    """Badlands for hilly deserts, otherwise hot dunes or cold desert."""
    temperature = np.asarray(temperature, dtype=np.float64)
    dryness = np.maximum(0.0, -np.asarray(moisture, dtype=np.float64))
    heat = np.maximum(0.0, temperature)

    if is_hilly:
        return _rgb(np.floor(180 + heat * 40), np.floor(130 + heat * 30), np.floor(80 + dryness * 20))

    return _choose(
        [heat > 0.6],
        [_rgb(np.floor(220 + dryness * 35), np.floor(180 + dryness * 30), np.floor(100 + dryness * 25))],
        _rgb(np.floor(170 + dryness * 30), np.floor(140 + dryness * 25), np.floor(100 + dryness * 20)),
    )


# --- Tier Coloring Functions ---
# Each takes (elevation, env, settings) for the pixels of one tier, where env
# is a dict of equally-shaped 1D arrays, and returns an (n, 3) float array.

def _water_colors(elevation, env, settings):
    sea_level = settings["sea_level"]
    depth = np.abs(elevation - sea_level) / (abs(sea_level) + 0.1)
    n = elevation.shape[0]
    return _choose(
        [depth > 0.7, depth > 0.3],
        [_constant(COLOR_WATER_DEEP, n), _constant(COLOR_WATER_MEDIUM, n)],
        _constant(COLOR_WATER_SHALLOW, n),
    )


def _shore_colors(elevation, env, settings):
    t = env["temperature"]
    n = elevation.shape[0]
    return _choose(
        [t > 0.3, t > -0.1],
        [_constant(COLOR_SHORE_TROPICAL, n), _constant(COLOR_SHORE_TEMPERATE, n)],
        _constant(COLOR_SHORE_COLD, n),
    )


def _snow_colors(elevation, env, settings):
    snow_line = settings["snow_line"]
    intensity = np.minimum(1.0, (elevation - snow_line) / (1.0 - snow_line))
    coldness = np.maximum(0.0, -env["temperature"])
    base = 240 + intensity * 15
    blue_tint = np.floor(coldness * 20)
    return _rgb(base - blue_tint, base - blue_tint * 0.5, np.minimum(255, base + blue_tint))


def _mountain_colors(elevation, env, settings):
    low = settings["mountain_threshold"]
    high = settings["snow_line"]
    i = (elevation - low) / (high - low)
    t = env["temperature"]
    m = env["moisture"]
    return _choose(
        [t < -0.2, m > 0.2],
        [
            _rgb(np.floor(90 + i * 30), np.floor(80 + i * 25), np.floor(70 + i * 20)),
            _rgb(np.floor(100 + i * 40), np.floor(120 + i * 30), np.floor(80 + i * 25)),
        ],
        _rgb(np.floor(140 + i * 40), np.floor(110 + i * 30), np.floor(80 + i * 20)),
    )


def _hill_colors(elevation, env, settings):
    low = settings["hill_threshold"]
    high = settings["mountain_threshold"]
    i = (elevation - low) / (high - low)
    t = env["temperature"]
    m = env["moisture"]
    fd = env["forest_density"]

    has_forest = (t > -0.3) & (m > -0.2) & (fd > -0.1)
    thickness = np.maximum(0.0, (fd + 0.1) * (m + 0.5))

    return _choose(
        [has_forest & (thickness > 0.3), has_forest & (thickness > 0.1), (t > 0.4) & (m < -0.3)],
        [
            forest_colors(thickness, t, True),
            forest_colors(thickness, t, False),
            desert_colors(t, m, True),
        ],
        _rgb(np.floor(120 - i * 20), np.floor(140 - i * 10), np.floor(70 + i * 10)),
    )


def _valley_colors(elevation, env, settings):
    low = settings["valley_threshold"]
    high = settings["hill_threshold"]
    depth = 1 - (elevation - low) / (high - low)
    t = env["temperature"]
    fd = env["forest_density"]
    valley_moisture = env["moisture"] + depth * 0.3

    thickness = np.maximum(0.0, fd + 0.3) * valley_moisture
    lush = _choose(
        [fd > -0.3],
        [forest_colors(thickness, t, thickness > 0.4)],
        _rgb(80, 120 + np.floor(depth * 30), 60),
    )
    return _choose(
        [(t > 0.3) & (valley_moisture < -0.2), (t > -0.2) & (valley_moisture > 0.1)],
        [desert_colors(t, valley_moisture, False), lush],
        _rgb(np.floor(100 - depth * 20), np.floor(130 + depth * 20), np.floor(70 - depth * 10)),
    )


def _plains_colors(elevation, env, settings):
    t = env["temperature"]
    m = env["moisture"]
    fd = env["forest_density"]
    n = elevation.shape[0]

    jungle = _choose(
        [fd > 0.1],
        [forest_colors(fd + 0.2, t, True)],
        _constant(COLOR_SAVANNA, n),
    )
    temperate = _choose(
        [fd > 0.2],
        [forest_colors(fd, t, False)],
        _constant(COLOR_GRASSLAND, n),
    )
    return _choose(
        [(t > 0.5) & (m < -0.3), (t > 0.2) & (m > 0.3), (t > -0.2) & (m > 0.0), t < -0.4],
        [desert_colors(t, m, False), jungle, temperate, _constant(COLOR_TUNDRA, n)],
        _constant(COLOR_MIXED_PLAINS, n),
    )


TIER_COLOR_FUNCTIONS = {
    TIER_WATER: _water_colors,
    TIER_SHORE: _shore_colors,
    TIER_SNOW: _snow_colors,
    TIER_MOUNTAIN: _mountain_colors,
    TIER_HILL: _hill_colors,
    TIER_VALLEY: _valley_colors,
    TIER_PLAINS: _plains_colors,
}


# --- Classification ---
def calculate_tier_map(elevation_values: np.ndarray, settings: dict) -> np.ndarray:
    """Assigns each elevation value its tier ID. The first matching tier wins."""
    e = np.asarray(elevation_values, dtype=np.float64)
    sea_level = settings["sea_level"]
    conditions = [
        e < sea_level,
        e < sea_level + DEFAULTS.SHORE_BAND,
        e > settings["snow_line"],
        e > settings["mountain_threshold"],
        e > settings["hill_threshold"],
        e > settings["valley_threshold"],
    ]
    choices = [TIER_WATER, TIER_SHORE, TIER_SNOW, TIER_MOUNTAIN, TIER_HILL, TIER_VALLEY]
    return np.select(conditions, choices, default=TIER_PLAINS).astype(np.uint8)


def calculate_environment(p: np.ndarray, world_x: np.ndarray, world_y: np.ndarray, settings: dict) -> dict:
    """
    Samples the climate signals at raw world-pixel coordinates.
    'temperature' is already adjusted for latitude banding.
    """
    wx = np.asarray(world_x, dtype=np.float64)
    wy = np.asarray(world_y, dtype=np.float64)
    ts = settings["temperature_scale"]
    ms = settings["moisture_scale"]
    fs = settings["forest_density_scale"]

    raw_temperature = noise.sample_grid(p, wx * ts, wy * ts, channel=DEFAULTS.CHANNEL_TEMPERATURE)
    moisture = noise.sample_grid(p, wx * ms, wy * ms, channel=DEFAULTS.CHANNEL_MOISTURE)
    forest_density = noise.sample_grid(p, wx * fs, wy * fs, channel=DEFAULTS.CHANNEL_FOREST_DENSITY)

    latitude = np.sin(wy * DEFAULTS.LATITUDE_FREQUENCY) * DEFAULTS.LATITUDE_STRENGTH
    return {
        "raw_temperature": raw_temperature,
        "temperature": raw_temperature - latitude,
        "moisture": moisture,
        "forest_density": forest_density,
    }


def classify_colors(elevation: np.ndarray, env: dict, settings: dict) -> np.ndarray:
    """
    Colors pre-sampled elevation and climate arrays. All arrays share one
    shape; the result has that shape plus a trailing RGB axis (uint8).
    """
    e = np.asarray(elevation, dtype=np.float64)
    flat_e = e.ravel()
    flat_env = {name: np.asarray(values, dtype=np.float64).ravel() for name, values in env.items()}
    tiers = calculate_tier_map(flat_e, settings)

    colors = np.zeros((flat_e.shape[0], 3), dtype=np.float64)
    for tier_id, color_fn in TIER_COLOR_FUNCTIONS.items():
        mask = tiers == tier_id
        if not np.any(mask):
            continue
        tier_env = {name: values[mask] for name, values in flat_env.items()}
        colors[mask] = color_fn(flat_e[mask], tier_env, settings)

    return _to_uint8(colors).reshape(e.shape + (3,))


def get_terrain_color_array(p: np.ndarray, elevation: np.ndarray, world_x: np.ndarray, world_y: np.ndarray, settings: dict) -> np.ndarray:
    """Full biome classification for a block of pixels."""
    env = calculate_environment(p, world_x, world_y, settings)
    return classify_colors(elevation, env, settings)


def classify(p: np.ndarray, elevation: float, world_x: float, world_y: float, settings: dict) -> tuple:
    """Classifies a single pixel and returns its (r, g, b) color."""
    color = get_terrain_color_array(
        p,
        np.array([[elevation]], dtype=np.float64),
        np.array([[world_x]], dtype=np.float64),
        np.array([[world_y]], dtype=np.float64),
        settings,
    )
    return tuple(int(c) for c in color[0, 0])


def get_heatmap_color_array(elevation_values: np.ndarray) -> np.ndarray:
    """Five-band cool-to-hot gradient over normalized elevation."""
    intensity = (np.asarray(elevation_values, dtype=np.float64) + 1) * 0.5
    flat = intensity.ravel()

    conditions = []
    choices = []
    for (start, c0), (end, c1) in zip(HEATMAP_STOPS[:-1], HEATMAP_STOPS[1:]):
        t = (flat - start) / (end - start)
        band = _rgb(*[np.floor(a + t * (b - a)) for a, b in zip(c0, c1)])
        conditions.append(flat < end)
        choices.append(band)

    # The last band also covers intensity == 1.0
    colors = _choose(conditions[:-1], choices[:-1], choices[-1])
    return _to_uint8(colors).reshape(intensity.shape + (3,))


def get_elevation_color_array(elevation_values: np.ndarray) -> np.ndarray:
    """Converts raw [-1, 1] elevation into a grayscale RGB color array."""
    normalized = (np.asarray(elevation_values, dtype=np.float64) + 1) * 0.5
    gray_values = np.clip(np.floor(normalized * 255), 0, 255).astype(np.uint8)
    return np.stack([gray_values] * 3, axis=-1)


def get_chunk_color_array(render_mode: str, p: np.ndarray, elevation: np.ndarray, world_x: np.ndarray, world_y: np.ndarray, settings: dict) -> np.ndarray:
    """Dispatches to the color function of a render mode."""
    if render_mode == DEFAULTS.RENDER_MODE_TERRAIN:
        return get_terrain_color_array(p, elevation, world_x, world_y, settings)
    if render_mode == DEFAULTS.RENDER_MODE_HEATMAP:
        return get_heatmap_color_array(elevation)
    return get_elevation_color_array(elevation)


def _to_uint8(colors: np.ndarray) -> np.ndarray:
    # Same rounding as a clamped 8-bit canvas buffer
    return np.clip(np.rint(colors), 0, 255).astype(np.uint8)
