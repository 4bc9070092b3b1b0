"""
Tests for the terrain renderer context
"""
import logging

import numpy as np
import pytest

from terrain_engine import config as DEFAULTS
from terrain_engine.renderer import TerrainRenderer
from conftest import RecordingSurface

SMALL = {"seed": 7, "scale": 0.25, "chunk_size": 16, "chunk_radius": 1, "octaves": 3}


def make_renderer(logger, clock=None, surface=None, **overrides):
    config = {**SMALL, "async_loading": False, **overrides}
    return TerrainRenderer(config, surface or RecordingSurface(64, 48), logger, clock=clock)


def test_end_to_end_default_view(logger):
    """Test the default 3x3 view and its byte-identical regeneration"""
    config = {"seed": 100, "chunk_size": 400, "chunk_radius": 1, "async_loading": False}
    buffers = []
    for _ in range(2):
        renderer = TerrainRenderer(config, RecordingSurface(800, 600), logger)
        renderer.redraw()
        assert set(renderer.store.keys()) == {f"{x},{y}" for x in (-1, 0, 1) for y in (-1, 0, 1)}
        assert len(renderer.surface.blits) == 9
        buffers.append({key: renderer.store.get(key).pixels for key in renderer.store.keys()})

    for key, pixels in buffers[0].items():
        assert pixels.shape == (400, 400, 4)
        assert pixels.dtype == np.uint8
        assert pixels.tobytes() == buffers[1][key].tobytes()


def test_redraw_clears_and_blits_visible_chunks(logger):
    """Test that a synchronous redraw blits exactly the visible chunks"""
    renderer = make_renderer(logger)
    renderer.redraw()
    assert renderer.surface.clears == 1
    assert len(renderer.surface.blits) == 9
    assert renderer.stats()["visible_chunks"] == 9
    positions = {(x, y) for _, x, y in renderer.surface.blits}
    assert (32, 24) in positions


def test_cached_chunks_are_reused(logger):
    """Test that a second redraw blits from the cache"""
    renderer = make_renderer(logger)
    renderer.redraw()
    first = renderer.store.get("0,0")
    renderer.redraw()
    assert renderer.store.get("0,0") is first


def test_async_redraw_schedules_then_fills_in(logger, clock):
    """Test that async chunks arrive through update()"""
    renderer = make_renderer(logger, clock=clock, async_loading=True)
    renderer.redraw()
    assert renderer.surface.blits == []
    assert renderer.scheduler.pending_count == 9

    assert renderer.update(budget_ms=100) == 9
    assert len(renderer.surface.blits) == 9
    assert renderer.store.size() == 9
    assert renderer.scheduler.pending_count == 0


def test_pan_discards_stale_async_work(logger, clock):
    """Test that chunks queued before a far pan are never cached or drawn"""
    renderer = make_renderer(logger, clock=clock, async_loading=True)
    renderer.redraw()
    old_keys = set(renderer.visible_keys)

    renderer.pointer_down(0, 0)
    renderer.pointer_move(1000, 1000)
    new_keys = set(renderer.visible_keys)
    assert old_keys.isdisjoint(new_keys)

    renderer.update(budget_ms=100)
    assert set(renderer.store.keys()) == new_keys
    assert len(renderer.surface.blits) == 9


def test_previously_visible_chunks_survive_one_pan(logger):
    """Test the current plus previous visible set retention"""
    renderer = make_renderer(logger, chunk_radius=0)
    renderer.redraw()
    assert renderer.store.keys() == ["0,0"]

    renderer.pointer_down(100, 0)
    renderer.pointer_move(84, 0)
    assert sorted(renderer.store.keys()) == ["0,0", "1,0"]

    renderer.pointer_move(68, 0)
    assert sorted(renderer.store.keys()) == ["1,0", "2,0"]


def test_wheel_zoom_regenerates_chunks(logger):
    """Test that a zoom invalidates the cache and resamples the noise"""
    renderer = make_renderer(logger, render_mode=DEFAULTS.RENDER_MODE_PERLIN)
    renderer.redraw()
    before = renderer.store.get("0,0").pixels.copy()

    renderer.wheel(32, 24, 1)
    assert renderer.camera.zoom == pytest.approx(1.1)
    assert not renderer.camera.zoom_changed
    after = renderer.store.get("0,0")
    assert after is not None
    assert not np.array_equal(before, after.pixels)


def test_zoom_buttons(logger):
    """Test zoom in, zoom out and reset about the centre"""
    renderer = make_renderer(logger)
    renderer.zoom_in()
    assert renderer.camera.zoom == pytest.approx(DEFAULTS.ZOOM_STEP)
    renderer.zoom_out()
    assert renderer.camera.zoom == pytest.approx(1.0)
    renderer.zoom_in()
    renderer.zoom_in()
    renderer.reset_zoom()
    assert renderer.camera.zoom == pytest.approx(1.0)


def test_set_parameters_rejects_unknown_render_mode(logger):
    """Test that a bad render mode raises ValueError"""
    renderer = make_renderer(logger)
    with pytest.raises(ValueError):
        renderer.set_parameters(render_mode="voxels")
    with pytest.raises(ValueError):
        renderer.set_parameters(colour="blue")
    with pytest.raises(ValueError):
        renderer.set_terrain_settings(biome_blending=0.2)


def test_set_parameters_clamps_with_warning(logger, caplog):
    """Test that out-of-range numbers are clamped, not rejected"""
    renderer = make_renderer(logger)
    with caplog.at_level(logging.WARNING):
        renderer.set_parameters(octaves=0, persistence=0.0, lacunarity=0.5)
    assert renderer.settings["octaves"] == 1
    assert renderer.settings["persistence"] == DEFAULTS.MIN_PERSISTENCE
    assert renderer.settings["lacunarity"] == DEFAULTS.MIN_LACUNARITY
    assert "clamped" in caplog.text


def test_seed_change_invalidates_cache(logger):
    """Test that a new seed gives new pixels"""
    renderer = make_renderer(logger, render_mode=DEFAULTS.RENDER_MODE_PERLIN)
    renderer.redraw()
    before = renderer.store.get("0,0").pixels.copy()
    renderer.set_parameters(seed=8)
    assert renderer.generator.seed == 8
    assert not np.array_equal(before, renderer.store.get("0,0").pixels)


def test_permutation_table_kept_unless_seed_changes(logger):
    """Test that only a seed change rebuilds the permutation table"""
    renderer = make_renderer(logger)
    table = renderer.generator.permutation_table
    renderer.set_parameters(octaves=2, render_mode=DEFAULTS.RENDER_MODE_HEATMAP)
    assert renderer.generator.permutation_table is table

    renderer.set_parameters(seed=8)
    assert renderer.generator.permutation_table is not table
    assert not np.array_equal(renderer.generator.permutation_table, table)


def test_render_mode_switch(logger):
    """Test that the perlin mode gives gray pixels"""
    renderer = make_renderer(logger)
    renderer.set_parameters(render_mode=DEFAULTS.RENDER_MODE_PERLIN)
    pixels = renderer.store.get("0,0").pixels
    assert np.array_equal(pixels[..., 0], pixels[..., 1])
    assert np.all(pixels[..., 3] == 255)


def test_terrain_settings_update(logger):
    """Test that thresholds are replaced and the cache rebuilt"""
    renderer = make_renderer(logger)
    renderer.redraw()
    renderer.set_terrain_settings(sea_level=0.9)
    assert renderer.settings["terrain_settings"]["sea_level"] == 0.9
    assert renderer.settings["terrain_settings"]["snow_line"] == DEFAULTS.TERRAIN_SETTINGS["snow_line"]


def test_grid_overlay(logger):
    """Test the grid lines for a 64x48 surface with 16px chunks"""
    renderer = make_renderer(logger)
    lines = renderer.grid_lines()
    vertical = sorted(start[0] for start, end in lines if start[0] == end[0])
    horizontal = sorted(start[1] for start, end in lines if start[1] == end[1])
    assert vertical == [0, 16, 32, 48, 64]
    assert horizontal == [8, 24, 40]

    assert renderer.toggle_grid()
    grid_lines = [line for line in renderer.surface.lines if line[2] == DEFAULTS.GRID_COLOR]
    assert len(grid_lines) == 8


def test_center_marker(logger):
    """Test the plus sign at the screen centre"""
    renderer = make_renderer(logger)
    renderer.redraw()
    marker = [line for line in renderer.surface.lines if line[2] == DEFAULTS.CENTER_MARKER_COLOR]
    assert [(start, end) for start, end, _, _ in marker] == [((22, 24), (42, 24)), ((32, 14), (32, 34))]


def test_reset_camera_and_clear_cache(logger):
    """Test the R and C shortcuts"""
    renderer = make_renderer(logger)
    renderer.pointer_down(0, 0)
    renderer.pointer_move(50, 50)
    renderer.wheel(10, 10, 1)
    renderer.reset_camera()
    assert (renderer.camera.x, renderer.camera.y, renderer.camera.zoom) == (0.0, 0.0, 1.0)
    assert renderer.store.size() == 9

    first = renderer.store.get("0,0")
    renderer.clear_cache()
    assert renderer.store.get("0,0") is not first


def test_randomize_seed(logger):
    """Test that a random seed is drawn from 1..MAX_SEED"""
    renderer = make_renderer(logger)
    seed = renderer.randomize_seed(np.random.default_rng(0))
    assert 1 <= seed <= DEFAULTS.MAX_SEED
    assert renderer.stats()["seed"] == seed


def test_destroy(logger, clock):
    """Test that destroy drops the cache and queued work"""
    renderer = make_renderer(logger, clock=clock, async_loading=True)
    renderer.redraw()
    renderer.destroy()
    assert renderer.store.size() == 0
    assert renderer.scheduler.pending_count == 0
    assert renderer.update(budget_ms=100) == 0
