"""
Tests for the camera, visible chunk set and input controller
"""
import pytest

from terrain_engine.viewport import (
    Camera, CameraChange, ViewportController, chunk_priority, visible_chunks,
)


def test_visible_chunks_at_origin():
    """Test the 3x3 block around the origin"""
    camera = Camera(800, 600)
    chunks = visible_chunks(camera, 400, 1)
    keys = {c.key for c in chunks}
    assert len(chunks) == 9
    assert keys == {f"{x},{y}" for x in (-1, 0, 1) for y in (-1, 0, 1)}


def test_visible_chunk_screen_positions():
    """Test that the chunk corner is placed relative to the screen centre"""
    camera = Camera(800, 600, x=100.0, y=-50.0)
    chunks = {c.key: c for c in visible_chunks(camera, 400, 1)}
    origin = chunks["0,-1"]
    assert origin.screen_x == 400 + (0 - 100.0)
    assert origin.screen_y == 300 + (-400 + 50.0)


def test_visible_chunks_radius():
    """Test that the chunk count is (2r + 1)^2"""
    camera = Camera(800, 600, x=-1234.0, y=987.0)
    assert len(visible_chunks(camera, 100, 0)) == 1
    assert len(visible_chunks(camera, 100, 2)) == 25
    center = visible_chunks(camera, 100, 0)[0]
    assert (center.world_chunk_x, center.world_chunk_y) == (-13, 9)


def test_pan_moves_camera_against_drag():
    """Test that dragging right moves the camera left"""
    camera = Camera(800, 600)
    camera.pan_by(30, -20)
    assert (camera.x, camera.y) == (-30, 20)


@pytest.mark.parametrize("factor", [1.1, 0.9, 1.5, 3.0, 0.2])
def test_zoom_keeps_anchor_fixed(factor):
    """Test that the terrain under the cursor does not move while zooming"""
    camera = Camera(800, 600, x=250.0, y=-75.0, zoom=1.3)
    point = (612.0, 140.0)
    before = camera.screen_to_terrain(*point)
    assert camera.zoom_at(*point, factor)
    after = camera.screen_to_terrain(*point)
    assert after == pytest.approx(before)


def test_zoom_is_clamped():
    """Test the zoom limits and the unchanged-zoom result"""
    camera = Camera(800, 600)
    camera.zoom_at(400, 300, 1000)
    assert camera.zoom == camera.max_zoom
    camera.zoom_changed = False
    assert not camera.zoom_at(400, 300, 2.0)
    assert not camera.zoom_changed
    camera.zoom_at(400, 300, 1e-6)
    assert camera.zoom == camera.min_zoom


def test_zoom_at_center_keeps_camera_proportional():
    """Test that zooming at the screen centre scales the camera position"""
    camera = Camera(800, 600, x=200.0, y=100.0)
    camera.zoom_at(400, 300, 2.0)
    assert camera.x == pytest.approx(100.0)
    assert camera.y == pytest.approx(50.0)


def test_world_screen_round_trip():
    """Test that screen_to_world inverts world_to_screen"""
    camera = Camera(800, 600, x=33.0, y=-12.0)
    sx, sy = camera.world_to_screen(150.0, 75.0)
    assert camera.screen_to_world(sx, sy) == pytest.approx((150.0, 75.0))


def test_chunk_priority_range():
    """Test that priority is 1 at the centre and falls to 0 at the corner"""
    camera = Camera(800, 600)
    centered = visible_chunks(Camera(800, 600, x=200.0, y=200.0), 400, 0)[0]
    assert chunk_priority(centered, camera, 400) == pytest.approx(1.0)
    far = visible_chunks(Camera(800, 600, x=5000.0, y=5000.0), 400, 2)[0]
    assert chunk_priority(far, camera, 400) == 0.0


def test_pointer_drag():
    """Test that a drag pans by the pointer delta"""
    controller = ViewportController(Camera(800, 600))
    assert controller.pointer_move(10, 10) is CameraChange.NONE
    controller.pointer_down(100, 100)
    assert controller.pointer_move(110, 95) is CameraChange.PAN
    assert (controller.camera.x, controller.camera.y) == (-10, 5)
    controller.pointer_up()
    assert controller.pointer_move(200, 200) is CameraChange.NONE


def test_wheel_direction():
    """Test that a positive delta zooms in and a negative one zooms out"""
    controller = ViewportController(Camera(800, 600))
    assert controller.wheel(400, 300, 100) is CameraChange.ZOOM
    assert controller.camera.zoom == pytest.approx(1.1)
    controller.wheel(400, 300, -100)
    assert controller.camera.zoom == pytest.approx(1.1 * 0.9)


def test_horizontal_only_scroll_leaves_zoom_alone():
    """Test that a zero vertical delta neither zooms nor moves the camera"""
    controller = ViewportController(Camera(800, 600))
    assert controller.wheel(100, 50, 0) is CameraChange.NONE
    assert controller.camera.zoom == 1.0
    assert (controller.camera.x, controller.camera.y) == (0.0, 0.0)


def test_wheel_at_limit_reports_no_change():
    """Test that zooming past the limit is not reported as a zoom"""
    controller = ViewportController(Camera(800, 600, zoom=10.0))
    assert controller.wheel(400, 300, 1) is CameraChange.NONE


def test_pinch_zoom_uses_distance_ratio():
    """Test the pinch factor and its anchoring at the midpoint"""
    controller = ViewportController(Camera(800, 600))
    controller.touch_start([(300, 300), (500, 300)])
    assert controller.is_pinching
    before = controller.camera.screen_to_terrain(400, 300)
    assert controller.touch_move([(350, 300), (450, 300)]) is CameraChange.ZOOM
    assert controller.camera.zoom == pytest.approx(2.0)
    assert controller.camera.screen_to_terrain(400, 300) == pytest.approx(before)


def test_single_touch_drag():
    """Test one-finger panning"""
    controller = ViewportController(Camera(800, 600))
    controller.touch_start([(100, 100)])
    assert controller.touch_move([(120, 130)]) is CameraChange.PAN
    assert (controller.camera.x, controller.camera.y) == (-20, -30)


def test_pinch_turns_into_drag_when_a_finger_lifts():
    """Test the pinch-to-drag transition"""
    controller = ViewportController(Camera(800, 600))
    controller.touch_start([(300, 300), (500, 300)])
    controller.touch_end([(500, 300)])
    assert not controller.is_pinching
    assert controller.is_dragging
    assert controller.touch_move([(510, 300)]) is CameraChange.PAN
    assert controller.camera.x == -10
    controller.touch_end([])
    assert not controller.is_dragging


def test_reset():
    """Test that reset returns to the origin at zoom 1"""
    camera = Camera(800, 600, x=10.0, y=20.0, zoom=3.0)
    camera.reset()
    assert (camera.x, camera.y, camera.zoom) == (0.0, 0.0, 1.0)
