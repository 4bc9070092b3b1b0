# terrain_engine/viewport.py

"""
================================================================================
VIEWPORT: CAMERA, VISIBLE CHUNKS AND INPUT STATE
================================================================================
The camera position is kept in world-pixel units: a chunk with coordinate
(cx, cy) covers world pixels [cx * size, (cx + 1) * size). The zoom is not a
screen-space scale. It is folded into the noise frequency, so zooming changes
what a world pixel shows and every cached chunk becomes invalid.

Data Contract:
---------------
- Inputs: Pointer, wheel and touch positions in screen pixels.
- Outputs:
    - ChunkInfo lists describing which chunks cover the screen and where.
    - CameraChange values telling the caller what kind of redraw is needed.
- Side Effects: Mutates the Camera it owns.
- Invariants:
    - min_zoom <= zoom <= max_zoom at all times.
    - zoom_at() keeps the terrain point under the anchor fixed on screen.
================================================================================
"""
import math
from dataclasses import dataclass
from enum import Enum

from . import config as DEFAULTS
from .chunk_store import chunk_key


class CameraChange(Enum):
    """What an input event did to the camera."""
    NONE = "none"
    PAN = "pan"
    ZOOM = "zoom"


@dataclass(frozen=True)
class ChunkInfo:
    """A visible chunk: its key, chunk coordinate and top-left screen position."""
    key: str
    world_chunk_x: int
    world_chunk_y: int
    screen_x: float
    screen_y: float


class Camera:
    def __init__(self, screen_width: int, screen_height: int, x: float = 0.0, y: float = 0.0, zoom: float = 1.0,
                 min_zoom: float = DEFAULTS.MIN_ZOOM, max_zoom: float = DEFAULTS.MAX_ZOOM,
                 zoom_sensitivity: float = DEFAULTS.ZOOM_SENSITIVITY):
        self.screen_width = screen_width
        self.screen_height = screen_height
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.zoom_sensitivity = zoom_sensitivity

        self.x = float(x)
        self.y = float(y)
        self.zoom = min(self.max_zoom, max(self.min_zoom, float(zoom)))

        self.zoom_changed = True

    @property
    def center(self) -> tuple[float, float]:
        return self.screen_width / 2, self.screen_height / 2

    def world_to_screen(self, world_x, world_y):
        cx, cy = self.center
        return world_x - self.x + cx, world_y - self.y + cy

    def screen_to_world(self, screen_x, screen_y):
        cx, cy = self.center
        return self.x + screen_x - cx, self.y + screen_y - cy

    def screen_to_terrain(self, screen_x, screen_y):
        """The zoom-independent terrain coordinate shown at a screen position."""
        world_x, world_y = self.screen_to_world(screen_x, screen_y)
        return world_x * self.zoom, world_y * self.zoom

    def pan_by(self, dx, dy):
        """Drags the view: the terrain follows the pointer."""
        self.x -= dx
        self.y -= dy

    def zoom_at(self, screen_x, screen_y, factor) -> bool:
        """
        Multiplies the zoom by factor, clamped to [min_zoom, max_zoom], while
        keeping the terrain under (screen_x, screen_y) in place.
        Returns True if the zoom actually changed.
        """
        new_zoom = min(self.max_zoom, max(self.min_zoom, self.zoom * factor))
        if new_zoom == self.zoom:
            return False

        cx, cy = self.center
        dx = screen_x - cx
        dy = screen_y - cy
        ratio = self.zoom / new_zoom
        self.x = (self.x + dx) * ratio - dx
        self.y = (self.y + dy) * ratio - dy
        self.zoom = new_zoom
        self.zoom_changed = True
        return True

    def resize(self, screen_width: int, screen_height: int):
        self.screen_width = screen_width
        self.screen_height = screen_height

    def reset(self):
        self.x = 0.0
        self.y = 0.0
        if self.zoom != 1.0:
            self.zoom = 1.0
            self.zoom_changed = True


def visible_chunks(camera: Camera, chunk_size: int, chunk_radius: int) -> list[ChunkInfo]:
    """
    The (2r + 1)^2 chunks around the chunk containing the camera, column by
    column, with their top-left corners in screen space.
    """
    center_chunk_x = math.floor(camera.x / chunk_size)
    center_chunk_y = math.floor(camera.y / chunk_size)

    chunks = []
    for xi in range(-chunk_radius, chunk_radius + 1):
        for yi in range(-chunk_radius, chunk_radius + 1):
            world_chunk_x = center_chunk_x + xi
            world_chunk_y = center_chunk_y + yi
            screen_x, screen_y = camera.world_to_screen(world_chunk_x * chunk_size, world_chunk_y * chunk_size)
            chunks.append(ChunkInfo(
                key=chunk_key(world_chunk_x, world_chunk_y),
                world_chunk_x=world_chunk_x,
                world_chunk_y=world_chunk_y,
                screen_x=screen_x,
                screen_y=screen_y,
            ))
    return chunks


def chunk_priority(info: ChunkInfo, camera: Camera, chunk_size: int) -> float:
    """1.0 for a chunk centred on screen, falling linearly to 0.0 at the screen-corner distance."""
    cx, cy = camera.center
    distance = math.hypot(info.screen_x + chunk_size / 2 - cx, info.screen_y + chunk_size / 2 - cy)
    max_distance = math.hypot(cx, cy)
    if max_distance == 0:
        return 1.0 if distance == 0 else 0.0
    return max(0.0, 1.0 - distance / max_distance)


def _touch_distance(a, b) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


class ViewportController:
    """
    Turns pointer, wheel and touch events into camera changes.
    Touch handlers take the full list of (x, y) points currently on screen.
    """
    def __init__(self, camera: Camera):
        self.camera = camera
        self.is_dragging = False
        self.is_pinching = False
        self.last_pointer = (0.0, 0.0)
        self.last_pinch_distance = 0.0

    # --- Mouse ---
    def pointer_down(self, x, y) -> CameraChange:
        self.is_dragging = True
        self.last_pointer = (x, y)
        return CameraChange.NONE

    def pointer_move(self, x, y) -> CameraChange:
        if not self.is_dragging:
            return CameraChange.NONE
        dx = x - self.last_pointer[0]
        dy = y - self.last_pointer[1]
        self.last_pointer = (x, y)
        self.camera.pan_by(dx, dy)
        return CameraChange.PAN

    def pointer_up(self) -> CameraChange:
        self.is_dragging = False
        return CameraChange.NONE

    def wheel(self, x, y, delta_y) -> CameraChange:
        """A positive delta zooms in, a negative one zooms out, zero does nothing."""
        if delta_y == 0:
            return CameraChange.NONE
        sensitivity = self.camera.zoom_sensitivity
        factor = 1 + sensitivity if delta_y > 0 else 1 - sensitivity
        if self.camera.zoom_at(x, y, factor):
            return CameraChange.ZOOM
        return CameraChange.NONE

    # --- Touch ---
    def touch_start(self, touches: list) -> CameraChange:
        if len(touches) == 1:
            self.is_dragging = True
            self.is_pinching = False
            self.last_pointer = tuple(touches[0])
        elif len(touches) == 2:
            self.is_dragging = False
            self.is_pinching = True
            self.last_pinch_distance = _touch_distance(touches[0], touches[1])
        return CameraChange.NONE

    def touch_move(self, touches: list) -> CameraChange:
        if not self.is_dragging and not self.is_pinching:
            return CameraChange.NONE

        if self.is_dragging and len(touches) == 1:
            return self.pointer_move(*touches[0])

        if self.is_pinching and len(touches) == 2:
            change = CameraChange.NONE
            current_distance = _touch_distance(touches[0], touches[1])
            if self.last_pinch_distance > 0 and current_distance > 0:
                mid_x = (touches[0][0] + touches[1][0]) / 2
                mid_y = (touches[0][1] + touches[1][1]) / 2
                if self.camera.zoom_at(mid_x, mid_y, self.last_pinch_distance / current_distance):
                    change = CameraChange.ZOOM
            self.last_pinch_distance = current_distance
            return change

        if self.is_pinching and len(touches) != 2:
            self._pinch_to_drag(touches)
        return CameraChange.NONE

    def touch_end(self, touches: list) -> CameraChange:
        """Called with the touches that remain after a finger lifts."""
        if not touches:
            self.is_dragging = False
            self.is_pinching = False
            self.last_pinch_distance = 0.0
        elif len(touches) == 1 and self.is_pinching:
            self._pinch_to_drag(touches)
        return CameraChange.NONE

    def _pinch_to_drag(self, touches):
        self.is_pinching = False
        if len(touches) == 1:
            self.is_dragging = True
            self.last_pointer = tuple(touches[0])
