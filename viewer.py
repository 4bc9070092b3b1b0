# viewer.py

"""
Interactive Pygame explorer for the procedural terrain.

Controls:
    Mouse drag / one-finger drag   pan
    Mouse wheel / two-finger pinch zoom at the pointer
    R      reset camera and zoom
    G      toggle the chunk grid
    C      clear the chunk cache
    Space  random seed
    M      cycle render mode (perlin, heatmap, terrain)
    + / -  zoom in / out about the centre, 0 resets the zoom
    Esc    quit
"""

import json
import logging
import logging.config
import os
import sys

import numpy as np
import pygame

from terrain_engine import config as DEFAULTS
from terrain_engine.renderer import TerrainRenderer

CONFIG_PATH = 'config.json'
LOG_CONFIG_PATH = 'logging_config.json'
LOG_DIR = 'logs'

BACKGROUND_COLOR = (0, 0, 0)
# How often the window caption is refreshed with renderer stats, in frames.
STATS_REFRESH_FRAMES = 15


class PygameSurface:
    """Adapts a pygame display surface to the renderer's DrawingSurface protocol."""
    def __init__(self, screen: pygame.Surface):
        self.screen = screen

    @property
    def width(self) -> int:
        return self.screen.get_width()

    @property
    def height(self) -> int:
        return self.screen.get_height()

    def clear(self):
        self.screen.fill(BACKGROUND_COLOR)

    def blit(self, pixels: np.ndarray, x: int, y: int):
        height, width = pixels.shape[:2]
        image = pygame.image.frombuffer(pixels.tobytes(), (width, height), 'RGBA')
        self.screen.blit(image, (x, y))

    def draw_line(self, start, end, color, width):
        # Display surfaces have no per-pixel alpha, so draw the alpha through a layer
        r, g, b, a = color
        if a >= 255:
            pygame.draw.line(self.screen, (r, g, b), start, end, width)
            return
        layer = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)
        pygame.draw.line(layer, color, start, end, width)
        self.screen.blit(layer, (0, 0))


class ViewerApp:
    """The main application class for the terrain explorer."""

    def __init__(self):
        self._setup_logging()
        self.logger.info("Application starting.")

        self.config = self._load_config()
        self._setup_pygame()

        scheduler_config = self.config.get('scheduler', {})
        self.idle_budget_ms = scheduler_config.get('idle_budget_ms', DEFAULTS.DEFAULT_IDLE_BUDGET_MS)

        self.surface = PygameSurface(self.screen)
        self.renderer = TerrainRenderer(self._renderer_config(), self.surface, self.logger)
        self.rng = np.random.default_rng()

        # Active touch points by finger id, in screen pixels
        self.touches = {}
        self.frame_count = 0
        self.is_running = True

    def _setup_logging(self):
        """Initializes the logging system from a config file."""
        if not os.path.exists(LOG_DIR):
            os.makedirs(LOG_DIR)

        with open(LOG_CONFIG_PATH, 'rt') as f:
            log_config = json.load(f)

        # Tell the logger where to create its file, overriding the JSON path.
        log_config['handlers']['file']['filename'] = os.path.join(LOG_DIR, 'viewer.log')

        logging.config.dictConfig(log_config)
        self.logger = logging.getLogger(__name__)

    def _load_config(self) -> dict:
        """Loads display and terrain parameters from the config file."""
        self.logger.info(f"Loading configuration from {CONFIG_PATH}")
        try:
            with open(CONFIG_PATH, 'r') as f:
                return json.load(f)
        except FileNotFoundError:
            self.logger.critical(f"Configuration file not found at {CONFIG_PATH}. Exiting.")
            sys.exit(1)
        except json.JSONDecodeError:
            self.logger.critical(f"Error decoding JSON from {CONFIG_PATH}. Exiting.")
            sys.exit(1)

    def _renderer_config(self) -> dict:
        """Flattens the config sections into the renderer's parameter dict."""
        display = self.config.get('display', {})
        scheduler = self.config.get('scheduler', {})
        return {
            **self.config.get('terrain_parameters', {}),
            **self.config.get('camera', {}),
            'async_loading': scheduler.get('async_loading', DEFAULTS.DEFAULT_ASYNC_LOADING),
            'max_cache_size': scheduler.get('max_cache_size', DEFAULTS.MAX_CACHE_SIZE),
            'show_grid': display.get('show_grid', DEFAULTS.SHOW_GRID),
            'show_center_marker': display.get('show_center_marker', DEFAULTS.SHOW_CENTER_MARKER),
        }

    def _setup_pygame(self):
        """Initializes Pygame and the display window."""
        pygame.init()
        display_config = self.config['display']

        flags = pygame.RESIZABLE
        if display_config.get('fullscreen', False):
            flags = pygame.FULLSCREEN
            self.logger.info("Initializing display in Fullscreen mode.")
            self.screen = pygame.display.set_mode((0, 0), flags)
        else:
            self.screen = pygame.display.set_mode(
                (display_config['screen_width'], display_config['screen_height']), flags
            )
        self.logger.info(f"Display initialized at {self.screen.get_width()}x{self.screen.get_height()}.")

        pygame.display.set_caption("Terrain Explorer")
        self.clock = pygame.time.Clock()
        self.target_fps = display_config.get('target_fps', 60)

    def run(self):
        """The main application loop."""
        self.renderer.redraw()

        while self.is_running:
            self.handle_events()
            self.renderer.update(self.idle_budget_ms)
            pygame.display.flip()

            self.frame_count += 1
            if self.frame_count % STATS_REFRESH_FRAMES == 0:
                self._update_caption()
            self.clock.tick(self.target_fps)

        self.renderer.destroy()
        self.logger.info("Exiting application.")
        pygame.quit()
        sys.exit()

    def _update_caption(self):
        stats = self.renderer.stats()
        pygame.display.set_caption(
            f"Terrain Explorer | seed {stats['seed']} | {stats['render_mode']} | "
            f"zoom {stats['zoom']:.2f} | cached {stats['cache_size']} | pending {stats['pending_chunks']}"
        )

    def handle_events(self):
        """Processes user input and other events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.is_running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)
            elif event.type == pygame.VIDEORESIZE:
                self.surface.screen = pygame.display.get_surface()
                self.renderer.resize(self.surface.width, self.surface.height)

            # Mouse events synthesized from touches are handled as touches
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and not getattr(event, 'touch', False):
                self.renderer.pointer_down(*event.pos)
            elif event.type == pygame.MOUSEMOTION and not getattr(event, 'touch', False):
                self.renderer.pointer_move(*event.pos)
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and not getattr(event, 'touch', False):
                self.renderer.pointer_up()
            elif event.type == pygame.MOUSEWHEEL and event.y != 0:
                # Scrolling down zooms in; horizontal-only scrolls are ignored
                mouse_x, mouse_y = pygame.mouse.get_pos()
                self.renderer.wheel(mouse_x, mouse_y, -event.y)

            elif event.type == pygame.FINGERDOWN:
                self.touches[event.finger_id] = self._finger_position(event)
                self.renderer.touch_start(list(self.touches.values()))
            elif event.type == pygame.FINGERMOTION:
                self.touches[event.finger_id] = self._finger_position(event)
                self.renderer.touch_move(list(self.touches.values()))
            elif event.type == pygame.FINGERUP:
                self.touches.pop(event.finger_id, None)
                self.renderer.touch_end(list(self.touches.values()))

    def _finger_position(self, event) -> tuple[float, float]:
        # Finger coordinates are normalized to [0, 1]
        return event.x * self.surface.width, event.y * self.surface.height

    def _handle_key(self, key):
        if key == pygame.K_ESCAPE:
            self.is_running = False
        elif key == pygame.K_r:
            self.logger.info("Resetting camera.")
            self.renderer.reset_camera()
        elif key == pygame.K_g:
            self.renderer.toggle_grid()
        elif key == pygame.K_c:
            self.logger.info("Clearing chunk cache.")
            self.renderer.clear_cache()
        elif key == pygame.K_SPACE:
            seed = self.renderer.randomize_seed(self.rng)
            self.logger.info(f"New random seed: {seed}")
        elif key == pygame.K_m:
            modes = DEFAULTS.RENDER_MODES
            next_mode = modes[(modes.index(self.renderer.generator.render_mode) + 1) % len(modes)]
            self.logger.info(f"Switching render mode to '{next_mode}'.")
            self.renderer.set_parameters(render_mode=next_mode)
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self.renderer.zoom_in()
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self.renderer.zoom_out()
        elif key == pygame.K_0:
            self.renderer.reset_zoom()


if __name__ == '__main__':
    app = ViewerApp()
    app.run()
