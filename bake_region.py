# bake_region.py

"""
================================================================================
OFFLINE REGION EXPORT SCRIPT
================================================================================
This script is a command-line tool for rendering a square block of terrain
chunks around a chunk coordinate and saving it as a single PNG image. It uses
the same generator as the interactive viewer, so an export at a given seed,
zoom and render mode matches what the viewer shows.

Usage:
    python bake_region.py --config config.json --radius 2 --mode terrain
================================================================================
"""
import os
import sys
import json
import logging
import argparse
import time
import multiprocessing
import numpy as np
from PIL import Image
from tqdm import tqdm

from terrain_engine.generator import TerrainGenerator
from terrain_engine import config as DEFAULTS

# --- Global variables for worker processes ---
worker_generator = None
worker_zoom = 1.0


def init_worker(params, zoom):
    """Initializes the global state for each worker process."""
    global worker_generator, worker_zoom
    worker_logger = logging.getLogger(f"Worker-{os.getpid()}")
    worker_generator = TerrainGenerator(config=params, logger=worker_logger)
    worker_zoom = zoom


def process_chunk(coords):
    """Renders one chunk and returns its coordinate with the RGBA buffer."""
    cx, cy = coords
    chunk = worker_generator.render_chunk(cx, cy, worker_zoom)
    return cx, cy, chunk.pixels


def region_tasks(center_x: int, center_y: int, radius: int) -> list[tuple[int, int]]:
    return [
        (cx, cy)
        for cy in range(center_y - radius, center_y + radius + 1)
        for cx in range(center_x - radius, center_x + radius + 1)
    ]


def bake_region(params: dict, center_x: int = 0, center_y: int = 0, radius: int = DEFAULTS.DEFAULT_CHUNK_RADIUS,
                zoom: float = 1.0, workers: int = 1, logger: logging.Logger = None, progress: bool = True) -> np.ndarray:
    """
    Renders the (2 * radius + 1)^2 chunks around (center_x, center_y) and
    stitches them into one (H, W, 4) uint8 image.
    """
    logger = logger or logging.getLogger("RegionBaker")
    radius = max(0, int(radius))
    zoom = min(DEFAULTS.MAX_ZOOM, max(DEFAULTS.MIN_ZOOM, float(zoom)))

    init_worker(params, zoom)
    size = worker_generator.chunk_size
    span = 2 * radius + 1
    image = np.zeros((span * size, span * size, 4), dtype=np.uint8)

    tasks = region_tasks(center_x, center_y, radius)
    logger.info(f"Rendering {len(tasks)} chunks of {size}px around ({center_x}, {center_y}) at zoom {zoom:.2f}...")

    def place(result):
        cx, cy, pixels = result
        row = (cy - center_y + radius) * size
        col = (cx - center_x + radius) * size
        image[row:row + size, col:col + size] = pixels

    if workers > 1:
        with multiprocessing.Pool(processes=workers, initializer=init_worker, initargs=(params, zoom)) as pool:
            for result in tqdm(pool.imap_unordered(process_chunk, tasks), total=len(tasks), desc="Rendering Chunks", disable=not progress):
                place(result)
    else:
        for coords in tqdm(tasks, desc="Rendering Chunks", disable=not progress):
            place(process_chunk(coords))

    return image


def main(argv=None):
    parser = argparse.ArgumentParser(description="Export a square region of procedural terrain as a PNG image.")
    parser.add_argument("--config", type=str, default="config.json", help="Path to the JSON configuration file.")
    parser.add_argument("--radius", type=int, default=DEFAULTS.DEFAULT_CHUNK_RADIUS, help="Chunks around the centre chunk in each direction.")
    parser.add_argument("--center-x", type=int, default=0, help="Centre chunk X coordinate.")
    parser.add_argument("--center-y", type=int, default=0, help="Centre chunk Y coordinate.")
    parser.add_argument("--zoom", type=float, default=1.0, help="Zoom level folded into the noise frequency.")
    parser.add_argument("--mode", choices=DEFAULTS.RENDER_MODES, default=None, help="Render mode (overrides the config).")
    parser.add_argument("--workers", type=int, default=1, help="Worker processes to render with.")
    parser.add_argument("--output", type=str, default=None, help="Output PNG path.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("RegionBaker")

    logger.info(f"Loading configuration from: {args.config}")
    try:
        with open(args.config, 'r') as f:
            config = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        sys.exit(1)

    params = dict(config.get('terrain_parameters', {}))
    if args.mode is not None:
        params['render_mode'] = args.mode

    seed = params.get('seed', DEFAULTS.DEFAULT_SEED)
    mode = params.get('render_mode', DEFAULTS.DEFAULT_RENDER_MODE)
    output = args.output or os.path.join("exports", f"seed_{seed}_{mode}_{args.center_x}_{args.center_y}.png")

    start_time = time.perf_counter()
    image = bake_region(params, args.center_x, args.center_y, args.radius, args.zoom, args.workers, logger)

    os.makedirs(os.path.dirname(output) or ".", exist_ok=True)
    Image.fromarray(image, 'RGBA').save(output, 'PNG')

    end_time = time.perf_counter()
    logger.info(f"Export complete! Total time: {end_time - start_time:.2f} seconds.")
    logger.info(f"Region image ({image.shape[1]}x{image.shape[0]} px) saved to: {output}")


# --- Command-Line Interface ---
if __name__ == "__main__":
    main()
