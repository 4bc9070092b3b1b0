# terrain_engine/__init__.py

# This file makes the 'terrain_engine' directory a Python package.
# It also defines the public API of the package.

from .generator import TerrainGenerator
from .chunk_store import Chunk, ChunkStore
from .viewport import Camera, CameraChange, ChunkInfo, ViewportController
from .scheduler import AsyncChunkScheduler
from .renderer import DrawingSurface, TerrainRenderer

__all__ = [
    "TerrainGenerator",
    "Chunk",
    "ChunkStore",
    "Camera",
    "CameraChange",
    "ChunkInfo",
    "ViewportController",
    "AsyncChunkScheduler",
    "DrawingSurface",
    "TerrainRenderer",
]
