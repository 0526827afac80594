from .camera import Camera, PerspectiveFrustum, CullingVolume
from .scene import Scene
from .terrain import (
    TerrainProvider, ConstantTerrainProvider, HeightmapTerrainProvider, HttpTerrainProvider,
    TerrainSampleError, sample_terrain, sample_terrain_most_detailed,
)

__all__ = [
    "Camera", "PerspectiveFrustum", "CullingVolume", "Scene",
    "TerrainProvider", "ConstantTerrainProvider", "HeightmapTerrainProvider", "HttpTerrainProvider",
    "TerrainSampleError", "sample_terrain", "sample_terrain_most_detailed",
]
