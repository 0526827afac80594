"""Terrain height providers and sampling helpers.

Providers answer ``sample_heights(positions, level)`` for a list of
Cartographic positions at a given level of detail. The module-level
coroutines ``sample_terrain`` and ``sample_terrain_most_detailed`` wrap a
provider and return copies of the positions with their height replaced by
the terrain height, raising TerrainSampleError when the provider cannot
answer for every position.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

import httpx

from pypopupanchor.types import Cartographic

logger = logging.getLogger(__name__)


class TerrainSampleError(Exception):
    """Raised when terrain heights cannot be obtained."""


class TerrainProvider:
    """Base class for terrain providers."""

    max_level: int = 0
    """Most detailed level this provider can sample."""

    async def sample_heights(self, positions: Sequence[Cartographic], level: int) -> List[Optional[float]]:
        """Heights at `positions`; None where the provider has no data."""
        raise NotImplementedError


class ConstantTerrainProvider(TerrainProvider):
    """Terrain at a fixed height everywhere (the bare ellipsoid when height is 0)."""

    def __init__(self, height: float = 0.0, max_level: int = 0):
        self.height = height
        self.max_level = max_level

    async def sample_heights(self, positions: Sequence[Cartographic], level: int) -> List[Optional[float]]:
        return [self.height for _ in positions]


class HeightmapTerrainProvider(TerrainProvider):
    """
    In-memory height grid, e.g. a region heightmap received from a simulator.

    ``heights[row][col]`` is the height at
    ``(origin_longitude + col * cell_size, origin_latitude + row * cell_size)``,
    in the units of the scene frame. The full grid is level ``max_level``;
    each lower level keeps every second row and column of the one above.
    Heights between grid posts are interpolated bilinearly.
    """

    def __init__(self, heights: Sequence[Sequence[float]], origin_longitude: float = 0.0,
                 origin_latitude: float = 0.0, cell_size: float = 1.0, max_level: int = 14):
        if not heights or not heights[0]:
            raise ValueError("Heightmap must contain at least one row and column")
        width = len(heights[0])
        if any(len(row) != width for row in heights):
            raise ValueError("Heightmap rows must all have the same length")
        if cell_size <= 0:
            raise ValueError("cell_size must be positive")
        self._heights = [list(map(float, row)) for row in heights]
        self.rows = len(self._heights)
        self.columns = width
        self.origin_longitude = origin_longitude
        self.origin_latitude = origin_latitude
        self.cell_size = cell_size
        self.max_level = max_level

    def __repr__(self) -> str:
        return (f"HeightmapTerrainProvider({self.rows}x{self.columns}, cell_size={self.cell_size}, "
                f"max_level={self.max_level})")

    async def sample_heights(self, positions: Sequence[Cartographic], level: int) -> List[Optional[float]]:
        if level < 0 or level > self.max_level:
            raise TerrainSampleError(f"Level {level} not available (max {self.max_level})")
        step = 2 ** (self.max_level - level)
        return [self._height_at(p.longitude, p.latitude, step) for p in positions]

    def _height_at(self, longitude: float, latitude: float, step: int) -> Optional[float]:
        col = (longitude - self.origin_longitude) / self.cell_size
        row = (latitude - self.origin_latitude) / self.cell_size
        if not (math.isfinite(col) and math.isfinite(row)):
            return None
        if col < 0 or row < 0 or col > self.columns - 1 or row > self.rows - 1:
            return None

        # Posts available at this level; the last row/column is always kept
        def bracket(value: float, size: int):
            lower = min(int(value // step) * step, size - 1)
            upper = min(lower + step, size - 1)
            if upper == lower:
                return lower, upper, 0.0
            return lower, upper, (value - lower) / (upper - lower)

        c0, c1, fc = bracket(col, self.columns)
        r0, r1, fr = bracket(row, self.rows)
        h = self._heights
        top = h[r0][c0] + (h[r0][c1] - h[r0][c0]) * fc
        bottom = h[r1][c0] + (h[r1][c1] - h[r1][c0]) * fc
        return top + (bottom - top) * fr


class HttpTerrainProvider(TerrainProvider):
    """
    Terrain heights served over HTTP.

    Posts ``{"level": L, "positions": [[lon, lat], ...]}`` to
    ``<base_url>/sample`` and expects ``{"heights": [h or null, ...]}``.
    """

    def __init__(self, base_url: str, max_level: int = 14, timeout: float = 10.0, client=None):
        self.base_url = base_url.rstrip("/")
        self.max_level = max_level
        self.http = client if client is not None else httpx.AsyncClient(timeout=timeout)

    async def sample_heights(self, positions: Sequence[Cartographic], level: int) -> List[Optional[float]]:
        payload = {"level": level, "positions": [[p.longitude, p.latitude] for p in positions]}
        try:
            resp = await self.http.post(f"{self.base_url}/sample", json=payload)
            resp.raise_for_status()
            heights = resp.json().get("heights")
        except httpx.HTTPError as e:
            raise TerrainSampleError(f"Terrain request failed: {e}") from e
        except ValueError as e:
            raise TerrainSampleError(f"Invalid terrain response: {e}") from e
        if not isinstance(heights, list) or len(heights) != len(positions):
            raise TerrainSampleError("Terrain response does not match the requested positions")
        return [None if h is None else float(h) for h in heights]

    async def aclose(self) -> None:
        await self.http.aclose()


async def sample_terrain(provider: TerrainProvider, level: int,
                         positions: Sequence[Cartographic]) -> List[Cartographic]:
    """Samples `provider` at `level`; every position must get a height."""
    if provider is None:
        raise TerrainSampleError("No terrain provider")
    heights = await provider.sample_heights(positions, level)
    if len(heights) != len(positions):
        raise TerrainSampleError("Terrain provider returned a wrong number of heights")
    sampled = []
    for position, height in zip(positions, heights):
        if height is None:
            raise TerrainSampleError(f"No terrain data at {position} for level {level}")
        sampled.append(Cartographic(position.longitude, position.latitude, height))
    return sampled


async def sample_terrain_most_detailed(provider: TerrainProvider,
                                       positions: Sequence[Cartographic]) -> List[Cartographic]:
    """Samples `provider` at its most detailed level."""
    if provider is None:
        raise TerrainSampleError("No terrain provider")
    level = getattr(provider, "max_level", None)
    if level is None:
        raise TerrainSampleError(f"{type(provider).__name__} does not report a most detailed level")
    return await sample_terrain(provider, level, positions)
