"""WorldGenerator — deterministic procedural terrain for an infinite world.

Nothing generated is ever stored: every lookup recomputes the cell from the
seed and the coordinates alone, so the renderer and the encounter sampler
always agree on what a cell contains.

Two fractal value-noise fields (elevation, moisture) pick the biome; a
per-cell hash then picks a tile from that biome's weighted terrain table.
"""

from __future__ import annotations

import logging
import math

from core.models import AdjacentCell, TerrainInfo
from terrain.biomes import BIOMES, Biome, classify

logger = logging.getLogger(__name__)

_MASK64 = 0xFFFFFFFFFFFFFFFF

# Independent noise channels derived from the one world seed
_ELEVATION_CHANNEL = 0x1F3D5B79
_MOISTURE_CHANNEL = 0x2A4C6E80
_TILE_CHANNEL = 0x3B5D7F91

ELEVATION_SCALE = 48.0
MOISTURE_SCALE = 64.0
OCTAVES = 3
PERSISTENCE = 0.5


def hash_coords(seed: int, x: int, y: int) -> int:
    """64-bit avalanche hash of an integer coordinate (splitmix64 finaliser)."""
    h = (seed * 0x9E3779B97F4A7C15 + x * 0xBF58476D1CE4E5B9 + y * 0x94D049BB133111EB) & _MASK64
    h ^= h >> 30
    h = (h * 0xBF58476D1CE4E5B9) & _MASK64
    h ^= h >> 27
    h = (h * 0x94D049BB133111EB) & _MASK64
    h ^= h >> 31
    return h


def _unit(seed: int, x: int, y: int) -> float:
    """Lattice value in [0, 1)."""
    return (hash_coords(seed, x, y) >> 11) / float(1 << 53)


def _smoothstep(t: float) -> float:
    return t * t * (3.0 - 2.0 * t)


def value_noise(seed: int, x: float, y: float) -> float:
    """Bilinear interpolation of lattice values with smoothstep easing."""
    x0 = math.floor(x)
    y0 = math.floor(y)
    tx = _smoothstep(x - x0)
    ty = _smoothstep(y - y0)

    top = _unit(seed, x0, y0) + (_unit(seed, x0 + 1, y0) - _unit(seed, x0, y0)) * tx
    bottom = _unit(seed, x0, y0 + 1) + (_unit(seed, x0 + 1, y0 + 1) - _unit(seed, x0, y0 + 1)) * tx
    return top + (bottom - top) * ty


def fractal_noise(seed: int, x: int, y: int, scale: float, octaves: int = OCTAVES) -> float:
    """Sum of octaves normalised back into [0, 1)."""
    total = 0.0
    amplitude = 1.0
    norm = 0.0
    frequency = 1.0 / scale
    for octave in range(octaves):
        total += amplitude * value_noise(seed + octave, x * frequency, y * frequency)
        norm += amplitude
        amplitude *= PERSISTENCE
        frequency *= 2.0
    return total / norm


class WorldGenerator:
    """Pure function from integer coordinates to terrain and biome."""

    def __init__(self, seed: int = 0, biomes: dict[str, Biome] | None = None):
        self.seed = seed
        self.biomes = biomes or BIOMES

    def get_biome_name(self, x: int, y: int) -> str:
        elevation = fractal_noise(self.seed ^ _ELEVATION_CHANNEL, x, y, ELEVATION_SCALE)
        moisture = fractal_noise(self.seed ^ _MOISTURE_CHANNEL, x, y, MOISTURE_SCALE)
        return classify(elevation, moisture)

    def get_terrain(self, x: int, y: int) -> TerrainInfo:
        """Terrain and biome at (x, y). Same inputs always give equal results."""
        biome = self.biomes[self.get_biome_name(x, y)]
        roll = hash_coords(self.seed ^ _TILE_CHANNEL, x, y) % biome.total_weight
        for option in biome.terrains:
            if roll < option.weight:
                return TerrainInfo(terrain=option.terrain, biome_name=biome.name)
            roll -= option.weight
        # unreachable while total_weight matches the table
        return TerrainInfo(terrain=biome.terrains[0].terrain, biome_name=biome.name)

    def get_adjacent_terrain(self, x: int, y: int, radius: int) -> list[AdjacentCell]:
        """Every cell within Chebyshev distance radius, row-major, center excluded."""
        if radius < 0:
            raise ValueError(f"radius must be >= 0, got {radius}")
        cells = []
        for dy in range(-radius, radius + 1):
            for dx in range(-radius, radius + 1):
                if dx == 0 and dy == 0:
                    continue
                cx, cy = x + dx, y + dy
                cells.append(AdjacentCell(x=cx, y=cy, terrain=self.get_terrain(cx, cy)))
        return cells
