from terrain.biomes import BIOMES, Biome, TerrainOption
from terrain.generator import WorldGenerator

__all__ = [
    "BIOMES",
    "Biome",
    "TerrainOption",
    "WorldGenerator",
]
