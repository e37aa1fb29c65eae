"""Static biome and terrain tables."""

from __future__ import annotations

from pydantic import BaseModel

from core.models import Terrain


class TerrainOption(BaseModel):
    model_config = {"frozen": True}

    terrain: Terrain
    weight: int = 1


class Biome(BaseModel):
    """A named macro-region and the tiles that can appear in it."""

    model_config = {"frozen": True}

    name: str
    terrains: tuple[TerrainOption, ...]

    @property
    def total_weight(self) -> int:
        return sum(option.weight for option in self.terrains)


def _t(type_: str, label: str, color: str, difficulty: int, weight: int = 1) -> TerrainOption:
    return TerrainOption(
        terrain=Terrain(type=type_, label=label, color=color, difficulty=difficulty),
        weight=weight,
    )


BIOMES: dict[str, Biome] = {
    biome.name: biome
    for biome in (
        Biome(name="ocean", terrains=(
            _t("deep_water", "≈", "#1d3f8f", 2, weight=3),
            _t("water", "~", "#3366cc", 1, weight=5),
            _t("reef", "°", "#4fa3a5", 4, weight=1),
        )),
        Biome(name="coast", terrains=(
            _t("sand", ".", "#e8d8a0", 0, weight=6),
            _t("shallows", "~", "#6fa8dc", 1, weight=3),
            _t("driftwood", ",", "#a57c52", 1, weight=1),
        )),
        Biome(name="plains", terrains=(
            _t("grass", '"', "#6aa84f", 1, weight=8),
            _t("flowers", "*", "#d5a6bd", 0, weight=2),
            _t("tall_grass", ";", "#38761d", 3, weight=3),
            _t("boulder", "o", "#999999", 1, weight=1),
        )),
        Biome(name="forest", terrains=(
            _t("trees", "♣", "#274e13", 3, weight=6),
            _t("pines", "♠", "#1e5631", 4, weight=3),
            _t("clearing", '"', "#93c47d", 1, weight=2),
            _t("thicket", "%", "#38571a", 5, weight=1),
        )),
        Biome(name="swamp", terrains=(
            _t("mud", "~", "#5b4a2f", 3, weight=4),
            _t("reeds", "|", "#7f8f4f", 3, weight=3),
            _t("bog", "≈", "#3d4a2a", 6, weight=2),
            _t("dead_tree", "¥", "#6b5b45", 4, weight=1),
        )),
        Biome(name="desert", terrains=(
            _t("dunes", "~", "#e6b85c", 2, weight=6),
            _t("hardpan", ".", "#c9a76b", 1, weight=3),
            _t("cactus", "ƒ", "#5f8f3f", 2, weight=1),
            _t("bones", "%", "#eeeeee", 5, weight=1),
        )),
        Biome(name="hills", terrains=(
            _t("hill", "n", "#8e7c5c", 3, weight=5),
            _t("scree", ":", "#a39e93", 4, weight=2),
            _t("heath", '"', "#7d8f5a", 2, weight=3),
        )),
        Biome(name="mountains", terrains=(
            _t("mountain", "▲", "#8c8c8c", 6, weight=5),
            _t("cliff", "^", "#6f6f6f", 7, weight=2),
            _t("snow", "▲", "#f3f3f3", 5, weight=2),
            _t("cave", "Ω", "#444444", 9, weight=1),
        )),
    )
}


def classify(elevation: float, moisture: float) -> str:
    """Map noise values in [0, 1] to a biome name."""
    if elevation < 0.34:
        return "ocean"
    if elevation < 0.38:
        return "coast"
    if elevation > 0.68:
        return "mountains"
    if elevation > 0.61:
        return "hills"
    if moisture < 0.38:
        return "desert"
    if moisture < 0.50:
        return "plains"
    if moisture < 0.62:
        return "forest"
    return "swamp"
