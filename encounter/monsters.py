"""Monster templates, per-encounter instances, and the default catalog."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


class MonsterTemplate(BaseModel):
    """Read-only catalog entry. Lower rarity means more common."""

    model_config = {"frozen": True}

    name: str
    rarity: int = Field(ge=1)
    min_level: int = Field(ge=1)
    max_level: int = Field(ge=1)
    base_health: int = Field(ge=1)
    valid_biomes: frozenset[str] = frozenset()  # empty = any biome
    description: str = ""
    lore: str = ""
    behavior: str = ""
    aggression: str = "neutral"
    intelligence: str = "animal"
    size: str = "medium"
    abilities: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_levels(self) -> MonsterTemplate:
        if self.max_level < self.min_level:
            raise ValueError(
                f"{self.name}: max_level {self.max_level} < min_level {self.min_level}"
            )
        return self

    def allows_biome(self, biome_name: str | None) -> bool:
        return not self.valid_biomes or biome_name in self.valid_biomes


class MonsterInstance(BaseModel):
    """A rolled monster for one encounter; discarded once narrated."""

    model_config = {"frozen": True, "alias_generator": to_camel, "populate_by_name": True}

    name: str
    level: int
    max_health: int
    description: str = ""
    lore: str = ""
    behavior: str = ""
    aggression: str = "neutral"
    intelligence: str = "animal"
    size: str = "medium"
    abilities: tuple[str, ...] = ()

    @classmethod
    def from_template(cls, template: MonsterTemplate, level: int) -> MonsterInstance:
        return cls(
            name=template.name,
            level=level,
            max_health=level * template.base_health,
            description=template.description,
            lore=template.lore,
            behavior=template.behavior,
            aggression=template.aggression,
            intelligence=template.intelligence,
            size=template.size,
            abilities=template.abilities,
        )


DEFAULT_CATALOG: tuple[MonsterTemplate, ...] = (
    MonsterTemplate(
        name="Giant Rat",
        rarity=1, min_level=1, max_level=3, base_health=4,
        description="A rat the size of a dog, all teeth and matted fur.",
        lore="Follows travellers for scraps and bites when the scraps run out.",
        behavior="skittish, attacks in packs",
        aggression="low", size="small",
        abilities=("gnaw", "disease"),
    ),
    MonsterTemplate(
        name="Wolf",
        rarity=2, min_level=2, max_level=5, base_health=8,
        valid_biomes=frozenset({"plains", "forest", "hills"}),
        description="A grey wolf with a torn ear, watching from the edge of sight.",
        lore="Wolves of the wilds hunt the weak and the lost.",
        behavior="circles before striking",
        aggression="medium",
        abilities=("bite", "howl"),
    ),
    MonsterTemplate(
        name="Bog Lurker",
        rarity=4, min_level=3, max_level=7, base_health=12,
        valid_biomes=frozenset({"swamp"}),
        description="Something long and pale shifts beneath the mud.",
        lore="Said to be drowned travellers who never found the path out.",
        behavior="ambush from below",
        aggression="high", intelligence="cunning", size="large",
        abilities=("drag under", "grasping roots"),
    ),
    MonsterTemplate(
        name="Sand Wyrm",
        rarity=6, min_level=5, max_level=10, base_health=20,
        valid_biomes=frozenset({"desert"}),
        description="The dunes ripple as something vast swims through them.",
        lore="Caravans carry drums to beat when the sand starts to hum.",
        behavior="erupts from below, retreats when hurt",
        aggression="high", size="huge",
        abilities=("swallow", "sand blast"),
    ),
    MonsterTemplate(
        name="Cave Troll",
        rarity=5, min_level=4, max_level=9, base_health=18,
        valid_biomes=frozenset({"hills", "mountains"}),
        description="A hulking grey shape, skin like wet stone.",
        lore="Trolls turn to stone in sunlight, or so the stories say.",
        behavior="slow, relentless",
        aggression="high", intelligence="dim", size="large",
        abilities=("smash", "regenerate"),
    ),
    MonsterTemplate(
        name="Sea Serpent",
        rarity=7, min_level=6, max_level=12, base_health=22,
        valid_biomes=frozenset({"ocean", "coast"}),
        description="Coils break the surface, each the width of a rowboat.",
        lore="Sailors leave offerings of salt pork at the harbour mouth.",
        behavior="territorial",
        aggression="high", size="huge",
        abilities=("constrict", "tidal surge"),
    ),
    MonsterTemplate(
        name="Will-o'-the-Wisp",
        rarity=5, min_level=2, max_level=6, base_health=5,
        valid_biomes=frozenset({"swamp", "forest"}),
        description="A pale light bobbing just ahead, always just ahead.",
        lore="Those who follow it are rarely seen again.",
        behavior="lures, then flees",
        aggression="low", intelligence="cunning", size="tiny",
        abilities=("lure", "flicker"),
    ),
    MonsterTemplate(
        name="Wandering Spirit",
        rarity=8, min_level=3, max_level=8, base_health=10,
        description="A translucent figure that seems to be searching for something.",
        lore="Restless dead who lost their way home.",
        behavior="curious, mournful",
        aggression="low", intelligence="human", size="medium",
        abilities=("wail", "pass through walls"),
    ),
)
