from encounter.monsters import DEFAULT_CATALOG, MonsterInstance, MonsterTemplate

__all__ = [
    "DEFAULT_CATALOG",
    "MonsterInstance",
    "MonsterTemplate",
]
