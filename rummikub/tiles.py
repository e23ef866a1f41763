from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from .rules import DEFAULT_RULES, Ruleset


class TileColor(str, Enum):
    RED = "Red"
    BLUE = "Blue"
    ORANGE = "Orange"
    BLACK = "Black"
    JOKER = "Joker"


PLAYABLE_COLORS = (TileColor.RED, TileColor.BLUE, TileColor.ORANGE, TileColor.BLACK)


@dataclass(frozen=True)
class Tile:
    id: str
    number: int
    color: TileColor
    is_joker: bool = False

    def label(self) -> str:
        if self.is_joker:
            return "J"
        return f"{self.color.value}-{self.number}"

    @classmethod
    def numbered(cls, color: TileColor, number: int, copy: int = 0) -> "Tile":
        return cls(f"{color.value}-{number}-{copy}", number, color)

    @classmethod
    def joker(cls, index: int = 1) -> "Tile":
        return cls(f"joker-{index}", 0, TileColor.JOKER, is_joker=True)


def iter_full_deck(ruleset: Ruleset | None = None) -> Iterable[Tile]:
    ruleset = ruleset or DEFAULT_RULES
    for copy in range(ruleset.copies_per_tiletype):
        for color in PLAYABLE_COLORS[: ruleset.colors]:
            for number in range(1, ruleset.values + 1):
                yield Tile.numbered(color, number, copy)
    for index in range(1, ruleset.num_jokers + 1):
        yield Tile.joker(index)


def shuffle_tiles(tiles: Iterable[Tile], rng: Optional[random.Random] = None) -> List[Tile]:
    """Return a shuffled copy; ``Random.shuffle`` is a Fisher-Yates pass from the last index down."""
    shuffled = list(tiles)
    (rng or random).shuffle(shuffled)
    return shuffled


def create_deck(ruleset: Ruleset | None = None, rng: Optional[random.Random] = None) -> List[Tile]:
    return shuffle_tiles(iter_full_deck(ruleset), rng)
