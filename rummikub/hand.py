from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .tiles import Tile

SORT_KEYS = ("number", "color")


def _sort_key(tile: Tile, key: str) -> Tuple:
    if tile.is_joker:
        return (1,)
    if key == "number":
        return (0, tile.number, tile.color.value)
    return (0, tile.color.value, tile.number)


def sort_hand(hand: Iterable[Tile], key: str = "number") -> List[Tile]:
    """Display order for a hand; jokers always go last and keep their relative order."""
    if key not in SORT_KEYS:
        raise ValueError(f"unknown sort key {key!r}, expected one of {SORT_KEYS}")
    return sorted(hand, key=lambda t: _sort_key(t, key))


def remove_tiles(hand: Iterable[Tile], tiles: Iterable[Tile]) -> List[Tile]:
    played = {t.id for t in tiles}
    return [t for t in hand if t.id not in played]


def find_tiles(hand: Sequence[Tile], tile_ids: Iterable[str]) -> List[Tile]:
    wanted = set(tile_ids)
    found = [t for t in hand if t.id in wanted]
    if len(found) != len(wanted):
        raise ValueError("cannot play tiles not in hand")
    return found
