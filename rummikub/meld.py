from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .rules import DEFAULT_RULES, Ruleset
from .tiles import Tile


class MeldKind(str, Enum):
    RUN = "RUN"
    GROUP = "GROUP"


def _split_jokers(tiles: Sequence[Tile]) -> Tuple[List[Tile], List[Tile]]:
    jokers = [t for t in tiles if t.is_joker]
    others = [t for t in tiles if not t.is_joker]
    return jokers, others


def _group_problem(tiles: Sequence[Tile], others: List[Tile], ruleset: Ruleset) -> str:
    if len(tiles) > ruleset.max_group_size:
        return f"group must have at most {ruleset.max_group_size} tiles"
    number = others[0].number
    colors = set()
    for tile in others:
        if tile.number != number:
            return "group must share value"
        if tile.color in colors:
            return "group colors must be distinct"
        colors.add(tile.color)
    return ""


def _run_problem(tiles: Sequence[Tile], others: List[Tile], ruleset: Ruleset) -> str:
    size = len(tiles)
    if size > ruleset.values:
        return f"run must have at most {ruleset.values} tiles"
    color = others[0].color
    if any(t.color != color for t in others):
        return "run must have same color"

    numbers = sorted(t.number for t in others)
    if len(set(numbers)) != len(numbers):
        return "run must not duplicate value"

    low, high = numbers[0], numbers[-1]
    if high - low + 1 > size:
        return "run gaps exceed available jokers"
    # the run's first value must fit in [1, values - size + 1] and still reach both ends
    if max(1, high - size + 1) > min(ruleset.values - size + 1, low):
        return "run does not fit between 1 and 13"
    return ""


def check_set(tiles: Sequence[Tile], ruleset: Ruleset | None = None) -> Tuple[bool, str]:
    """Decide whether ``tiles`` form a legal group or run.

    Returns ``(True, "")`` when legal, otherwise ``(False, reason)``. The group
    and run predicates are independent; a set is legal if either holds.
    """
    ruleset = ruleset or DEFAULT_RULES
    if len(tiles) < ruleset.min_set_size:
        return False, "meld too short"

    _, others = _split_jokers(tiles)
    if not others:
        if len(tiles) <= ruleset.max_group_size:
            return True, ""
        return False, f"joker-only set must have at most {ruleset.max_group_size} tiles"

    group_reason = _group_problem(tiles, others, ruleset)
    if not group_reason:
        return True, ""
    run_reason = _run_problem(tiles, others, ruleset)
    if not run_reason:
        return True, ""
    return False, f"not a group ({group_reason}) nor a run ({run_reason})"


def is_valid_set(tiles: Sequence[Tile], ruleset: Ruleset | None = None) -> bool:
    ok, _ = check_set(tiles, ruleset)
    return ok


def classify_set(tiles: Sequence[Tile], ruleset: Ruleset | None = None) -> Optional[MeldKind]:
    ruleset = ruleset or DEFAULT_RULES
    if len(tiles) < ruleset.min_set_size:
        return None
    _, others = _split_jokers(tiles)
    if not others:
        return MeldKind.GROUP if len(tiles) <= ruleset.max_group_size else None
    if not _group_problem(tiles, others, ruleset):
        return MeldKind.GROUP
    if not _run_problem(tiles, others, ruleset):
        return MeldKind.RUN
    return None


def calculate_set_points(tiles: Sequence[Tile]) -> int:
    """Point value of an already validated set.

    In a group every tile, jokers included, counts as the shared number. In a
    run jokers first fill internal gaps; the rest extend below the lowest
    numbered tile, never below 1. Results for invalid sets are meaningless.
    """
    _, others = _split_jokers(tiles)
    if not others:
        return 0

    size = len(tiles)
    first = others[0].number
    if all(t.number == first for t in others):
        return first * size

    numbers = sorted(t.number for t in others)
    internal_gaps = sum(b - a - 1 for a, b in zip(numbers, numbers[1:]))
    jokers_left = size - len(others) - internal_gaps
    left_push = min(jokers_left, numbers[0] - 1)
    start = numbers[0] - left_push
    return size * (2 * start + size - 1) // 2


def total_points(sets: Iterable[Sequence[Tile]]) -> int:
    return sum(calculate_set_points(s) for s in sets)
