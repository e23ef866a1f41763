from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from .hand import remove_tiles
from .meld import calculate_set_points, is_valid_set
from .rules import DEFAULT_RULES, Ruleset
from .tiles import PLAYABLE_COLORS, Tile, TileColor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnResult:
    new_hand: List[Tile]
    new_board: List[List[Tile]]
    made_move: bool
    points: int = 0


class _GreedyTurn:
    """Working copies and running totals for one automated turn."""

    def __init__(self, hand: Sequence[Tile], board: Sequence[Sequence[Tile]], has_meld: bool, ruleset: Ruleset):
        self.hand: List[Tile] = list(hand)
        self.board: List[List[Tile]] = [list(s) for s in board]
        self.has_meld = has_meld
        self.ruleset = ruleset
        self.turn_points = 0
        self.made_move = False

    def try_play_set(self, tiles: List[Tile]) -> bool:
        points = calculate_set_points(tiles)
        threshold = self.ruleset.initial_meld_min_points
        if not self.has_meld and self.turn_points + points < threshold:
            return False
        self.board.append(tiles)
        self.hand = remove_tiles(self.hand, tiles)
        self.turn_points += points
        self.made_move = True
        if self.turn_points >= threshold:
            self.has_meld = True
        logger.debug("played %s for %d points", [t.label() for t in tiles], points)
        return True

    def group_pass(self) -> None:
        by_number: Dict[int, List[Tile]] = {}
        for tile in self.hand:
            if not tile.is_joker:
                by_number.setdefault(tile.number, []).append(tile)

        for number in sorted(by_number):
            unique_by_color: List[Tile] = []
            seen_colors = set()
            for tile in by_number[number]:
                if tile.color not in seen_colors:
                    seen_colors.add(tile.color)
                    unique_by_color.append(tile)

            if len(unique_by_color) >= 3:
                self.try_play_set(unique_by_color[:3])
            elif len(unique_by_color) == 2:
                joker = next((t for t in self.hand if t.is_joker), None)
                if joker is not None:
                    self.try_play_set(unique_by_color + [joker])

    def run_pass(self) -> None:
        for color in PLAYABLE_COLORS:
            self._play_first_run(color)

    def _play_first_run(self, color: TileColor) -> None:
        color_tiles = sorted((t for t in self.hand if t.color == color), key=lambda t: t.number)
        for i, first in enumerate(color_tiles):
            run = [first]
            for tile in color_tiles[i + 1 :]:
                if tile.number == run[-1].number + 1:
                    run.append(tile)
                elif tile.number > run[-1].number + 1:
                    break
            if len(run) >= 3 and self.try_play_set(run):
                return

    def extension_pass(self) -> None:
        while self._extend_once():
            pass

    def _extend_once(self) -> bool:
        for set_index, board_set in enumerate(self.board):
            for hand_index, tile in enumerate(self.hand):
                candidate = board_set + [tile]
                if is_valid_set(candidate, self.ruleset):
                    self.board[set_index] = candidate
                    del self.hand[hand_index]
                    self.made_move = True
                    logger.debug("extended set %d with %s", set_index, tile.label())
                    return True
        return False


def ai_play_turn(
    hand: Sequence[Tile],
    board: Sequence[Sequence[Tile]],
    has_meld: bool,
    ruleset: Ruleset | None = None,
) -> TurnResult:
    """Greedy automated turn: groups, then runs, then extensions of board sets.

    New sets are only committed once the player has melded or the points
    placed this turn reach the initial meld threshold. Board extension runs
    only when the player has melded, before or during this turn. The inputs
    are not mutated.
    """
    turn = _GreedyTurn(hand, board, has_meld, ruleset or DEFAULT_RULES)
    turn.group_pass()
    turn.run_pass()
    if turn.has_meld:
        turn.extension_pass()
    return TurnResult(turn.hand, turn.board, turn.made_move, turn.turn_points)
