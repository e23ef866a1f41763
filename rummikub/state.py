from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .rules import Ruleset
from .tiles import Tile, create_deck


@dataclass
class GameState:
    ruleset: Ruleset
    hands: List[List[Tile]]
    board: List[List[Tile]]
    pool: List[Tile]
    current_player: int
    has_meld: List[bool]
    turn_number: int = 0
    winner: Optional[int] = None
    message: str = ""
    rng_seed: Optional[int] = None

    def copy(self) -> "GameState":
        # tiles are immutable, only the containers need copying
        return GameState(
            ruleset=self.ruleset,
            hands=[list(h) for h in self.hands],
            board=[list(s) for s in self.board],
            pool=list(self.pool),
            current_player=self.current_player,
            has_meld=list(self.has_meld),
            turn_number=self.turn_number,
            winner=self.winner,
            message=self.message,
            rng_seed=self.rng_seed,
        )

    def tile_count(self) -> int:
        return len(self.pool) + sum(len(h) for h in self.hands) + sum(len(s) for s in self.board)

    @property
    def current_hand(self) -> List[Tile]:
        return self.hands[self.current_player]


@dataclass(frozen=True)
class TurnSnapshot:
    """Value copy of the active player's hand and the board at turn start.

    The pool and the other hands are deliberately left out: undo only rolls
    back what the active player did during this turn.
    """

    player: int
    hand: Tuple[Tile, ...]
    board: Tuple[Tuple[Tile, ...], ...]

    @classmethod
    def capture(cls, state: GameState) -> "TurnSnapshot":
        return cls(
            player=state.current_player,
            hand=tuple(state.current_hand),
            board=tuple(tuple(s) for s in state.board),
        )

    def restore(self, state: GameState) -> None:
        state.hands[self.player] = list(self.hand)
        state.board = [list(s) for s in self.board]


def deal(deck: List[Tile], ruleset: Ruleset) -> Tuple[List[List[Tile]], List[Tile]]:
    size = ruleset.initial_hand_size
    hands = [deck[i * size : (i + 1) * size] for i in range(ruleset.num_players)]
    pool = deck[ruleset.num_players * size :]
    return hands, pool


def new_game(ruleset: Ruleset | None = None, rng_seed: Optional[int] = None) -> GameState:
    ruleset = ruleset or Ruleset()
    rng = random.Random(rng_seed)
    hands, pool = deal(create_deck(ruleset, rng), ruleset)
    return GameState(
        ruleset=ruleset,
        hands=hands,
        board=[],
        pool=pool,
        current_player=0,
        has_meld=[False] * ruleset.num_players,
        rng_seed=rng_seed,
    )
