from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .ai import ai_play_turn
from .hand import find_tiles, remove_tiles, sort_hand
from .meld import calculate_set_points, check_set, is_valid_set
from .rules import Ruleset
from .state import GameState, TurnSnapshot, new_game
from .tiles import Tile

logger = logging.getLogger(__name__)


def _advance_player(state: GameState) -> None:
    state.current_player = (state.current_player + 1) % state.ruleset.num_players
    state.turn_number += 1


def resolve_ai_turn(state: GameState) -> GameState:
    """Play the current player's turn automatically and return the resulting state.

    When no set can be played the player draws from the pool, or passes once
    the pool is empty. ``state`` itself is left untouched.
    """
    new_state = state.copy()
    player = new_state.current_player
    result = ai_play_turn(new_state.hands[player], new_state.board, new_state.has_meld[player], new_state.ruleset)

    hand = result.new_hand
    new_state.board = result.new_board
    if result.made_move:
        new_state.has_meld[player] = True
        new_state.message = f"Player {player} moved."
    elif new_state.pool:
        hand.append(new_state.pool.pop())
        new_state.message = f"Player {player} drew."
    else:
        new_state.message = f"Player {player} passed."
    new_state.hands[player] = hand

    if not hand:
        new_state.winner = player
        new_state.message = f"Player {player} wins!"
    else:
        _advance_player(new_state)
    return new_state


class GameSession:
    """Holds one game and applies player actions to it turn by turn.

    Seats listed in ``human_players`` act through the action methods; every
    other seat is played by ``resolve_ai_turn``. Illegal actions raise
    ``ValueError`` and leave the game unchanged.
    """

    def __init__(
        self,
        ruleset: Optional[Ruleset] = None,
        rng_seed: Optional[int] = None,
        human_players: Iterable[int] = (0,),
    ) -> None:
        self.ruleset = ruleset or Ruleset()
        self.human_players = frozenset(human_players)
        self.generation = 0
        self.state = new_game(self.ruleset, rng_seed)
        self._start_turn()

    # --- turn bookkeeping ---------------------------------------------------

    def _start_turn(self) -> None:
        self.turn_points = 0
        self.turn_tiles_played: List[Tile] = []
        self._ai_player: Optional[int] = None
        self.snapshot: Optional[TurnSnapshot] = None
        if self.state.winner is None and self.is_human_turn:
            self.snapshot = TurnSnapshot.capture(self.state)

    def _end_turn(self) -> None:
        _advance_player(self.state)
        logger.info("turn %d: player %d to play", self.state.turn_number, self.state.current_player)
        self._start_turn()

    def _declare_winner(self, player: int) -> None:
        self.state.winner = player
        self.state.message = "Victory!"
        logger.info("player %d wins after %d turns", player, self.state.turn_number)

    def _require_human_turn(self) -> int:
        if self.state.winner is not None:
            raise ValueError("Game is over")
        if not self.is_human_turn:
            raise ValueError("Not your turn!")
        return self.state.current_player

    @property
    def is_human_turn(self) -> bool:
        return self.state.current_player in self.human_players

    @property
    def threshold(self) -> int:
        return self.ruleset.initial_meld_min_points

    def reset(self, rng_seed: Optional[int] = None) -> None:
        self.generation += 1
        self.state = new_game(self.ruleset, rng_seed)
        self._start_turn()
        logger.info("new game started (generation %d)", self.generation)

    # --- human actions ------------------------------------------------------

    def draw(self) -> Tile:
        player = self._require_human_turn()
        if self.turn_tiles_played:
            raise ValueError("Can't draw after playing tiles!")
        if not self.state.pool:
            raise ValueError("Pool empty! Must end turn.")
        tile = self.state.pool.pop()
        self.state.hands[player].append(tile)
        self.state.message = "You drew a tile."
        logger.info("player %d drew", player)
        self._end_turn()
        return tile

    def play_new_set(self, tile_ids: Iterable[str]) -> int:
        player = self._require_human_turn()
        ids = list(dict.fromkeys(tile_ids))
        if len(ids) < self.ruleset.min_set_size:
            raise ValueError(f"At least {self.ruleset.min_set_size} tiles required!")
        hand = self.state.hands[player]
        tiles = find_tiles(hand, ids)
        ok, reason = check_set(tiles, self.ruleset)
        if not ok:
            logger.debug("rejected set %s: %s", [t.label() for t in tiles], reason)
            raise ValueError("Invalid group or run!")

        points = calculate_set_points(tiles)
        self.state.hands[player] = remove_tiles(hand, tiles)
        self.state.board.append(tiles)
        self.turn_points += points
        self.turn_tiles_played.extend(tiles)
        if self.state.has_meld[player]:
            self.state.message = "Played a set!"
        else:
            self.state.message = f"Meld progress: {self.turn_points}/{self.threshold}"

        if not self.state.hands[player] and (self.state.has_meld[player] or self.turn_points >= self.threshold):
            self._declare_winner(player)
        return points

    def add_to_set(self, set_index: int, tile_ids: Iterable[str]) -> None:
        player = self._require_human_turn()
        ids = list(dict.fromkeys(tile_ids))
        if not ids:
            raise ValueError("No tiles selected!")
        if not self.state.has_meld[player] and self.turn_points < self.threshold:
            raise ValueError(f"Meld {self.threshold}pts first!")
        if not 0 <= set_index < len(self.state.board):
            raise ValueError(f"No set at position {set_index}")

        hand = self.state.hands[player]
        tiles = find_tiles(hand, ids)
        extended = self.state.board[set_index] + tiles
        if not is_valid_set(extended, self.ruleset):
            raise ValueError("Invalid addition!")

        self.state.hands[player] = remove_tiles(hand, tiles)
        self.state.board[set_index] = extended
        self.turn_tiles_played.extend(tiles)
        self.state.message = "Added to board."
        if not self.state.hands[player]:
            self._declare_winner(player)

    def undo(self) -> None:
        self._require_human_turn()
        if self.snapshot is None:
            return
        self.snapshot.restore(self.state)
        self.turn_points = 0
        self.turn_tiles_played = []
        self.state.message = "Turn undone."

    def end_turn(self) -> None:
        player = self._require_human_turn()
        if not self.turn_tiles_played:
            raise ValueError("Draw if you don't play.")
        if not self.state.has_meld[player] and self.turn_points < self.threshold:
            raise ValueError(f"Need {self.threshold}pts! Current: {self.turn_points}")
        if self.turn_points >= self.threshold:
            self.state.has_meld[player] = True
        self.state.message = "Turn ended."
        self._end_turn()

    def sort_hand(self, key: str = "number", player: Optional[int] = None) -> List[Tile]:
        player = self.state.current_player if player is None else player
        self.state.hands[player] = sort_hand(self.state.hands[player], key)
        return self.state.hands[player]

    # --- automated turns ----------------------------------------------------

    def begin_ai_turn(self) -> int:
        if self.state.winner is not None:
            raise ValueError("Game is over")
        if self.is_human_turn:
            raise ValueError("Not an automated player's turn")
        self._ai_player = self.state.current_player
        return self.generation

    def commit_ai_turn(self, token: int, new_state: GameState) -> bool:
        """Apply a computed automated turn unless the game moved on meanwhile."""
        if token != self.generation or self._ai_player != self.state.current_player:
            logger.warning("discarding stale automated turn (token %d, generation %d)", token, self.generation)
            return False
        self.state = new_state
        logger.info("turn %d: %s", self.state.turn_number, self.state.message)
        if self.state.winner is not None:
            logger.info("player %d wins after %d turns", self.state.winner, self.state.turn_number)
        self._start_turn()
        return True

    def play_ai_turn(self) -> bool:
        token = self.begin_ai_turn()
        return self.commit_ai_turn(token, resolve_ai_turn(self.state))
