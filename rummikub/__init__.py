"""Rummikub rules engine and automated players."""

from .rules import Ruleset
from .tiles import Tile, TileColor, create_deck
from .meld import MeldKind, calculate_set_points, check_set, classify_set, is_valid_set
from .hand import sort_hand
from .ai import TurnResult, ai_play_turn
from .state import GameState, TurnSnapshot, new_game
from .engine import GameSession, resolve_ai_turn

__all__ = [
    "Ruleset",
    "Tile",
    "TileColor",
    "create_deck",
    "MeldKind",
    "calculate_set_points",
    "check_set",
    "classify_set",
    "is_valid_set",
    "sort_hand",
    "TurnResult",
    "ai_play_turn",
    "GameState",
    "TurnSnapshot",
    "new_game",
    "GameSession",
    "resolve_ai_turn",
]
