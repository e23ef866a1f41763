import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rummikub.engine import GameSession, resolve_ai_turn
from rummikub.hand import sort_hand
from rummikub.rules import Ruleset
from rummikub.state import TurnSnapshot, new_game
from rummikub.tiles import Tile, TileColor

R, B, O, K = TileColor.RED, TileColor.BLUE, TileColor.ORANGE, TileColor.BLACK


def t(color, number, copy=0):
    return Tile.numbered(color, number, copy)


def _ids(tiles):
    return [tile.id for tile in tiles]


def _session(hand, human_players=(0,), seed=1):
    session = GameSession(ruleset=Ruleset(), rng_seed=seed, human_players=human_players)
    session.state.hands[0] = list(hand)
    session.snapshot = TurnSnapshot.capture(session.state)
    return session


def test_new_session_deals_hands_and_pool():
    session = GameSession(rng_seed=4)
    state = session.state

    assert [len(h) for h in state.hands] == [14, 14, 14, 14]
    assert len(state.pool) == 50
    assert state.tile_count() == 106
    assert state.current_player == 0
    assert session.is_human_turn
    assert session.snapshot is not None


def test_new_game_is_reproducible_with_seed():
    first = new_game(rng_seed=12)
    second = new_game(rng_seed=12)
    assert [_ids(h) for h in first.hands] == [_ids(h) for h in second.hands]
    assert _ids(first.pool) == _ids(second.pool)


def test_play_new_set_requires_three_tiles():
    session = _session([t(R, 10), t(B, 10), t(O, 10)])
    with pytest.raises(ValueError, match="At least 3 tiles required"):
        session.play_new_set(_ids([t(R, 10), t(B, 10)]))


def test_invalid_set_is_rejected_without_changes():
    hand = [t(R, 10), t(B, 10), t(K, 1)]
    session = _session(hand)

    with pytest.raises(ValueError, match="Invalid group or run!"):
        session.play_new_set(_ids(hand))

    assert session.state.hands[0] == hand
    assert session.state.board == []


def test_tiles_must_be_in_hand():
    session = _session([t(R, 10), t(B, 10)])
    with pytest.raises(ValueError, match="not in hand"):
        session.play_new_set(_ids([t(R, 10), t(B, 10), t(O, 10)]))


def test_end_turn_requires_initial_meld():
    hand = [t(R, 1), t(B, 1), t(O, 1), t(K, 9)]
    session = _session(hand)

    points = session.play_new_set(_ids(hand[:3]))

    assert points == 3
    assert session.state.message == "Meld progress: 3/30"
    with pytest.raises(ValueError, match="Need 30pts! Current: 3"):
        session.end_turn()
    with pytest.raises(ValueError, match="Can't draw after playing tiles!"):
        session.draw()


def test_undo_restores_hand_and_board():
    hand = [t(R, 1), t(B, 1), t(O, 1), t(K, 9)]
    session = _session(hand)
    session.play_new_set(_ids(hand[:3]))

    session.undo()

    assert session.state.hands[0] == hand
    assert session.state.board == []
    assert session.turn_points == 0
    assert session.turn_tiles_played == []
    with pytest.raises(ValueError, match="Draw if you don't play."):
        session.end_turn()


def test_snapshot_only_covers_active_hand_and_board():
    state = new_game(rng_seed=3)
    snapshot = TurnSnapshot.capture(state)
    hand_before = list(state.hands[0])

    state.hands[0].pop()
    state.board.append([t(R, 1), t(R, 2), t(R, 3)])
    drawn = state.pool.pop()
    state.hands[1].append(drawn)

    snapshot.restore(state)

    assert state.hands[0] == hand_before
    assert state.board == []
    assert len(state.pool) == 49
    assert state.hands[1][-1] == drawn


def test_opening_meld_then_end_turn():
    hand = [t(R, 10), t(B, 10), t(O, 10), t(K, 1)]
    session = _session(hand)

    session.play_new_set(_ids(hand[:3]))
    assert session.state.message == "Meld progress: 30/30"
    session.end_turn()

    assert session.state.has_meld[0] is True
    assert session.state.current_player == 1
    assert session.state.turn_number == 1
    assert session.snapshot is None


def test_add_to_set_requires_meld():
    session = _session([t(R, 4), t(K, 9)])
    session.state.board = [[t(R, 1), t(R, 2), t(R, 3)]]

    with pytest.raises(ValueError, match="Meld 30pts first!"):
        session.add_to_set(0, [t(R, 4).id])


def test_add_to_set_after_meld():
    session = _session([t(R, 4), t(K, 9)])
    session.state.board = [[t(R, 1), t(R, 2), t(R, 3)]]
    session.state.has_meld[0] = True

    session.add_to_set(0, [t(R, 4).id])

    assert _ids(session.state.board[0]) == _ids([t(R, 1), t(R, 2), t(R, 3), t(R, 4)])
    assert session.state.hands[0] == [t(K, 9)]
    assert session.state.message == "Added to board."
    with pytest.raises(ValueError, match="Invalid addition!"):
        session.add_to_set(0, [t(K, 9).id])
    with pytest.raises(ValueError, match="No set at position 5"):
        session.add_to_set(5, [t(K, 9).id])


def test_add_to_own_opening_set_in_same_turn():
    hand = [t(R, 10), t(B, 10), t(O, 10), t(K, 10), t(K, 1)]
    session = _session(hand)

    session.play_new_set(_ids(hand[:3]))
    session.add_to_set(0, [t(K, 10).id])

    assert len(session.state.board[0]) == 4
    session.end_turn()
    assert session.state.has_meld[0] is True


def test_emptying_hand_wins():
    hand = [t(R, 10), t(B, 10), t(O, 10)]
    session = _session(hand)

    session.play_new_set(_ids(hand))

    assert session.state.winner == 0
    assert session.state.message == "Victory!"
    with pytest.raises(ValueError, match="Game is over"):
        session.draw()


def test_emptying_hand_below_threshold_does_not_win():
    hand = [t(R, 1), t(B, 1), t(O, 1)]
    session = _session(hand)
    session.play_new_set(_ids(hand))
    assert session.state.winner is None


def test_draw_takes_last_pool_tile_and_passes_turn():
    session = GameSession(rng_seed=2)
    expected = session.state.pool[-1]

    tile = session.draw()

    assert tile == expected
    assert session.state.hands[0][-1] == expected
    assert len(session.state.pool) == 49
    assert session.state.current_player == 1
    assert session.state.tile_count() == 106
    with pytest.raises(ValueError, match="Not your turn!"):
        session.play_new_set([])


def test_draw_from_empty_pool_is_rejected():
    session = GameSession(rng_seed=2)
    session.state.pool = []
    with pytest.raises(ValueError, match="Pool empty! Must end turn."):
        session.draw()


def test_sort_hand_reorders_current_hand():
    session = GameSession(rng_seed=5)
    expected = sort_hand(session.state.hands[0], "color")
    assert session.sort_hand("color") == expected
    assert session.state.hands[0] == expected


def test_ai_turn_commits_play():
    session = _session([t(R, 10), t(B, 10), t(O, 10), t(K, 1)], human_players=())

    assert session.play_ai_turn()

    state = session.state
    assert [_ids(s) for s in state.board] == [_ids([t(R, 10), t(B, 10), t(O, 10)])]
    assert state.hands[0] == [t(K, 1)]
    assert state.has_meld[0] is True
    assert state.current_player == 1
    assert state.message == "Player 0 moved."


def test_ai_turn_draws_without_move():
    session = _session([t(R, 1), t(B, 5)], human_players=())
    expected = session.state.pool[-1]

    session.play_ai_turn()

    assert session.state.hands[0] == [t(R, 1), t(B, 5), expected]
    assert session.state.message == "Player 0 drew."
    assert session.state.has_meld[0] is False


def test_ai_turn_passes_on_empty_pool():
    session = _session([t(R, 1), t(B, 5)], human_players=())
    session.state.pool = []

    session.play_ai_turn()

    assert session.state.hands[0] == [t(R, 1), t(B, 5)]
    assert session.state.message == "Player 0 passed."
    assert session.state.current_player == 1


def test_ai_turn_can_win():
    session = _session([t(R, 10), t(B, 10), t(O, 10)], human_players=())

    session.play_ai_turn()

    assert session.state.winner == 0
    assert session.state.current_player == 0
    with pytest.raises(ValueError, match="Game is over"):
        session.begin_ai_turn()


def test_stale_ai_result_is_discarded_after_reset():
    session = GameSession(rng_seed=3, human_players=())
    token = session.begin_ai_turn()
    computed = resolve_ai_turn(session.state)

    session.reset(rng_seed=8)

    assert not session.commit_ai_turn(token, computed)
    assert session.state is not computed
    assert session.generation == 1
    assert session.state.turn_number == 0


def test_begin_ai_turn_rejects_human_seat():
    session = GameSession(rng_seed=3)
    with pytest.raises(ValueError, match="Not an automated player's turn"):
        session.begin_ai_turn()


def test_resolve_ai_turn_leaves_input_untouched():
    state = new_game(rng_seed=5)
    before = state.copy()

    resolve_ai_turn(state)

    assert state.hands == before.hands
    assert state.board == before.board
    assert state.pool == before.pool
    assert state.current_player == before.current_player


def test_round_trip_back_to_human_conserves_tiles():
    session = GameSession(rng_seed=6)
    session.draw()
    while session.state.winner is None and not session.is_human_turn:
        assert session.play_ai_turn()

    assert session.state.tile_count() == 106
    if session.state.winner is None:
        assert session.state.current_player == 0
        assert session.snapshot is not None
