import numpy as np
import pytest

from tetris_autoplay.ai import AutoPlayConfig, AutoPlayer, Decision, HeuristicEvaluator, find_best_move, generate_moves
from tetris_autoplay.game import Action, GameConfig, Piece, TetrisGame, TetrominoType, as_occupancy


def test_planned_sequences_land_where_predicted():
    game = TetrisGame(GameConfig(random_seed=7))
    evaluator = HeuristicEvaluator()
    checked = 0
    while checked < 12 and not game.game_over:
        snapshot = game.snapshot()
        decision = find_best_move(snapshot)
        if decision.is_hold:
            game.step(Action.HOLD)
            continue
        piece = snapshot.current_piece
        predicted = [
            m
            for m in generate_moves(as_occupancy(snapshot.board), piece.matrix, piece.x)
            if m.actions == decision.full_action_sequence
            and evaluator.score(m.board, m.lines_cleared) == decision.score
        ]
        assert predicted

        for action in decision.full_action_sequence:
            game.step(action)

        assert np.array_equal(as_occupancy(game.grid.grid), predicted[0].board)
        checked += 1
    assert checked == 12


def test_run_plays_requested_number_of_pieces():
    player = AutoPlayer(TetrisGame(GameConfig(random_seed=1)))
    stats = player.run(40)
    assert stats.pieces == 40
    assert not stats.game_over
    assert stats.decisions >= 40
    assert stats.lines > 0


def test_first_action_only_play_still_places_pieces():
    player = AutoPlayer(
        TetrisGame(GameConfig(random_seed=2)),
        play_config=AutoPlayConfig(execute_full_sequence=False),
    )
    stats = player.run(8)
    assert stats.pieces == 8
    assert stats.decisions >= stats.pieces


def test_hold_decisions_are_counted():
    game = TetrisGame(GameConfig(random_seed=5))
    player = AutoPlayer(game)
    player.apply(Decision(action=Action.HOLD))
    assert player.holds == 1
    assert game.hold_piece is not None


def test_deferred_decision_matches_direct_call():
    game = TetrisGame(GameConfig(random_seed=9))
    with AutoPlayer(game) as player:
        expected = find_best_move(game.snapshot())
        future = player.request_decision()
        assert future.result(timeout=10) == expected


def test_next_request_waits_until_decision_is_applied():
    game = TetrisGame(GameConfig(random_seed=9))
    with AutoPlayer(game) as player:
        decision = player.request_decision().result(timeout=10)
        assert player.processing
        with pytest.raises(RuntimeError):
            player.request_decision()

        player.apply(decision)
        assert not player.processing
        assert player.request_decision().result(timeout=10) == find_best_move(game.snapshot())


def test_failed_decision_releases_the_request(monkeypatch):
    def broken(snapshot, config=None):
        raise ValueError("boom")

    monkeypatch.setattr("tetris_autoplay.ai.autoplay.find_best_move", broken)
    with AutoPlayer(TetrisGame(GameConfig(random_seed=9))) as player:
        with pytest.raises(ValueError):
            player.request_decision().result(timeout=10)
        assert not player.processing


def test_only_one_decision_in_flight():
    game = TetrisGame(GameConfig(random_seed=9))
    with AutoPlayer(game) as player:
        player.processing = True
        with pytest.raises(RuntimeError):
            player.request_decision()


def test_finished_game_is_not_played():
    game = TetrisGame(GameConfig(random_seed=4))
    game.game_over = True
    player = AutoPlayer(game)
    assert not player.play_piece()
    stats = player.run(10)
    assert stats.game_over
    assert stats.pieces == 0
    assert stats.decisions == 0


def tall_column_game():
    """Four rows open only at column 0, and a column rising next to the spawn column."""
    game = TetrisGame(GameConfig(random_seed=7))
    game.grid.grid[16:, 1:] = 2
    game.grid.grid[1:, 3] = 4
    game.current_piece = Piece.spawn(TetrominoType.I, 10)
    return game


def test_every_candidate_lands_where_predicted_beside_tall_column():
    snapshot = tall_column_game().snapshot()
    piece = snapshot.current_piece
    moves = generate_moves(as_occupancy(snapshot.board), piece.matrix, piece.x)
    assert moves
    # The rotated I is nudged to column 4 and cannot pass the column at 3
    assert not [m for m in moves if m.rotation % 2 == 1 and m.x < 4]

    for move in moves:
        game = tall_column_game()
        for action in move.actions:
            game.step(action)
        assert game.pieces_placed == 1
        assert np.array_equal(as_occupancy(game.grid.grid), move.board)


def test_chosen_sequence_lands_where_predicted_beside_tall_column():
    game = tall_column_game()
    snapshot = game.snapshot()
    decision = find_best_move(snapshot)
    piece = snapshot.current_piece
    predicted = [
        m
        for m in generate_moves(as_occupancy(snapshot.board), piece.matrix, piece.x)
        if m.actions == decision.full_action_sequence
    ]
    assert predicted

    for action in decision.full_action_sequence:
        game.step(action)
    assert np.array_equal(as_occupancy(game.grid.grid), predicted[0].board)
    assert game.lines == predicted[0].lines_cleared
