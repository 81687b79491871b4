"""
Unit Tests for the AI Worker and Engine Configuration
"""

from pathlib import Path
from unittest.mock import patch

import chess
import pytest
from ch3ss.config import DIFFICULTY_DEPTHS, EngineConfig
from ch3ss.search.transposition import NodeType
from ch3ss.worker import AIWorker

MATE_IN_ONE = "6k1/5ppp/8/8/8/8/8/R6K w - - 0 1"
FOOLS_MATE_SETUP = "rnbqkbnr/pppp1ppp/8/4p3/6P1/5P2/PPPPP2P/RNBQKBNR b KQkq - 0 2"


@pytest.fixture
def worker():
    return AIWorker(EngineConfig(depth=2, seed=42))


class TestAIWorker:
    """Tests for message handling."""

    def test_book_move_for_starting_position(self, worker):
        reply = worker.handle_message({"fen": chess.STARTING_FEN, "depth": 3})

        move = chess.Move.from_uci(reply["from"] + reply["to"])
        assert move.uci() in [
            "e2e4", "d2d4", "g1f3", "c2c4", "g2g3",
            "b1c3", "b2b3", "f2f4", "e2e3", "d2d3",
        ]
        assert reply["promotion"] is None
        assert worker.session.stats.nodes == 0, "Book hits do not search"

    def test_search_outside_book(self, worker):
        reply = worker.handle_message({"fen": MATE_IN_ONE, "depth": 2, "ai_color": "white"})

        assert reply == {"from": "a1", "to": "a8", "promotion": None}

    def test_default_depth_from_config(self, worker):
        reply = worker.handle_message({"fen": MATE_IN_ONE})

        assert reply == {"from": "a1", "to": "a8", "promotion": None}

    def test_black_to_move(self, worker):
        reply = worker.handle_message({"fen": FOOLS_MATE_SETUP, "depth": 1, "ai_color": "black"})

        assert reply == {"from": "d8", "to": "h4", "promotion": None}

    def test_promotion_reply(self, worker):
        reply = worker.handle_message({"fen": "4k3/1P6/8/8/8/8/8/4K3 w - - 0 1", "depth": 1})

        assert reply == {"from": "b7", "to": "b8", "promotion": "q"}

    def test_book_disabled(self):
        worker = AIWorker(EngineConfig(depth=1, use_opening_book=False))
        board = chess.Board()

        reply = worker.handle_message({"fen": board.fen()})

        assert worker.book is None
        assert chess.Move.from_uci(reply["from"] + reply["to"]) in board.legal_moves
        assert worker.session.stats.nodes > 0

    def test_no_legal_moves(self, worker):
        board = chess.Board(FOOLS_MATE_SETUP)
        board.push_san("Qh4#")

        assert worker.handle_message({"fen": board.fen(), "depth": 2}) is None

    @pytest.mark.parametrize("message", [
        {},
        {"fen": ""},
        {"fen": "not a fen"},
        {"fen": MATE_IN_ONE, "depth": 0},
        {"fen": MATE_IN_ONE, "ai_color": "purple"},
        {"fen": MATE_IN_ONE, "depth": None},
        {"fen": MATE_IN_ONE, "depth": "deep"},
        {"fen": MATE_IN_ONE, "ai_color": 1},
        {"fen": 42},
    ])
    def test_invalid_messages(self, worker, message):
        with pytest.raises(ValueError):
            worker.handle_message(message)

    def test_post_delivers_reply(self, worker):
        replies = []

        thread = worker.post({"fen": MATE_IN_ONE, "depth": 1}, replies.append)
        thread.join(timeout=30.0)

        assert replies == [{"from": "a1", "to": "a8", "promotion": None}]

    def test_post_reports_errors(self, worker):
        replies = []

        thread = worker.post({"depth": 2}, replies.append)
        thread.join(timeout=30.0)

        assert len(replies) == 1
        assert "error" in replies[0]

    @pytest.mark.parametrize("message", [
        {"fen": MATE_IN_ONE, "depth": None},
        {"fen": MATE_IN_ONE, "ai_color": 1},
        ["not", "a", "dict"],
    ])
    def test_post_always_answers(self, worker, message):
        replies = []

        thread = worker.post(message, replies.append)
        thread.join(timeout=30.0)

        assert len(replies) == 1
        assert set(replies[0]) == {"error"}

    def test_post_reports_search_failure(self, worker):
        replies = []

        with patch("ch3ss.worker.find_best_move", side_effect=RuntimeError("search exploded")):
            thread = worker.post({"fen": MATE_IN_ONE, "depth": 1}, replies.append)
            thread.join(timeout=30.0)

        assert replies == [{"error": "search exploded"}]

    def test_new_game_clears_cache(self, worker):
        worker.session.transposition_table.store(1, 3, 0, NodeType.EXACT)

        worker.new_game()

        assert len(worker.session.transposition_table) == 0


class TestEngineConfig:
    """Tests for configuration defaults and validation."""

    def test_defaults(self):
        config = EngineConfig()

        assert config.depth == 3
        assert config.max_quiescence_plies == 3
        assert config.node_limit is None
        assert config.use_opening_book
        assert config.jitter == 0
        assert config.log_file is None

    def test_log_file_becomes_path(self):
        config = EngineConfig(log_file="engine.log")

        assert config.log_file == Path("engine.log")

    @pytest.mark.parametrize("difficulty", sorted(DIFFICULTY_DEPTHS))
    def test_for_difficulty(self, difficulty):
        config = EngineConfig.for_difficulty(difficulty)

        assert config.depth == DIFFICULTY_DEPTHS[difficulty]

    def test_for_difficulty_overrides(self):
        config = EngineConfig.for_difficulty("hard", jitter=5, use_opening_book=False)

        assert config.depth == 3
        assert config.jitter == 5
        assert not config.use_opening_book

    def test_unknown_difficulty(self):
        with pytest.raises(ValueError):
            EngineConfig.for_difficulty("impossible")

    @pytest.mark.parametrize("overrides", [
        {"depth": 0},
        {"max_quiescence_plies": -1},
        {"node_limit": 0},
        {"tt_size": 0},
        {"jitter": -2},
    ])
    def test_validation(self, overrides):
        with pytest.raises(ValueError):
            EngineConfig(**overrides)
