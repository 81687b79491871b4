"""
AI Worker

Answers move requests for a host application without blocking it. A
request is a message {"fen": ..., "depth": ..., "ai_color": "white"|"black"};
the reply is {"from": "e2", "to": "e4", "promotion": None} or None when the
side to move has no legal move.

Book positions are answered straight from the opening book; everything
else goes through find_best_move().
"""

import logging
import random
import threading
from typing import Any, Callable, Dict, Optional

import chess

from ch3ss.board.representation import move_to_dict, parse_color
from ch3ss.book.opening import OpeningBook
from ch3ss.config import EngineConfig
from ch3ss.evaluation.base import Evaluator
from ch3ss.evaluation.classical import ClassicalEvaluator
from ch3ss.search.minimax import find_best_move
from ch3ss.search.session import SearchSession

logger = logging.getLogger(__name__)


class AIWorker:
    """
    Move source combining the opening book and the search.

    Attributes:
        config: Engine configuration
        evaluator: Position evaluator used by the search
        book: Opening book (None when disabled)
        session: Search session reused across requests
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        evaluator: Optional[Evaluator] = None,
        book: Optional[OpeningBook] = None,
        session: Optional[SearchSession] = None,
    ):
        self.config = config if config is not None else EngineConfig()

        if evaluator is None:
            evaluator = ClassicalEvaluator(
                jitter=self.config.jitter,
                seed=self.config.seed,
                mobility_weight=self.config.mobility_weight,
                bishop_pair_bonus=self.config.bishop_pair_bonus,
                king_safety_bonus=self.config.king_safety_bonus,
                doubled_pawn_penalty=self.config.doubled_pawn_penalty,
            )
        self.evaluator = evaluator

        if book is None and self.config.use_opening_book:
            book = OpeningBook(rng=random.Random(self.config.seed))
        self.book = book

        if session is None:
            session = SearchSession(
                tt_size=self.config.tt_size,
                node_limit=self.config.node_limit,
                max_quiescence_plies=self.config.max_quiescence_plies,
                clear_tt=self.config.clear_tt_between_searches,
            )
        self.session = session

        # One search at a time per session
        self._lock = threading.Lock()

        logger.info("AI worker initialized with MVV-LVA + killer moves")

    def handle_message(self, message: Dict[str, Any]) -> Optional[Dict[str, Optional[str]]]:
        """
        Compute a move for a request message.

        Args:
            message: {"fen": str, "depth": int (optional, config default),
                      "ai_color": "white" | "black" (optional, side to move)}

        Returns:
            Coordinate-notation move dict, or None if there is no move

        Raises:
            ValueError: Missing/invalid FEN, depth or color
        """
        if not isinstance(message, dict):
            raise ValueError(f"Message must be a dict, got {type(message).__name__}")

        fen = message.get("fen")
        if not fen:
            raise ValueError("Message has no 'fen'")
        if not isinstance(fen, str):
            raise ValueError(f"'fen' must be a string, got {fen!r}")
        board = chess.Board(fen)

        raw_depth = message.get("depth", self.config.depth)
        try:
            depth = int(raw_depth)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid depth: {raw_depth!r}") from None
        if depth < 1:
            raise ValueError(f"depth must be at least 1, got {depth}")

        color = message.get("ai_color")
        if color is None:
            side = board.turn
        elif isinstance(color, str):
            side = parse_color(color)
        else:
            raise ValueError(f"'ai_color' must be 'white' or 'black', got {color!r}")

        if self.book is not None:
            book_move = self.book.choose(board)
            if book_move is not None:
                logger.info(f"Book move: {book_move.uci()}")
                return move_to_dict(book_move)

        with self._lock:
            best_move, score, stats = find_best_move(
                board, depth, self.evaluator, self.session, side=side
            )

        if best_move is None:
            logger.info("No legal moves available")
            return None

        logger.info(f"Best move found: {board.san(best_move)} eval: {score} ({stats})")
        return move_to_dict(best_move)

    def post(
        self,
        message: Dict[str, Any],
        callback: Callable[[Optional[Dict[str, Optional[str]]]], None],
    ) -> threading.Thread:
        """
        Handle a message on a background thread.

        The callback always runs: with the reply, or with {"error": "..."}
        if the message was invalid or the search failed.
        """

        def run():
            try:
                reply = self.handle_message(message)
            except ValueError as e:
                logger.error(f"Rejected message {message!r}: {e}")
                reply = {"error": str(e)}
            except Exception as e:
                logger.error(f"Worker error on {message!r}: {e}", exc_info=True)
                reply = {"error": str(e)}
            callback(reply)

        thread = threading.Thread(target=run, daemon=True)
        thread.start()
        return thread

    def new_game(self):
        """Forget cached search results."""
        with self._lock:
            self.session.reset()
