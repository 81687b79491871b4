"""
Abstract Evaluator Interface

This module defines the abstract base class for all position evaluators.
By defining a common interface, the search can be run with any evaluator
without modifying it.

Key Principles:
    1. evaluate() never mutates the board
    2. evaluate() always returns centipawns from White's perspective
    3. Positive = White advantage, Negative = Black advantage
    4. Checkmate positions return +/-MATE_SCORE, draws return DRAW_SCORE

Convention:
    - Material values in centipawns (pawn = 100, queen = 900)
    - Scores are integers
"""

from abc import ABC, abstractmethod
import chess
from typing import Optional

from ch3ss.board.representation import is_draw


# Evaluation constants
MATE_SCORE = 10000  # Side to move is checkmated
DRAW_SCORE = 0
INFINITY = 1000000  # Wider than any reachable score, used as search window


class Evaluator(ABC):
    """
    Abstract base class for position evaluation.

    All evaluator implementations must inherit from this class and implement
    the evaluate() method.
    """

    @abstractmethod
    def evaluate(self, board: chess.Board) -> int:
        """
        Evaluate a chess position from White's perspective.

        Args:
            board: python-chess Board object to evaluate

        Returns:
            int: Evaluation in centipawns
        """
        pass

    def evaluate_relative(self, board: chess.Board) -> int:
        """Evaluation seen from the side to move (negamax convention)."""
        score = self.evaluate(board)
        return score if board.turn == chess.WHITE else -score

    def is_draw(self, board: chess.Board) -> bool:
        """Check if position is a draw by rule."""
        return is_draw(board)

    def evaluate_terminal(self, board: chess.Board) -> Optional[int]:
        """
        Evaluate terminal positions (checkmate, stalemate, draw).

        Returns:
            int: Evaluation if terminal position
            None: If position is not terminal
        """
        if board.is_checkmate():
            # The side to move is the one that is mated
            if board.turn == chess.WHITE:
                return -MATE_SCORE
            return MATE_SCORE

        if self.is_draw(board):
            return DRAW_SCORE

        return None

    def __repr__(self) -> str:
        """String representation of evaluator."""
        return f"{self.__class__.__name__}()"
