"""
Evaluation Module

Position evaluation for the search. Evaluators are swappable: the search
works with anything implementing the Evaluator interface.

Key Components:
    - Evaluator (ABC): Abstract base class defining the evaluation interface
    - ClassicalEvaluator: Material, piece-square tables and structural terms

Data Flow:
    chess.Board -> evaluator.evaluate() -> int (centipawns)
                                           Positive = White advantage
                                           Negative = Black advantage
"""

from ch3ss.evaluation.base import Evaluator, MATE_SCORE, DRAW_SCORE
from ch3ss.evaluation.classical import ClassicalEvaluator

__all__ = ['Evaluator', 'ClassicalEvaluator', 'MATE_SCORE', 'DRAW_SCORE']
