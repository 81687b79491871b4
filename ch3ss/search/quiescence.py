"""
Quiescence Search

A fixed-depth search that stops in the middle of a capture sequence misjudges
the position (the horizon effect): it sees QxP but not PxQ. Quiescence
search keeps searching captures past the horizon until the position is
quiet, or until a small ply cap is reached.

Unlike the main search this is written in negamax form: scores are from the
side to move's point of view and each child result is negated.

Stand-pat:
    The side to move is never forced to capture, so the static evaluation
    is a lower bound on what it can achieve. If it already reaches beta the
    node fails high immediately.

Reference:
    https://www.chessprogramming.org/Quiescence_Search
"""

import chess

from ch3ss.board.representation import is_terminal
from ch3ss.evaluation.base import Evaluator
from ch3ss.search.ordering import order_captures
from ch3ss.search.session import SearchSession


def quiesce(
    board: chess.Board,
    alpha: int,
    beta: int,
    evaluator: Evaluator,
    session: SearchSession,
    plies: int = 0,
    max_plies: int = 3,
) -> int:
    """
    Capture-only search beyond the horizon.

    Args:
        board: Current position (modified in place, restored on return)
        alpha: Lower bound of the window, side-to-move perspective
        beta: Upper bound of the window, side-to-move perspective
        evaluator: Static evaluation
        session: Search session (statistics and node budget)
        plies: Capture plies already played in quiescence
        max_plies: Cap on capture plies

    Returns:
        int: Score in centipawns from the side to move's perspective
    """
    session.count_node(quiescence=True)

    stand_pat = evaluator.evaluate_relative(board)

    if is_terminal(board):
        return stand_pat

    if stand_pat >= beta:
        return beta
    if stand_pat > alpha:
        alpha = stand_pat

    if plies >= max_plies:
        return stand_pat

    for move in order_captures(board, board.generate_legal_captures()):
        board.push(move)
        try:
            score = -quiesce(
                board, -beta, -alpha, evaluator, session, plies + 1, max_plies
            )
        finally:
            board.pop()

        if score >= beta:
            return beta
        if score > alpha:
            alpha = score

    return alpha
