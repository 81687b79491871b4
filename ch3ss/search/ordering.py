"""
Move Ordering

Alpha-beta prunes the most when the best move is searched first. Ordering
never changes which move the search picks, only how fast it gets there.

Ordering Priority (highest first, ties keep generation order):
    1. Best move stored in the transposition table for this position
    2. Captures, by MVV-LVA (Most Valuable Victim - Least Valuable Aggressor)
    3. First killer move for this ply, then the second
    4. Quiet moves, nudged by promotion / check / castling / central pawn push

Reference:
    https://www.chessprogramming.org/Move_Ordering
"""

import chess
from typing import Iterable, List, Optional

from ch3ss.search.session import SearchSession

# Relative piece weights for MVV-LVA
MVV_LVA_VALUES = {
    chess.PAWN: 1,
    chess.KNIGHT: 3,
    chess.BISHOP: 3,
    chess.ROOK: 5,
    chess.QUEEN: 9,
    chess.KING: 0,
}

TT_MOVE_SCORE = 1000000
CAPTURE_SCORE = 100000
FIRST_KILLER_SCORE = 90000
SECOND_KILLER_SCORE = 80000

PROMOTION_BONUS = 800
CHECK_BONUS = 500
CASTLING_BONUS = 300
CENTER_PAWN_BONUS = 100

CENTER_FILES = (2, 3, 4, 5)  # c-f


def mvv_lva(board: chess.Board, move: chess.Move) -> int:
    """
    Score a capture as victim_value * 10 - attacker_value.

    Returns 0 for non-captures.
    """
    if board.is_en_passant(move):
        victim = chess.PAWN
    else:
        victim = board.piece_type_at(move.to_square)
        if victim is None:
            return 0

    attacker = board.piece_type_at(move.from_square)
    attacker_value = MVV_LVA_VALUES[attacker] if attacker else 0
    return MVV_LVA_VALUES[victim] * 10 - attacker_value


def quiet_bonus(board: chess.Board, move: chess.Move) -> int:
    """Small tie-break bonuses for quiet moves."""
    score = 0

    if move.promotion:
        score += PROMOTION_BONUS + MVV_LVA_VALUES[move.promotion]

    if board.gives_check(move):
        score += CHECK_BONUS

    if board.is_castling(move):
        score += CASTLING_BONUS

    if (
        board.piece_type_at(move.from_square) == chess.PAWN
        and chess.square_file(move.from_square) in CENTER_FILES
    ):
        score += CENTER_PAWN_BONUS

    return score


def order_moves(
    board: chess.Board,
    moves: Iterable[chess.Move],
    ply: int = 0,
    session: Optional[SearchSession] = None,
    tt_move: Optional[chess.Move] = None,
) -> List[chess.Move]:
    """
    Order moves to improve alpha-beta pruning efficiency.

    Args:
        board: Current board position
        moves: Legal moves to order
        ply: Distance from the root, selects the killer slots
        session: Search session holding the killer table
        tt_move: Best move from the transposition table, if any

    Returns:
        Sorted list of moves (most promising first)
    """
    if session is not None:
        first_killer, second_killer = session.killers.get(ply)
    else:
        first_killer = second_killer = None

    def move_score(move: chess.Move) -> int:
        if tt_move is not None and move == tt_move:
            return TT_MOVE_SCORE

        if board.is_capture(move):
            return CAPTURE_SCORE + mvv_lva(board, move)

        # Killers that are not legal here simply never match
        if move == first_killer:
            return FIRST_KILLER_SCORE
        if move == second_killer:
            return SECOND_KILLER_SCORE

        return quiet_bonus(board, move)

    # sorted() is stable, so equal scores keep generation order
    return sorted(moves, key=move_score, reverse=True)


def order_captures(board: chess.Board, moves: Iterable[chess.Move]) -> List[chess.Move]:
    """Order captures by MVV-LVA only (used by quiescence search)."""
    return sorted(moves, key=lambda move: mvv_lva(board, move), reverse=True)
