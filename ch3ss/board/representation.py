"""
Rules-Engine Adapters

python-chess is the rules engine: it generates legal moves, pushes and pops
them, detects check, mate and draws, and knows the square geometry. This
module gathers the few adapters the engine needs on top of it.

Board Orientation (piece-square tables):
    - Row 0 = Rank 8 (Black's back rank)
    - Row 7 = Rank 1 (White's back rank)
    - Column 0 = A-file
    - Column 7 = H-file
"""

import chess
from typing import Dict, Optional, Tuple


def square_to_coordinates(square: int) -> Tuple[int, int]:
    """
    Convert python-chess square index to (row, column) coordinates.

    Args:
        square: Square index (0-63) where 0=A1, 63=H8

    Returns:
        Tuple of (row, col) where:
            - row 0 = rank 8 (index 56-63)
            - row 7 = rank 1 (index 0-7)
            - col 0 = A-file
            - col 7 = H-file
    """
    rank = square // 8
    file = square % 8
    return 7 - rank, file


def is_draw(board: chess.Board) -> bool:
    """
    Check if position is a draw by rule.

    Covers:
        - Stalemate
        - Insufficient material
        - Fifty-move rule (claimable, so also the seventy-five move rule)
        - Threefold repetition of the current position

    Repetition is checked on the position itself rather than with
    can_claim_threefold_repetition(), which tries every legal move.
    """
    return (
        board.is_stalemate()
        or board.is_insufficient_material()
        or board.is_fifty_moves()
        or board.is_repetition(3)
    )


def is_draw_by_rule(board: chess.Board) -> bool:
    """
    Draws that depend on the move history rather than the placement:
    the fifty-move rule and threefold repetition.
    """
    return board.is_fifty_moves() or board.is_repetition(3)


def is_terminal(board: chess.Board) -> bool:
    """True if the game is over: checkmate or any drawn outcome."""
    return board.is_checkmate() or is_draw(board)


def flip_side_to_move(board: chess.Board) -> chess.Board:
    """
    Return a copy of the position with the other side to move.

    The move stack is dropped and the en passant square cleared, since
    neither is meaningful for the flipped side. Used to count the mobility
    of the side that is not on move.
    """
    flipped = board.copy(stack=False)
    flipped.turn = not board.turn
    flipped.ep_square = None
    return flipped


def normalize_fen(fen: str) -> str:
    """
    Reduce a FEN to piece placement + side to move.

    Castling rights, en passant and move counters are ignored so that
    book positions match regardless of how they were reached.

    Example:
        >>> normalize_fen(chess.STARTING_FEN)
        'rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w'
    """
    parts = fen.split()
    if len(parts) < 2:
        raise ValueError(f"FEN needs at least placement and side to move: {fen!r}")
    return f"{parts[0]} {parts[1]}"


def move_to_dict(move: chess.Move) -> Dict[str, Optional[str]]:
    """
    Describe a move in coordinate notation.

    Returns:
        {"from": "e7", "to": "e8", "promotion": "q"} (promotion is None
        for non-promoting moves)
    """
    return {
        "from": chess.square_name(move.from_square),
        "to": chess.square_name(move.to_square),
        "promotion": chess.piece_symbol(move.promotion) if move.promotion else None,
    }


def parse_color(name: str) -> chess.Color:
    """Map "white"/"black" (or "w"/"b") to a python-chess color."""
    value = name.strip().lower()
    if value in ("white", "w"):
        return chess.WHITE
    if value in ("black", "b"):
        return chess.BLACK
    raise ValueError(f"Unknown color: {name!r}")
