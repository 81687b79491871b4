"""
Board Module

Thin helpers around python-chess, which acts as the rules engine for the
whole package. Nothing here implements chess rules; it only adapts what
python-chess already knows to the shapes the search and the collaborators
need.

Key Components:
    - square_to_coordinates: Square index to piece-square-table (row, col)
    - is_draw / is_terminal: Game-termination checks used by search
    - is_draw_by_rule: History-dependent draws (fifty moves, repetition)
    - flip_side_to_move: Copy of a position with the other side to move
    - normalize_fen: Placement + side to move key for the opening book
    - move_to_dict / parse_color: Coordinate notation at the boundaries
"""

from ch3ss.board.representation import (
    square_to_coordinates,
    is_draw,
    is_draw_by_rule,
    is_terminal,
    flip_side_to_move,
    normalize_fen,
    move_to_dict,
    parse_color,
)

__all__ = [
    'square_to_coordinates',
    'is_draw',
    'is_draw_by_rule',
    'is_terminal',
    'flip_side_to_move',
    'normalize_fen',
    'move_to_dict',
    'parse_color',
]
