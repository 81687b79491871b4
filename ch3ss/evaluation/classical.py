"""
Classical Evaluation

This module implements the static evaluation used at the search leaves:
    1. Material counting (piece values)
    2. Piece-Square Tables (positional bonuses/penalties)
    3. Bishop pair bonus
    4. Mobility (legal move count difference)
    5. King safety (own pieces next to the king)
    6. Pawn structure (doubled pawns)
    7. Optional random jitter to break ties between balanced positions

All terms are added into one integer, from White's perspective.

Reference:
    Simplified Evaluation Function
    https://www.chessprogramming.org/Simplified_Evaluation_Function
"""

import chess
import numpy as np
from typing import Optional

from ch3ss.board.representation import flip_side_to_move, square_to_coordinates
from ch3ss.evaluation.base import Evaluator

#fmt: off
# ============================================================================
# Material Values (centipawns)
# ============================================================================

PIECE_VALUES = {
    chess.PAWN: 100,
    chess.KNIGHT: 320,
    chess.BISHOP: 330,
    chess.ROOK: 500,
    chess.QUEEN: 900,
    chess.KING: 0,
}


# ============================================================================
# Piece-Square Tables (PSTs)
# ============================================================================
# Values are from White's perspective (row 0 = rank 8, row 7 = rank 1).
# Black pieces read the same tables flipped vertically.
# Units: Centipawns (added to material value)
# ============================================================================

# Pawn PST: Encourage central pawns, reward advanced pawns
PAWN_TABLE = np.array([
    [  0,   0,   0,   0,   0,   0,   0,   0],  # Rank 8 (promotion)
    [ 50,  50,  50,  50,  50,  50,  50,  50],  # Rank 7
    [ 10,  10,  20,  30,  30,  20,  10,  10],  # Rank 6
    [  5,   5,  10,  25,  25,  10,   5,   5],  # Rank 5
    [  0,   0,   0,  20,  20,   0,   0,   0],  # Rank 4
    [  5,  -5, -10,   0,   0, -10,  -5,   5],  # Rank 3
    [  5,  10,  10, -20, -20,  10,  10,   5],  # Rank 2
    [  0,   0,   0,   0,   0,   0,   0,   0],  # Rank 1
], dtype=np.int32)

# Knight PST: "Knights on the rim are dim"
KNIGHT_TABLE = np.array([
    [-50, -40, -30, -30, -30, -30, -40, -50],
    [-40, -20,   0,   0,   0,   0, -20, -40],
    [-30,   0,  10,  15,  15,  10,   0, -30],
    [-30,   5,  15,  20,  20,  15,   5, -30],
    [-30,   0,  15,  20,  20,  15,   0, -30],
    [-30,   5,  10,  15,  15,  10,   5, -30],
    [-40, -20,   0,   5,   5,   0, -20, -40],
    [-50, -40, -30, -30, -30, -30, -40, -50],
], dtype=np.int32)

# Bishop PST: Prefer long diagonals, avoid corners
BISHOP_TABLE = np.array([
    [-20, -10, -10, -10, -10, -10, -10, -20],
    [-10,   0,   0,   0,   0,   0,   0, -10],
    [-10,   0,   5,  10,  10,   5,   0, -10],
    [-10,   5,   5,  10,  10,   5,   5, -10],
    [-10,   0,  10,  10,  10,  10,   0, -10],
    [-10,  10,  10,  10,  10,  10,  10, -10],
    [-10,   5,   0,   0,   0,   0,   5, -10],
    [-20, -10, -10, -10, -10, -10, -10, -20],
], dtype=np.int32)

# Rook PST: Prefer 7th rank and central files on the back rank
ROOK_TABLE = np.array([
    [  0,   0,   0,   0,   0,   0,   0,   0],
    [  5,  10,  10,  10,  10,  10,  10,   5],
    [ -5,   0,   0,   0,   0,   0,   0,  -5],
    [ -5,   0,   0,   0,   0,   0,   0,  -5],
    [ -5,   0,   0,   0,   0,   0,   0,  -5],
    [ -5,   0,   0,   0,   0,   0,   0,  -5],
    [ -5,   0,   0,   0,   0,   0,   0,  -5],
    [  0,   0,   0,   5,   5,   0,   0,   0],
], dtype=np.int32)

# Queen PST: Mild central preference
QUEEN_TABLE = np.array([
    [-20, -10, -10,  -5,  -5, -10, -10, -20],
    [-10,   0,   0,   0,   0,   0,   0, -10],
    [-10,   0,   5,   5,   5,   5,   0, -10],
    [ -5,   0,   5,   5,   5,   5,   0,  -5],
    [  0,   0,   5,   5,   5,   5,   0,  -5],
    [-10,   5,   5,   5,   5,   5,   0, -10],
    [-10,   0,   5,   0,   0,   0,   0, -10],
    [-20, -10, -10,  -5,  -5, -10, -10, -20],
], dtype=np.int32)

# King PST: Stay behind the pawns, prefer castled squares
KING_TABLE = np.array([
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-20, -30, -30, -40, -40, -30, -30, -20],
    [-10, -20, -20, -20, -20, -20, -20, -10],
    [ 20,  20,   0,   0,   0,   0,  20,  20],
    [ 20,  30,  10,   0,   0,  10,  30,  20],
], dtype=np.int32)
#fmt: on

PIECE_SQUARE_TABLES = {
    chess.PAWN: PAWN_TABLE,
    chess.KNIGHT: KNIGHT_TABLE,
    chess.BISHOP: BISHOP_TABLE,
    chess.ROOK: ROOK_TABLE,
    chess.QUEEN: QUEEN_TABLE,
    chess.KING: KING_TABLE,
}

# Structural weights (centipawns)
BISHOP_PAIR_BONUS = 30
MOBILITY_WEIGHT = 2
KING_SAFETY_BONUS = 10
DOUBLED_PAWN_PENALTY = 15


class ClassicalEvaluator(Evaluator):
    """
    Classical evaluation: material, piece-square tables and a few
    structural terms.

    Attributes:
        jitter: Maximum magnitude of the random term (0 disables it)
        rng: numpy Generator the jitter is drawn from
        mobility_weight: Centipawns per legal move of difference
        bishop_pair_bonus: Flat bonus for holding two or more bishops
        king_safety_bonus: Bonus per own piece adjacent to the king
        doubled_pawn_penalty: Penalty per extra pawn on a file
    """

    def __init__(
        self,
        jitter: int = 0,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        mobility_weight: int = MOBILITY_WEIGHT,
        bishop_pair_bonus: int = BISHOP_PAIR_BONUS,
        king_safety_bonus: int = KING_SAFETY_BONUS,
        doubled_pawn_penalty: int = DOUBLED_PAWN_PENALTY,
    ):
        """
        Initialize the evaluator.

        Args:
            jitter: Random term is uniform in [-jitter, +jitter]
            rng: Generator for the jitter (takes precedence over seed)
            seed: Seed for a fresh generator when rng is not given
        """
        if jitter < 0:
            raise ValueError(f"jitter must be non-negative, got {jitter}")

        self.jitter = jitter
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.mobility_weight = mobility_weight
        self.bishop_pair_bonus = bishop_pair_bonus
        self.king_safety_bonus = king_safety_bonus
        self.doubled_pawn_penalty = doubled_pawn_penalty

        # Per color lookup: square -> material + PST, as plain ints
        self.square_values = {}
        for piece_type, table in PIECE_SQUARE_TABLES.items():
            white = [0] * 64
            black = [0] * 64
            flipped = np.flipud(table)
            for square in chess.SQUARES:
                row, col = square_to_coordinates(square)
                white[square] = PIECE_VALUES[piece_type] + int(table[row, col])
                black[square] = PIECE_VALUES[piece_type] + int(flipped[row, col])
            self.square_values[piece_type] = {chess.WHITE: white, chess.BLACK: black}

    def evaluate(self, board: chess.Board) -> int:
        """
        Evaluate position.

        Args:
            board: Chess board to evaluate

        Returns:
            int: Evaluation in centipawns (White's perspective)
        """
        terminal_score = self.evaluate_terminal(board)
        if terminal_score is not None:
            return terminal_score

        score = self.material_and_position(board)
        score += self.bishop_pair(board)
        score += self.mobility(board)
        score += self.king_safety(board)
        score += self.pawn_structure(board)

        if self.jitter:
            score += int(self.rng.integers(-self.jitter, self.jitter + 1))

        return score

    def material_and_position(self, board: chess.Board) -> int:
        """Material plus piece-square bonus for every piece on the board."""
        score = 0
        for square, piece in board.piece_map().items():
            value = self.square_values[piece.piece_type][piece.color][square]
            if piece.color == chess.WHITE:
                score += value
            else:
                score -= value
        return score

    def bishop_pair(self, board: chess.Board) -> int:
        score = 0
        if len(board.pieces(chess.BISHOP, chess.WHITE)) >= 2:
            score += self.bishop_pair_bonus
        if len(board.pieces(chess.BISHOP, chess.BLACK)) >= 2:
            score -= self.bishop_pair_bonus
        return score

    def mobility(self, board: chess.Board) -> int:
        """
        Legal move count difference, White minus Black.

        The side to move is counted on the board itself, the other side on
        a copy with the turn flipped.
        """
        own = board.legal_moves.count()
        other = flip_side_to_move(board).legal_moves.count()
        difference = own - other
        if board.turn == chess.BLACK:
            difference = -difference
        return difference * self.mobility_weight

    def king_safety(self, board: chess.Board) -> int:
        """Bonus per own non-king piece on a square adjacent to the king."""
        score = 0
        for color in chess.COLORS:
            king_square = board.king(color)
            if king_square is None:
                continue
            shield = chess.BB_KING_ATTACKS[king_square] & board.occupied_co[color]
            bonus = chess.popcount(shield) * self.king_safety_bonus
            score += bonus if color == chess.WHITE else -bonus
        return score

    def pawn_structure(self, board: chess.Board) -> int:
        """Penalty for every pawn beyond the first on a file."""
        score = 0
        for color in chess.COLORS:
            pawns = board.pawns & board.occupied_co[color]
            extra = 0
            for file_mask in chess.BB_FILES:
                count = chess.popcount(pawns & file_mask)
                if count > 1:
                    extra += count - 1
            penalty = extra * self.doubled_pawn_penalty
            score += -penalty if color == chess.WHITE else penalty
        return score
