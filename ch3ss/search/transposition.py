"""
Transposition Table with Zobrist Hashing

A transposition table (TT) caches search results by position so that a
position reached through a different move order is not searched twice.

Entries are keyed by a Zobrist hash of the board, side to move, castling
rights and legal en passant file. An entry is only trusted for value reuse
when it was searched at least as deep as the current node requires;
shallower entries are still useful for their best move (move ordering).

References:
    - Zobrist Hashing: https://www.chessprogramming.org/Zobrist_Hashing
    - Transposition Table: https://www.chessprogramming.org/Transposition_Table
"""

import chess
import random
from typing import Optional, Dict
from enum import Enum


class NodeType(Enum):
    """
    How a stored value relates to the true value of the position.

        - EXACT: All moves searched inside the window
        - LOWER_BOUND: Search failed high (true value >= stored value)
        - UPPER_BOUND: Search failed low (true value <= stored value)
    """
    EXACT = 0
    LOWER_BOUND = 1
    UPPER_BOUND = 2


class TTEntry:
    """
    Entry in the transposition table.

    Attributes:
        zobrist_hash: 64-bit hash of position
        depth: Remaining depth the position was searched to
        value: Score in centipawns, White's perspective
        node_type: EXACT, LOWER_BOUND, or UPPER_BOUND
        best_move: Move that produced the value, if any
    """

    __slots__ = ("zobrist_hash", "depth", "value", "node_type", "best_move")

    def __init__(
        self,
        zobrist_hash: int,
        depth: int,
        value: int,
        node_type: NodeType,
        best_move: Optional[chess.Move] = None,
    ):
        self.zobrist_hash = zobrist_hash
        self.depth = depth
        self.value = value
        self.node_type = node_type
        self.best_move = best_move

    def __repr__(self) -> str:
        return (
            f"TTEntry(hash={self.zobrist_hash}, depth={self.depth}, "
            f"value={self.value}, type={self.node_type}, move={self.best_move})"
        )


# ============================================================================
# Zobrist Hashing
# ============================================================================
# One random 64-bit number per (piece type, color, square), per castling
# rights combination, per en passant file, and one for Black to move.
# Hash = XOR of the numbers describing the position.
# ============================================================================

_zobrist_random = random.Random(42)  # Fixed seed for reproducible keys

# Piece hashes: [piece_type][color][square], piece_type 0 is unused
ZOBRIST_PIECES = [
    [[_zobrist_random.getrandbits(64) for _ in range(64)] for _ in range(2)]
    for _ in range(7)
]

# Castling rights hashes (4 bits: WK, WQ, BK, BQ)
ZOBRIST_CASTLING = [_zobrist_random.getrandbits(64) for _ in range(16)]

# En passant file hashes (8 files)
ZOBRIST_EN_PASSANT = [_zobrist_random.getrandbits(64) for _ in range(8)]

# Side to move hash (XOR this if black to move)
ZOBRIST_SIDE_TO_MOVE = _zobrist_random.getrandbits(64)


def zobrist_hash(board: chess.Board) -> int:
    """
    Compute the Zobrist hash of a position.

    The key depends only on piece placement, side to move, castling rights
    and a *legal* en passant capture, so it is independent of the move
    order that led to the position.

    Args:
        board: python-chess Board object

    Returns:
        64-bit integer hash
    """
    hash_value = 0

    for square, piece in board.piece_map().items():
        hash_value ^= ZOBRIST_PIECES[piece.piece_type][piece.color][square]

    castling_index = 0
    if board.has_kingside_castling_rights(chess.WHITE):
        castling_index |= 1
    if board.has_queenside_castling_rights(chess.WHITE):
        castling_index |= 2
    if board.has_kingside_castling_rights(chess.BLACK):
        castling_index |= 4
    if board.has_queenside_castling_rights(chess.BLACK):
        castling_index |= 8
    hash_value ^= ZOBRIST_CASTLING[castling_index]

    if board.ep_square is not None and board.has_legal_en_passant():
        hash_value ^= ZOBRIST_EN_PASSANT[chess.square_file(board.ep_square)]

    if board.turn == chess.BLACK:
        hash_value ^= ZOBRIST_SIDE_TO_MOVE

    return hash_value


class TranspositionTable:
    """
    Transposition table for caching search results.

    Attributes:
        max_size: Maximum number of entries
        table: Dictionary mapping hash -> TTEntry
    """

    def __init__(self, max_size: int = 1000000):
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self.table: Dict[int, TTEntry] = {}
        self.hits = 0
        self.misses = 0

    def store(
        self,
        zobrist_hash: int,
        depth: int,
        value: int,
        node_type: NodeType,
        best_move: Optional[chess.Move] = None,
    ):
        """
        Store a search result.

        An existing entry for the same key is only replaced by a result
        searched at least as deep.
        """
        existing = self.table.get(zobrist_hash)
        if existing is not None:
            if depth < existing.depth:
                return
            # Keep the old move when the new result has none
            if best_move is None:
                best_move = existing.best_move
        elif len(self.table) >= self.max_size:
            # Oldest insertion goes first
            del self.table[next(iter(self.table))]

        self.table[zobrist_hash] = TTEntry(zobrist_hash, depth, value, node_type, best_move)

    def lookup(self, zobrist_hash: int, depth: int = 0) -> Optional[TTEntry]:
        """
        Look up a position searched at least `depth` deep.

        Returns:
            TTEntry if found and deep enough, None otherwise
        """
        entry = self.table.get(zobrist_hash)
        if entry is not None and entry.depth >= depth:
            self.hits += 1
            return entry

        self.misses += 1
        return None

    def probe(self, zobrist_hash: int) -> Optional[TTEntry]:
        """Return the entry for a key whatever its depth (for move ordering)."""
        return self.table.get(zobrist_hash)

    def clear(self):
        """Clear all entries from the transposition table."""
        self.table.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self.table)

    def get_stats(self) -> Dict[str, int | float]:
        """Get statistics about transposition table usage."""
        total_lookups = self.hits + self.misses
        hit_rate = (self.hits / total_lookups * 100) if total_lookups > 0 else 0

        return {
            'entries': len(self.table),
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': hit_rate,
        }

    def __repr__(self) -> str:
        stats = self.get_stats()
        return (
            f"TranspositionTable(entries={stats['entries']}, "
            f"hit_rate={stats['hit_rate']:.1f}%)"
        )
