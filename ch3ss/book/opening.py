"""
Opening Book Lookup

Positions are keyed by piece placement + side to move only (castling
rights, en passant and move counters are ignored), see normalize_fen().
Each key maps to a list of candidate moves in UCI notation; on a hit one
legal candidate is picked uniformly at random.
"""

import logging
import random
import chess
from typing import Dict, List, Optional, Union

from ch3ss.board.representation import normalize_fen

logger = logging.getLogger(__name__)


DEFAULT_OPENING_BOOK: Dict[str, List[str]] = {
    # White's ten most popular first moves
    "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w": [
        "e2e4", "d2d4", "g1f3", "c2c4", "g2g3",
        "b1c3", "b2b3", "f2f4", "e2e3", "d2d3",
    ],
    # Black replies to 1.e4
    "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b": ["e7e5", "c7c5", "e7e6", "g8f6"],
    # Black replies to 1.d4
    "rnbqkbnr/pppppppp/8/8/3P4/8/PPP1PPPP/RNBQKBNR b": ["d7d5", "g8f6", "e7e6", "c7c6"],
    # Black replies to 1.Nf3
    "rnbqkbnr/pppppppp/8/8/8/5N2/PPPPPPPP/RNBQKB1R b": ["g8f6", "d7d5", "e7e6", "c7c5"],
    # Black replies to 1.c4
    "rnbqkbnr/pppppppp/8/8/2P5/8/PP1PPPPP/RNBQKBNR b": ["e7e5", "c7c5", "g8f6", "e7e6"],
    # Black replies to 1.g3
    "rnbqkbnr/pppppppp/8/8/8/6P1/PPPPPP1P/RNBQKBNR b": ["e7e5", "g8f6", "d7d5", "e7e6"],
    # Black replies to 1.Nc3
    "rnbqkbnr/pppppppp/8/8/8/2N5/PPPPPPPP/R1BQKBNR b": ["g8f6", "d7d5", "e7e6", "c7c5"],
    # Black replies to 1.b3
    "rnbqkbnr/pppppppp/8/8/8/1P6/P1PPPPPP/RNBQKBNR b": ["e7e5", "d7d5", "g8f6", "e7e6"],
    # Black replies to 1.f4
    "rnbqkbnr/pppppppp/8/8/5P2/8/PPPPP1PP/RNBQKBNR b": ["e7e5", "g8f6", "d7d5", "e7e6"],
    # Black replies to 1.e3
    "rnbqkbnr/pppppppp/8/8/8/4P3/PPPP1PPP/RNBQKBNR b": ["e7e5", "c7c5", "d7d5", "g8f6"],
    # Black replies to 1.d3
    "rnbqkbnr/pppppppp/8/8/8/3P4/PPP1PPPP/RNBQKBNR b": ["d7d5", "g8f6", "e7e6", "c7c6"],
    # 1.g4 and 1.f3 weaken the king: answer with ...e6, aiming at h4
    "rnbqkbnr/pppppppp/8/8/6P1/8/PPPPPP1P/RNBQKBNR b": ["e7e6"],
    "rnbqkbnr/pppppppp/8/8/8/5P2/PPPPP1PP/RNBQKBNR b": ["e7e6"],
    # Fool's mate after f3 + g4 with ...e6 played
    "rnbqkbnr/pppp1ppp/4p3/8/6P1/5P2/PPPPP2P/RNBQKBNR b": ["d8h4"],
}


class OpeningBook:
    """
    Lookup table from normalized position keys to candidate moves.

    Attributes:
        entries: Mapping of normalized FEN -> candidate UCI moves
        rng: Random source for the uniform choice among candidates
    """

    def __init__(
        self,
        entries: Optional[Dict[str, List[str]]] = None,
        rng: Optional[random.Random] = None,
    ):
        source = DEFAULT_OPENING_BOOK if entries is None else entries
        self.entries: Dict[str, List[chess.Move]] = {
            normalize_fen(key): [chess.Move.from_uci(uci) for uci in moves]
            for key, moves in source.items()
        }
        self.rng = rng if rng is not None else random.Random()

    @staticmethod
    def key(position: Union[chess.Board, str]) -> str:
        fen = position.fen() if isinstance(position, chess.Board) else position
        return normalize_fen(fen)

    def lookup(self, position: Union[chess.Board, str]) -> List[chess.Move]:
        """
        Return the book moves for a position.

        Candidates that are not legal in the position are dropped, so a
        stale or malformed entry can never produce an illegal move.
        """
        board = position if isinstance(position, chess.Board) else chess.Board(position)
        candidates = self.entries.get(self.key(board), [])
        return [move for move in candidates if board.is_legal(move)]

    def choose(self, position: Union[chess.Board, str]) -> Optional[chess.Move]:
        """Pick one legal book move uniformly at random, None on a miss."""
        candidates = self.lookup(position)
        if not candidates:
            return None

        move = self.rng.choice(candidates)
        logger.debug(f"Book hit: {move.uci()} out of {len(candidates)} candidates")
        return move

    def __contains__(self, position: Union[chess.Board, str]) -> bool:
        return self.key(position) in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"OpeningBook(positions={len(self.entries)})"
