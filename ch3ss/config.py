"""
Engine configuration.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# Difficulty presets for the built-in search (Stockfish settings for the
# same names live in ch3ss.external.stockfish)
DIFFICULTY_DEPTHS = {
    "easy": 1,
    "medium": 2,
    "hard": 3,
    "expert": 4,
}


@dataclass
class EngineConfig:
    """Configuration for the search engine and its collaborators.

    Collects search limits, evaluation weights and logging settings in one
    place so that a worker or UCI front end can be built from a single
    object.
    """

    # Search
    depth: int = 3
    """Search depth in plies"""

    max_quiescence_plies: int = 3
    """Capture plies searched beyond the horizon"""

    node_limit: Optional[int] = None
    """Abort and return the best move so far after this many nodes"""

    tt_size: int = 1000000
    """Maximum number of transposition table entries"""

    clear_tt_between_searches: bool = False
    """Empty the transposition table before every search"""

    use_opening_book: bool = True
    """Answer book positions without searching"""

    # Evaluation
    jitter: int = 0
    """Random evaluation noise in [-jitter, +jitter] centipawns"""

    seed: Optional[int] = None
    """Seed for the evaluation jitter and book choice (None for random)"""

    mobility_weight: int = 2
    bishop_pair_bonus: int = 30
    king_safety_bonus: int = 10
    doubled_pawn_penalty: int = 15

    # Logging
    log_file: Optional[Path] = None
    """Log file (None for ~/.ch3ss/engine.log)"""

    debug: bool = False
    """Log at DEBUG level"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.log_file is not None:
            self.log_file = Path(self.log_file)

        if self.depth < 1:
            raise ValueError(f"depth must be at least 1, got {self.depth}")

        if self.max_quiescence_plies < 0:
            raise ValueError(
                f"max_quiescence_plies must be non-negative, got {self.max_quiescence_plies}"
            )

        if self.node_limit is not None and self.node_limit <= 0:
            raise ValueError(f"node_limit must be positive, got {self.node_limit}")

        if self.tt_size <= 0:
            raise ValueError(f"tt_size must be positive, got {self.tt_size}")

        if self.jitter < 0:
            raise ValueError(f"jitter must be non-negative, got {self.jitter}")

    @classmethod
    def for_difficulty(cls, difficulty: str, **overrides) -> "EngineConfig":
        """Build a config from a difficulty name (easy, medium, hard, expert)."""
        try:
            depth = DIFFICULTY_DEPTHS[difficulty]
        except KeyError:
            raise ValueError(
                f"Unknown difficulty {difficulty!r}, expected one of {sorted(DIFFICULTY_DEPTHS)}"
            ) from None
        return cls(depth=depth, **overrides)
