"""
Stockfish delegation.

Asks an external UCI engine (Stockfish) for a move instead of searching
ourselves. This is protocol glue only: send the position and a thinking
time, read back the "bestmove" token in coordinate notation.
"""

import logging
import re
import shutil
import subprocess
import threading
from pathlib import Path
from typing import Callable, Optional

import chess

logger = logging.getLogger(__name__)

# difficulty -> (skill level 0-20, thinking time in ms)
DIFFICULTY_SETTINGS = {
    "easy": (5, 500),
    "medium": (10, 1000),
    "hard": (15, 1500),
    "expert": (20, 2000),
}

BESTMOVE_PATTERN = re.compile(r"bestmove\s+(\w+)")


def parse_bestmove(line: str) -> Optional[str]:
    """
    Extract the move token from a "bestmove" line.

    Example:
        >>> parse_bestmove("bestmove e2e4 ponder e7e5")
        'e2e4'
    """
    line = line.strip()
    if not line.startswith("bestmove"):
        return None
    match = BESTMOVE_PATTERN.match(line)
    return match.group(1) if match else None


def apply_uci_move(board: chess.Board, token: str) -> chess.Move:
    """
    Play a coordinate-notation move (e.g. "e2e4", "e7e8q") on the board.

    Raises:
        ValueError: If the token is malformed or the move is illegal
    """
    move = chess.Move.from_uci(token)
    if not board.is_legal(move):
        raise ValueError(f"Illegal move {token} in position {board.fen()}")
    board.push(move)
    return move


class StockfishEngine:
    """Long-running Stockfish process answering move requests."""

    def __init__(
        self,
        stockfish_path: Optional[str] = None,
        threads: int = 2,
        skill_level: int = 10,
    ):
        """
        Args:
            stockfish_path: Path to Stockfish binary (None = auto-detect)
            threads: Threads option sent to the engine
            skill_level: Initial Skill Level option (0-20)

        Raises:
            FileNotFoundError: If Stockfish binary not found
        """
        if stockfish_path is None:
            stockfish_path = self._find_stockfish()

        if not Path(stockfish_path).exists():
            raise FileNotFoundError(
                f"Stockfish binary not found at: {stockfish_path}\n"
                "Install with: brew install stockfish (macOS) or apt install stockfish (Linux)"
            )

        self.stockfish_path = stockfish_path
        self.threads = threads
        self.skill_level = skill_level
        self.process: Optional[subprocess.Popen] = None
        self.ready = False
        self._lock = threading.Lock()

    def _find_stockfish(self) -> str:
        """
        Auto-detect Stockfish binary location.

        Raises:
            FileNotFoundError: If Stockfish not found
        """
        candidates = [
            "stockfish",
            "/usr/local/bin/stockfish",
            "/usr/bin/stockfish",
            "/usr/games/stockfish",
            "/opt/homebrew/bin/stockfish",
        ]

        for candidate in candidates:
            path = shutil.which(candidate)
            if path:
                return path

        raise FileNotFoundError(
            "Stockfish not found. Install with: brew install stockfish (macOS) "
            "or apt install stockfish (Linux)"
        )

    def _send(self, command: str):
        logger.debug(f"stockfish <<< {command}")
        self.process.stdin.write(command + "\n")
        self.process.stdin.flush()

    def _read_until(self, prefix: str) -> str:
        """Read engine output until a line starting with `prefix`."""
        while True:
            line = self.process.stdout.readline()
            if not line:
                self.ready = False
                raise RuntimeError(f"Stockfish exited while waiting for '{prefix}'")
            line = line.strip()
            logger.debug(f"stockfish >>> {line}")
            if line.startswith(prefix):
                return line

    def start(self):
        """Spawn the engine and complete the UCI handshake."""
        if self.process is not None:
            return

        logger.info(f"Starting Stockfish: {self.stockfish_path}")
        self.process = subprocess.Popen(
            [self.stockfish_path],
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
        )

        self._send("uci")
        self._read_until("uciok")
        self._send(f"setoption name Skill Level value {self.skill_level}")
        self._send(f"setoption name Threads value {self.threads}")
        self._send("isready")
        self._read_until("readyok")
        self.ready = True
        logger.info("Stockfish engine ready")

    def request_move(self, fen: str, difficulty: str = "medium") -> str:
        """
        Ask the engine for its best move.

        Args:
            fen: Position in FEN notation
            difficulty: easy, medium, hard or expert (skill level and time)

        Returns:
            Move token in coordinate notation, e.g. "e2e4" or "e7e8q"

        Raises:
            ValueError: Unknown difficulty
            RuntimeError: Engine not started, or it died / sent no move
        """
        try:
            skill_level, movetime = DIFFICULTY_SETTINGS[difficulty]
        except KeyError:
            raise ValueError(f"Unknown difficulty: {difficulty!r}") from None

        if self.process is None or not self.ready:
            raise RuntimeError("Stockfish not ready")

        with self._lock:
            self._send(f"setoption name Skill Level value {skill_level}")
            self._send(f"position fen {fen}")
            self._send(f"go movetime {movetime}")
            line = self._read_until("bestmove")

        token = parse_bestmove(line)
        if token is None or token == "(none)":
            raise RuntimeError(f"Stockfish returned no move: {line!r}")

        logger.info(f"Stockfish suggests move: {token}")
        return token

    def request_move_async(
        self,
        fen: str,
        difficulty: str,
        callback: Callable[[Optional[str]], None],
    ) -> threading.Thread:
        """
        Request a move on a background thread.

        The callback receives the move token, or None if the request failed
        (the error is logged).
        """

        def run():
            try:
                token = self.request_move(fen, difficulty)
            except (RuntimeError, ValueError) as e:
                logger.error(f"Stockfish request failed: {e}")
                token = None
            callback(token)

        thread = threading.Thread(target=run, daemon=True)
        thread.start()
        return thread

    def close(self):
        """Shut the engine down."""
        if self.process is None:
            return

        try:
            self._send("quit")
            self.process.wait(timeout=1.0)
        except (OSError, subprocess.TimeoutExpired):
            logger.warning("Stockfish did not quit cleanly, killing it")
            self.process.kill()
        finally:
            self.process = None
            self.ready = False

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
