"""
UCI Protocol Implementation

This module implements the Universal Chess Interface (UCI) protocol for
communication between the engine and GUI applications.

UCI Commands Supported:
    - uci: Identify engine
    - isready: Synchronization check
    - ucinewgame: Start new game
    - position: Set board position
    - go: Start searching (depth, movetime, wtime/btime, infinite)
    - stop: Stop searching
    - quit: Shutdown engine

Threading:
    - Main thread: Listen for UCI commands
    - Search thread: Run the search on a copy of the board
    - Communication: stop flag polled by the search at every node

References:
    - UCI Protocol: https://www.chessprogramming.org/UCI
"""

import chess
import sys
import threading
import time
from typing import Callable, Optional

from ch3ss.config import EngineConfig
from ch3ss.evaluation.base import Evaluator
from ch3ss.evaluation.classical import ClassicalEvaluator
from ch3ss.search.minimax import find_best_move, principal_variation
from ch3ss.search.session import SearchSession
from ch3ss.utils.log import setup_logger

# Fraction of the remaining clock spent on one move
CLOCK_FRACTION = 30


class UCIEngine:
    """
    UCI-compliant engine interface.

    Attributes:
        board: Current chess position
        config: Engine configuration (default depth, limits, logging)
        evaluator: Position evaluation function
        session: Transposition table, killers and statistics
        searching: Flag indicating if search is in progress
        stop_search: Flag to stop ongoing search
        search_thread: Background thread for search
    """

    def __init__(self, config: Optional[EngineConfig] = None, evaluator: Optional[Evaluator] = None):
        self.config = config if config is not None else EngineConfig()
        self.board = chess.Board()
        self.evaluator = evaluator if evaluator else ClassicalEvaluator(
            jitter=self.config.jitter,
            seed=self.config.seed,
            mobility_weight=self.config.mobility_weight,
            bishop_pair_bonus=self.config.bishop_pair_bonus,
            king_safety_bonus=self.config.king_safety_bonus,
            doubled_pawn_penalty=self.config.doubled_pawn_penalty,
        )
        self.session = SearchSession(
            tt_size=self.config.tt_size,
            node_limit=self.config.node_limit,
            max_quiescence_plies=self.config.max_quiescence_plies,
            clear_tt=self.config.clear_tt_between_searches,
        )

        # Search state
        self.searching = False
        self.stop_search = False
        self.stop_event = threading.Event()
        self.search_thread: Optional[threading.Thread] = None

        # Engine info
        self.name = "CH3SS"
        self.version = "1.0"
        self.author = "CH3SS developers"

        self.logger = setup_logger(debug=self.config.debug, log_file=self.config.log_file)
        self.logger.info("=== CH3SS Engine Started ===")

    def run(self):
        """
        Main UCI command loop.

        Listens for UCI commands on stdin and responds on stdout.
        Runs until 'quit' command is received or stdin closes.
        """
        while True:
            try:
                command = input().strip()

                if not command:
                    continue

                self.logger.debug(f">>> {command}")

                tokens = command.split()
                cmd = tokens[0].lower()

                if cmd == "uci":
                    self.handle_uci()

                elif cmd == "isready":
                    self.handle_isready()

                elif cmd == "ucinewgame":
                    self.handle_ucinewgame()

                elif cmd == "position":
                    self.handle_position(tokens)

                elif cmd == "go":
                    self.handle_go(tokens)

                elif cmd == "stop":
                    self.handle_stop()

                elif cmd == "quit":
                    self.handle_quit()
                    break

                else:
                    # Unknown command - UCI spec says to ignore
                    self.logger.debug(f"Unknown command ignored: {command}")

            except EOFError:
                self.logger.info("EOF received, shutting down")
                self.handle_stop()
                break
            except ValueError as e:
                self.logger.error(f"Command error: {e}", exc_info=True)
                print(f"# Error: {e}", file=sys.stderr)

    def _send(self, message: str):
        print(message)
        sys.stdout.flush()
        self.logger.debug(f"<<< {message}")

    def handle_uci(self):
        """Handle 'uci' command - identify engine."""
        self.logger.info("Handling: uci")

        self._send(f"id name {self.name} {self.version}")
        self._send(f"id author {self.author}")
        self._send("option name Hash type spin default 16 min 1 max 1024")
        self._send("uciok")

    def handle_isready(self):
        """Handle 'isready' command - synchronization."""
        self.logger.info("Handling: isready")
        self._send("readyok")

    def handle_ucinewgame(self):
        """Handle 'ucinewgame' command - reset board and search caches."""
        self.logger.info("Handling: ucinewgame - resetting board and search session")

        self.handle_stop()
        self.board = chess.Board()
        self.session.reset()
        self.stop_search = False

    def handle_position(self, tokens):
        """
        Handle 'position' command - set board position.

        Formats:
            position startpos
            position startpos moves e2e4 e7e5
            position fen <FEN string>
            position fen <FEN string> moves e2e4

        Args:
            tokens: Command tokens (e.g., ['position', 'startpos', 'moves', 'e2e4'])
        """
        self.logger.info(f"Handling: position {' '.join(tokens[1:])}")

        if len(tokens) < 2:
            self.logger.warning("Position command with insufficient arguments")
            return

        if tokens[1] == "startpos":
            board = chess.Board()
            move_index = 2
        elif tokens[1] == "fen":
            if "moves" in tokens:
                move_index = tokens.index("moves")
            else:
                move_index = len(tokens)
            fen = " ".join(tokens[2:move_index])

            try:
                board = chess.Board(fen)
            except ValueError as e:
                self.logger.error(f"Invalid FEN: {e}")
                print(f"# Invalid FEN: {e}", file=sys.stderr)
                return
        else:
            self.logger.warning(f"Unknown position type: {tokens[1]}")
            return

        if move_index < len(tokens) and tokens[move_index] == "moves":
            for move_str in tokens[move_index + 1:]:
                try:
                    move = chess.Move.from_uci(move_str)
                except ValueError as e:
                    self.logger.error(f"Invalid move format: {move_str} - {e}")
                    print(f"# Invalid move format: {move_str} - {e}", file=sys.stderr)
                    break

                if not board.is_legal(move):
                    self.logger.error(f"Illegal move: {move_str}")
                    print(f"# Illegal move: {move_str}", file=sys.stderr)
                    break
                board.push(move)

        self.board = board
        self.logger.debug(f"Position updated: {self.board.fen()}")

    def parse_go(self, tokens):
        """
        Parse 'go' arguments.

        Returns:
            (depth, time budget in seconds or None)
        """
        depth = None
        movetime = None
        wtime = None
        btime = None
        infinite = False

        i = 1
        while i < len(tokens):
            if tokens[i] in ("depth", "movetime", "wtime", "btime") and i + 1 < len(tokens):
                try:
                    value = int(tokens[i + 1])
                except ValueError:
                    self.logger.warning(f"Ignoring non-numeric {tokens[i]}: {tokens[i + 1]}")
                    i += 2
                    continue
                if tokens[i] == "depth":
                    depth = value
                elif tokens[i] == "movetime":
                    movetime = value
                elif tokens[i] == "wtime":
                    wtime = value
                else:
                    btime = value
                i += 2
            elif tokens[i] == "infinite":
                infinite = True
                i += 1
            else:
                i += 1

        if depth is None or depth < 1:
            depth = self.config.depth
            self.logger.debug(f"No depth specified, using default depth {depth}")

        budget = None
        if not infinite:
            if movetime:
                budget = movetime / 1000.0
            else:
                clock = wtime if self.board.turn == chess.WHITE else btime
                if clock:
                    budget = clock / 1000.0 / CLOCK_FRACTION

        return depth, budget

    def handle_go(self, tokens):
        """
        Handle 'go' command - start search on a background thread.

        Formats:
            go depth 5
            go movetime 5000
            go wtime 300000 btime 300000
            go infinite
        """
        self.logger.info(f"Handling: go {' '.join(tokens[1:])}")

        if self.search_thread and self.search_thread.is_alive():
            self.logger.warning("Search already running, stopping it first")
            self.handle_stop()

        depth, budget = self.parse_go(tokens)

        deadline = time.monotonic() + budget if budget is not None else None

        def should_stop() -> bool:
            if self.stop_search:
                return True
            return deadline is not None and time.monotonic() >= deadline

        infinite = "infinite" in tokens[1:]

        self.logger.info(
            f"Starting search thread with depth={depth}, budget={budget}, infinite={infinite}"
        )

        # The search thread works on its own copy of the board
        board_copy = self.board.copy()

        self.stop_search = False
        self.stop_event.clear()
        self.searching = True
        self.search_thread = threading.Thread(
            target=self._search_thread,
            args=(depth, board_copy, should_stop, infinite),
        )
        self.search_thread.start()

    def _search_thread(
        self,
        depth: int,
        board: chess.Board,
        should_stop: Callable[[], bool],
        infinite: bool = False,
    ):
        """
        Background thread for search.

        In infinite mode bestmove is held back until "stop" (or "quit").

        Output:
            info depth X score cp Y nodes Z time T nps N pv ...
            bestmove <move>
        """
        try:
            best_move, score, stats = find_best_move(
                board,
                depth,
                self.evaluator,
                self.session,
                should_stop=should_stop,
            )

            if best_move is None:
                self.logger.warning("No legal moves in search position")
                if infinite:
                    self.stop_event.wait()
                self._send("bestmove 0000")
                return

            # UCI scores are from the engine's (side to move's) point of view
            relative = score if board.turn == chess.WHITE else -score
            elapsed_ms = int(stats.elapsed * 1000)

            info_parts = [
                "info",
                f"depth {depth}",
                f"score cp {relative}",
                f"nodes {stats.total_nodes}",
                f"time {elapsed_ms}",
                f"nps {stats.nps}",
            ]

            pv = principal_variation(board, self.session, depth)
            if not pv or pv[0] != best_move:
                pv = [best_move]
            info_parts.append("pv " + " ".join(m.uci() for m in pv))

            self._send(" ".join(info_parts))
            if infinite:
                self.stop_event.wait()
            self._send(f"bestmove {best_move.uci()}")

        except Exception as e:
            self.logger.error(f"Search error: {e}", exc_info=True)
            print(f"# Search error: {e}", file=sys.stderr)

            # Send a legal move as fallback
            legal_moves = list(board.legal_moves)
            if legal_moves:
                fallback_move = legal_moves[0].uci()
                self.logger.warning(f"Using fallback move: {fallback_move}")
                self._send(f"bestmove {fallback_move}")
            else:
                self.logger.error("No legal moves available for fallback")
                self._send("bestmove 0000")

        finally:
            self.searching = False
            self.logger.debug("Search thread finished")

    def handle_stop(self):
        """
        Handle 'stop' command - stop ongoing search.

        Sets stop_search flag and waits for the search thread to finish;
        the search still reports the best move found so far.
        """
        self.logger.info("Handling: stop")
        self.stop_search = True
        self.stop_event.set()

        if self.search_thread and self.search_thread.is_alive():
            self.search_thread.join(timeout=5.0)
            if self.search_thread.is_alive():
                self.logger.warning("Search thread did not finish within timeout")

    def handle_quit(self):
        """Handle 'quit' command - shutdown engine."""
        self.logger.info("Handling: quit - shutting down engine")
        self.handle_stop()
        self.logger.info("=== CH3SS Engine Stopped ===")
