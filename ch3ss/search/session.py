"""
Search Session

Everything a search episode mutates lives here instead of in module
globals: the transposition table, the killer table, the statistics and the
node budget. A session is reused across moves of a game; `begin()` marks
the start of each top-level search.

A session must not be shared by two searches running at the same time.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from ch3ss.search.killers import KillerTable
from ch3ss.search.transposition import TranspositionTable


class SearchAborted(Exception):
    """Raised inside the search when the node budget or stop callback trips."""


@dataclass
class SearchStats:
    """Counters for one search episode."""

    nodes: int = 0
    qnodes: int = 0
    tt_hits: int = 0
    elapsed: float = 0.0
    aborted: bool = False

    @property
    def total_nodes(self) -> int:
        return self.nodes + self.qnodes

    @property
    def nps(self) -> int:
        """Nodes (main + quiescence) per second."""
        if self.elapsed <= 0:
            return 0
        return int(self.total_nodes / self.elapsed)

    def __str__(self) -> str:
        return (
            f"nodes={self.nodes} qnodes={self.qnodes} tt_hits={self.tt_hits} "
            f"time={self.elapsed * 1000:.0f}ms nps={self.nps}"
        )


class SearchSession:
    """
    Mutable search state with an explicit reset boundary.

    Attributes:
        transposition_table: Position cache, kept across searches unless
            clear_tt is set
        killers: Killer moves by ply, reset at every search
        stats: Counters of the current (or last) search
        node_limit: Abort after this many nodes (None = unlimited)
        max_quiescence_plies: Capture plies searched beyond the horizon
        clear_tt: Empty the transposition table at every search
    """

    def __init__(
        self,
        tt_size: int = 1000000,
        node_limit: Optional[int] = None,
        max_quiescence_plies: int = 3,
        clear_tt: bool = False,
    ):
        if node_limit is not None and node_limit <= 0:
            raise ValueError(f"node_limit must be positive, got {node_limit}")
        if max_quiescence_plies < 0:
            raise ValueError(
                f"max_quiescence_plies must be non-negative, got {max_quiescence_plies}"
            )

        self.transposition_table = TranspositionTable(max_size=tt_size)
        self.killers = KillerTable()
        self.stats = SearchStats()
        self.node_limit = node_limit
        self.max_quiescence_plies = max_quiescence_plies
        self.clear_tt = clear_tt
        self.should_stop: Optional[Callable[[], bool]] = None
        self._start_time = 0.0

    def begin(self, should_stop: Optional[Callable[[], bool]] = None):
        """Reset per-search state before a top-level search."""
        if self.clear_tt:
            self.transposition_table.clear()
        self.killers.clear()
        self.stats = SearchStats()
        self.should_stop = should_stop
        self._start_time = time.perf_counter()

    def finish(self) -> SearchStats:
        self.stats.elapsed = time.perf_counter() - self._start_time
        self.should_stop = None
        return self.stats

    def reset(self):
        """Forget everything, e.g. when a new game starts."""
        self.transposition_table.clear()
        self.killers.clear()
        self.stats = SearchStats()

    def count_node(self, quiescence: bool = False):
        """Count a visited node and abort if the budget is spent."""
        if quiescence:
            self.stats.qnodes += 1
        else:
            self.stats.nodes += 1

        if self.node_limit is not None and self.stats.total_nodes > self.node_limit:
            raise SearchAborted("node limit reached")
        if self.should_stop is not None and self.should_stop():
            raise SearchAborted("stop requested")
