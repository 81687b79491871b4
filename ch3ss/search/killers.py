"""
Killer Move Table

A killer is a quiet move that caused a cutoff at some ply. Sibling nodes at
the same ply often share the refutation, so killers are tried right after
captures.

Each ply keeps two slots. A new killer moves the current first killer to
the second slot, unless it is already the first killer.

Reference:
    https://www.chessprogramming.org/Killer_Heuristic
"""

import chess
from typing import List, Optional, Tuple


class KillerTable:
    """Two killer moves per ply from the root."""

    def __init__(self, max_ply: int = 64):
        self.slots: List[List[Optional[chess.Move]]] = [[None, None] for _ in range(max_ply)]

    def _ensure(self, ply: int):
        while ply >= len(self.slots):
            self.slots.append([None, None])

    def store(self, ply: int, move: chess.Move):
        """Record a quiet move that caused a cutoff at `ply`."""
        self._ensure(ply)
        slot = self.slots[ply]
        if slot[0] != move:
            slot[1] = slot[0]
            slot[0] = move

    def get(self, ply: int) -> Tuple[Optional[chess.Move], Optional[chess.Move]]:
        """Return (first, second) killers for `ply`; missing slots are None."""
        if ply >= len(self.slots):
            return None, None
        first, second = self.slots[ply]
        return first, second

    def clear(self):
        for slot in self.slots:
            slot[0] = None
            slot[1] = None

    def __repr__(self) -> str:
        filled = sum(1 for slot in self.slots if slot[0] is not None)
        return f"KillerTable(plies={len(self.slots)}, filled={filled})"
