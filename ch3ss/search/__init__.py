"""
Search Module

This module implements the move search: minimax with alpha-beta pruning,
quiescence search at the horizon, move ordering heuristics, and the caches
that make pruning effective.

Key Components:
    - find_best_move: Root-level search function
    - minimax: Core recursive search with alpha-beta pruning
    - quiesce: Capture-only search beyond the horizon
    - order_moves / order_captures: Move ordering heuristics
    - TranspositionTable: Zobrist-keyed position cache
    - KillerTable: Quiet cutoff moves per ply
    - SearchSession: Mutable state of a search (tables, stats, budget)
"""

from ch3ss.search.minimax import minimax, find_best_move, principal_variation
from ch3ss.search.quiescence import quiesce
from ch3ss.search.ordering import order_moves, order_captures, mvv_lva
from ch3ss.search.transposition import TranspositionTable, NodeType, zobrist_hash
from ch3ss.search.killers import KillerTable
from ch3ss.search.session import SearchSession, SearchStats, SearchAborted

__all__ = [
    'minimax',
    'find_best_move',
    'principal_variation',
    'quiesce',
    'order_moves',
    'order_captures',
    'mvv_lva',
    'TranspositionTable',
    'NodeType',
    'zobrist_hash',
    'KillerTable',
    'SearchSession',
    'SearchStats',
    'SearchAborted',
]
