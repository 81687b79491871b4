"""
External Engine Module

Delegation to a third-party UCI engine (Stockfish), used as an alternative
move source entirely outside the built-in search.
"""

from ch3ss.external.stockfish import StockfishEngine, parse_bestmove, apply_uci_move

__all__ = ['StockfishEngine', 'parse_bestmove', 'apply_uci_move']
