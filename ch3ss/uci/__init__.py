"""
UCI Protocol Interface

Lets the engine talk to chess GUIs (Arena, CuteChess, ...) over the
Universal Chess Interface.

Protocol Flow:
    GUI -> "uci"
    Engine -> "id name CH3SS 1.0" ... "uciok"
    GUI -> "isready"
    Engine -> "readyok"
    GUI -> "position startpos moves e2e4"
    GUI -> "go depth 3"
    Engine -> "info depth 3 score cp 25 nodes 12345 ..."
    Engine -> "bestmove e7e5"

Reference:
    UCI Protocol: https://www.chessprogramming.org/UCI
"""

from ch3ss.uci.interface import UCIEngine

__all__ = ['UCIEngine']
