"""
Opening Book

A small table of well-known early positions and the moves to play in them.
A book hit is answered immediately, without searching.
"""

from ch3ss.book.opening import OpeningBook, DEFAULT_OPENING_BOOK

__all__ = ['OpeningBook', 'DEFAULT_OPENING_BOOK']
