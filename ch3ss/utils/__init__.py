"""
Utilities Module

    - setup_logger: File-based logging for the engine front ends
"""

from ch3ss.utils.log import setup_logger

__all__ = ['setup_logger']
