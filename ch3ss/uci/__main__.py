"""
Main entry point for running CH3SS as a UCI engine.

Usage:
    python -m ch3ss.uci
"""

from ch3ss.uci.interface import UCIEngine


def main():
    engine = UCIEngine()
    engine.run()


if __name__ == "__main__":
    main()
