"""
Logging setup.

Library modules only call logging.getLogger(__name__); front ends (UCI
loop, worker) call setup_logger() once to send the "ch3ss" logger tree to a
file, since stdout belongs to the protocol.
"""

import logging
from pathlib import Path
from typing import Optional

DEFAULT_LOG_FILE = Path.home() / ".ch3ss" / "engine.log"


def setup_logger(debug: bool = True, log_file: Optional[Path] = None) -> logging.Logger:
    """
    Setup file-based logger.

    Args:
        debug: If True, log at DEBUG level; otherwise INFO level
        log_file: Destination (default ~/.ch3ss/engine.log)

    Returns:
        Configured "ch3ss" logger
    """
    log_file = Path(log_file) if log_file is not None else DEFAULT_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("ch3ss")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    handler = logging.FileHandler(log_file, mode='w')
    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
