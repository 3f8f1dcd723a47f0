"""
Logging setup for the command line and GUI front ends.
"""
import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose=False, log_file=None):
    """
    Set up the root logger.

    Args:
        verbose: log debug records (per-structure decisions) to the console
        log_file: optional path for a plain-text copy of the log
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose or log_file else logging.INFO)

    # Clear existing handlers
    root_logger.handlers.clear()

    # Console handler on stderr, so stdout stays clean for --json
    console_handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        root_logger.addHandler(file_handler)
