"""
Logging Configuration

Sets up the ``tire_catalog`` logger for the CLI scripts and the web app.
Everything goes to stderr; the CLIs keep stdout for their summaries and
the exported JSON.
"""

import logging
import sys

CLI_FORMAT = "%(levelname)-8s %(name)s: %(message)s"
SERVER_FORMAT = "%(asctime)s " + CLI_FORMAT


def setup_logging(verbose: bool = False, quiet: bool = False, timestamps: bool = False) -> None:
    """
    Attach a single stderr handler to the package logger.

    Args:
        verbose: DEBUG level (per-page fetch details)
        quiet: WARNING level (skipped images, upstream failures only)
        timestamps: Prefix each line with the time, for the long-running server
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(SERVER_FORMAT if timestamps else CLI_FORMAT))

    package_logger = logging.getLogger("tire_catalog")
    package_logger.setLevel(level)

    # Re-running (Flask reloader, tests) replaces the handler instead of stacking
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
