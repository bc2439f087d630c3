"""
logging_config.py — Centralized Logging Configuration for the License Relay

This module configures unified logging behavior for the entire application.
It ensures that all modules log messages consistently to the console and,
when requested, to a file.

Features:
    • Console logging to stdout (Docker/Kubernetes compatible)
    • Optional file logging via the RELAY_LOG_FILE environment variable
    • Process ID tagging for multi-worker visibility
    • Reduced verbosity for the HTTP client libraries (httpx, httpcore)
"""

import logging
import os
import sys

LOG_FORMAT = '%(asctime)s - %(levelname)s - [PID:%(process)d] - %(message)s'


def setup_logging(level=logging.INFO):
    """
    Configures the global logging system for the application.

    The configuration includes:
        - Log level: INFO (default)
        - Log format: timestamp, log level, process ID, and message
        - Output destinations:
            1. Console (stdout): real-time logs
            2. File: only if RELAY_LOG_FILE is set
        - Reduced verbosity for httpx and httpcore, which otherwise log every request

    Args:
        level (int): Root log level.
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    log_file = os.environ.get("RELAY_LOG_FILE")
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name):
    """
    Returns a logger instance for a given module or component name.

    Args:
        name (str): The logger name, typically the module's __name__.

    Returns:
        logging.Logger: A logger that follows the global format and handlers.
    """
    return logging.getLogger(name)
