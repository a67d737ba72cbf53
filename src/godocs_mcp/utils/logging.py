"""
Logging utilities for godocs-mcp
"""

import logging
import sys
from typing import TextIO

from rich.logging import RichHandler


def setup_logging(
    level: str = "INFO",
    format_string: str | None = None,
    include_timestamp: bool = True,
    stream: TextIO | None = None,
) -> None:
    """
    Set up logging configuration for the MCP server.

    Log records go to stderr by default: in stdio mode stdout carries the
    JSON-RPC stream and must not receive anything else.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string for log messages
        include_timestamp: Whether to include timestamp in log messages
        stream: Destination stream (defaults to sys.stderr)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_string is None:
        if include_timestamp:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_string = "%(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=format_string,
        stream=stream or sys.stderr,
        force=True,
    )

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))

    logging.getLogger("godocs_mcp").info(f"Logging configured at {level} level")


def setup_rich_logging(level: str = "WARNING") -> logging.Logger:
    """Configure logging with a rich handler for the interactive CLI"""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
        force=True,
    )
    return logging.getLogger("godocs_mcp")
