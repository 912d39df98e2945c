"""
Logging setup shared by every entry point.

The MCP server speaks over stdout, so all log output goes to stderr.
"""

import logging
import sys


def setup_logging(component_name: str, level: str = "INFO") -> logging.Logger:
    """
    Configure logging for an entry point.

    Args:
        component_name: Name of the component (used as logger name).
        level: Log level string (e.g. 'INFO', 'DEBUG').

    Returns:
        Configured logger instance.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s",
        stream=sys.stderr,
    )
    return logging.getLogger(component_name)
