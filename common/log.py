"""Shared logging utilities for the build and the preview app."""

import logging
import sys

SYMBOLS = {
    logging.DEBUG: '·',
    logging.INFO: '✓',
    logging.WARNING: '⚠',
    logging.ERROR: '✗',
    logging.CRITICAL: '✗',
}


class HealthCheckFilter(logging.Filter):
    """Filter out health check requests from uvicorn access logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Return False to suppress health check log entries."""
        return '/health' not in record.getMessage()


class SymbolFormatter(logging.Formatter):
    """Prefix each record with a symbol for its level (✓, ⚠, ✗)."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the record as '  <symbol> <message>'."""
        symbol = SYMBOLS.get(record.levelno, '•')
        return f'  {symbol} {super().format(record)}'


def configure_logging() -> None:
    """Configure uvicorn access logging to suppress health check entries."""
    logging.getLogger('uvicorn.access').addFilter(HealthCheckFilter())


def configure_build_logging(verbose: bool = False) -> logging.Handler:
    """Send build logs to stderr with level symbols.

    Returns the installed handler. Calling this again replaces the previous
    handler instead of stacking a second one.
    """
    logger = logging.getLogger('portfolio')
    for handler in list(logger.handlers):
        if isinstance(handler.formatter, SymbolFormatter):
            logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(SymbolFormatter('%(message)s'))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return handler
