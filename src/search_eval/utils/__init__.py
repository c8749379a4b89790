"""Shared utility functions.

This subpackage provides common utility functions used across
the application with no dependencies on other subpackages.

Key modules:
    - parsing: Judge response parsing utilities
    - logging: Logging configuration
    - protocols: Protocol definitions for dependency injection
    - cancellation: Cooperative cancellation token
    - clock: Timestamp and delay helpers
"""

from .parsing import (
    extract_result_tag,
    extract_balanced_json,
    parse_bare_number,
    extract_first_number,
    truncate_reasoning,
)
from .logging import configure_logging, get_logger
from .protocols import JudgeProtocol, SearchProviderProtocol
from .cancellation import CancellationToken, check_cancelled
from .clock import utc_now_iso, sleep_ms

__all__ = [
    # parsing
    "extract_result_tag",
    "extract_balanced_json",
    "parse_bare_number",
    "extract_first_number",
    "truncate_reasoning",
    # logging
    "configure_logging",
    "get_logger",
    # protocols
    "JudgeProtocol",
    "SearchProviderProtocol",
    # cancellation
    "CancellationToken",
    "check_cancelled",
    # clock
    "utc_now_iso",
    "sleep_ms",
]
