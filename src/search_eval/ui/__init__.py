"""User interface components.

Key modules:
    - tui: Rich-based live progress display and summary tables
    - reporting: JSON/CSV result persistence
    - progress: Progress callback type
"""

from search_eval.ui.progress import ProgressCallback, BATCH_RUN_ID, emit
from search_eval.ui.reporting import (
    save_json,
    flatten_for_csv,
    save_csv,
    save_results,
)
from search_eval.ui.tui import TUI, RunDisplayState

__all__ = [
    "ProgressCallback",
    "BATCH_RUN_ID",
    "emit",
    "save_json",
    "flatten_for_csv",
    "save_csv",
    "save_results",
    "TUI",
    "RunDisplayState",
]
