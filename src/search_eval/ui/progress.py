"""
Progress callback type shared by the engine and the TUI.

The engine reports free-form status lines keyed by a run id: a provider
name for provider-level work, or ``"batch"`` for cell/round boundaries.
"""

from __future__ import annotations

from typing import Callable, Optional

ProgressCallback = Callable[[str, str], None]

BATCH_RUN_ID = "batch"


def emit(progress_cb: Optional[ProgressCallback], run_id: str,
         msg: str) -> None:
	"""Invoke the callback if one is set."""
	if progress_cb:
		progress_cb(run_id, msg)


__all__ = ["ProgressCallback", "BATCH_RUN_ID", "emit"]
