"""
Cooperative cancellation for long batch runs.

A token is checked between cells, rounds and dimensions, never while a
judge call is in flight.
"""

from __future__ import annotations

import time

from search_eval.errors import EvaluationCancelled


class CancellationToken:
	"""Cancellation flag with an optional deadline."""

	def __init__(self, deadline_seconds: float | None = None):
		self._cancelled = False
		self._reason: str | None = None
		self._deadline = (time.monotonic() + deadline_seconds
		                  if deadline_seconds is not None else None)

	def cancel(self, reason: str = "cancelled by caller") -> None:
		"""Request cancellation at the next checkpoint."""
		self._cancelled = True
		self._reason = reason

	@property
	def cancelled(self) -> bool:
		if not self._cancelled and self._deadline is not None:
			if time.monotonic() >= self._deadline:
				self._cancelled = True
				self._reason = "deadline exceeded"
		return self._cancelled

	@property
	def reason(self) -> str | None:
		return self._reason

	def raise_if_cancelled(self) -> None:
		"""Raise EvaluationCancelled if cancellation was requested."""
		if self.cancelled:
			raise EvaluationCancelled(self._reason or "cancelled")


def check_cancelled(token: CancellationToken | None) -> None:
	"""Checkpoint helper that tolerates a missing token."""
	if token is not None:
		token.raise_if_cancelled()


__all__ = ["CancellationToken", "check_cancelled"]
