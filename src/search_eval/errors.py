"""
Error taxonomy for the evaluation engine.

Only ConfigInvalid is meant to escape to the caller. Every other error is
recovered at the layer where it occurs and turned into flagged data.
"""

from __future__ import annotations


class EvalError(Exception):
	"""Base class for evaluation engine errors."""


class JudgeUnavailable(EvalError):
	"""The judge endpoint failed on every attempt."""

	def __init__(self, message: str, attempts: int = 0):
		super().__init__(message)
		self.attempts = attempts


class Unparseable(EvalError):
	"""The judge answered but no score could be extracted."""

	def __init__(self, message: str, raw_text: str = ""):
		super().__init__(message)
		self.raw_text = raw_text


class ProviderUnavailable(EvalError):
	"""A search provider could not return a result-set."""

	def __init__(self, engine: str, message: str):
		super().__init__(f"{engine}: {message}")
		self.engine = engine


class ConfigInvalid(EvalError):
	"""Configuration is unusable; raised before any evaluation starts."""


class EvaluationCancelled(EvalError):
	"""The caller cancelled the run or its deadline passed."""


__all__ = [
    "EvalError",
    "JudgeUnavailable",
    "Unparseable",
    "ProviderUnavailable",
    "ConfigInvalid",
    "EvaluationCancelled",
]
