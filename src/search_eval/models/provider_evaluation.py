"""
Provider-level evaluation models.

Collects the repeated scoring rounds for one provider on one query and
their per-scoring-system averages.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from search_eval.utils.clock import utc_now_iso
from .score_record import RoundEvaluation


class RoundSummary(BaseModel):
	"""Weighted score of one valid round."""

	round: int
	weighted: float
	timestamp: str


class ScoringAverage(BaseModel):
	"""Averages over the valid rounds of one scoring system."""

	dimensions: dict[str, float] = Field(default_factory=dict)
	weighted: float | None = Field(
	    default=None,
	    description="Mean weighted score; None when no round was valid",
	)
	valid_rounds: int = 0
	error_rounds: int = 0
	total_rounds: int = 0
	rounds: list[RoundSummary] = Field(default_factory=list)

	@property
	def round_success_rate(self) -> float:
		if self.total_rounds == 0:
			return 0.0
		return self.valid_rounds / self.total_rounds


class ProviderEvaluation(BaseModel):
	"""All scoring rounds for one provider on one query."""

	engine: str
	total_results: int = 0
	repeat_times: int = 0
	rounds: dict[str, list[RoundEvaluation]] = Field(default_factory=dict)
	average_scores: dict[str, ScoringAverage] = Field(default_factory=dict)
	timestamp: str = Field(default_factory=utc_now_iso)


class ProviderFailure(BaseModel):
	"""Placeholder for a provider whose search or evaluation failed."""

	engine: str
	error: str
	timestamp: str = Field(default_factory=utc_now_iso)


__all__ = [
    "RoundSummary",
    "ScoringAverage",
    "ProviderEvaluation",
    "ProviderFailure",
]
