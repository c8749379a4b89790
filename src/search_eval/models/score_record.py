"""
Per-dimension and per-round scoring records.

A ScoreRecord is the outcome of one judge call for one dimension. A
RoundEvaluation groups the records of one scoring pass over all
dimensions together with their weighted score.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from search_eval.utils.clock import utc_now_iso
from .search import SearchResultItem


class ScoreRecord(BaseModel):
	"""Judge outcome for one result-set on one dimension."""

	dimension: str
	scoring_system: str
	score: int = Field(description="Clamped score; 0 for error records")
	reasoning: str = ""
	result_count: int = 0
	timestamp: str = Field(default_factory=utc_now_iso)
	error: bool = False


class ScoredResult(SearchResultItem):
	"""A search hit annotated with the round's dimension scores."""

	dimension_scores: dict[str, int] = Field(default_factory=dict)
	weighted_score: float = 0.0


class RoundStatus(str, Enum):
	"""Outcome of one scoring round."""

	SUCCESS = "success"
	PARTIAL = "partial"
	FAILED = "failed"


class RoundEvaluation(BaseModel):
	"""One scoring pass over all dimensions for one provider."""

	round: int
	scoring_system: str
	overall_scores: dict[str, ScoreRecord] = Field(default_factory=dict)
	weighted_score: float = 0.0
	results: list[ScoredResult] = Field(
	    default_factory=list,
	    description="Each result with the round's scores applied",
	)
	status: RoundStatus = RoundStatus.SUCCESS
	error: str | None = Field(
	    default=None,
	    description="Set when the round itself raised",
	)
	timestamp: str = Field(default_factory=utc_now_iso)

	@property
	def valid(self) -> bool:
		"""Return True when the round counts towards averages."""
		return self.status != RoundStatus.FAILED

	@property
	def failed_dimensions(self) -> list[str]:
		return [
		    name for name, rec in self.overall_scores.items() if rec.error
		]


__all__ = ["ScoreRecord", "ScoredResult", "RoundStatus", "RoundEvaluation"]
