"""
Batch-level aggregation models.

Holds the (round, query) cells of a batch run, the per-provider
performance statistics across all cells and the final rankings.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from search_eval.utils.clock import utc_now_iso
from .query_evaluation import QueryEvaluation, Rankings


class ScoreStats(BaseModel):
	"""Descriptive statistics over a sample of weighted scores."""

	mean: float
	min: float
	max: float
	std_dev: float
	count: int


class StabilityStats(BaseModel):
	"""Spread of a score sample; lower values mean a steadier provider."""

	coefficient_of_variation: float
	range: float


class AggregatedPerformance(BaseModel):
	"""Batch-wide performance of one provider."""

	engine: str
	success_rate: float = 0.0
	total_cells: int = 0
	successful_cells: int = 0
	attempted: bool = Field(
	    default=False,
	    description="False when the provider never appeared in a completed cell",
	)
	average_scores: dict[str, ScoreStats] = Field(default_factory=dict)
	score_stability: dict[str, StabilityStats] = Field(default_factory=dict)


class BatchCell(BaseModel):
	"""Outcome of one query in one outer round."""

	round: int
	query_index: int
	query: str
	evaluation: QueryEvaluation | None = None
	error: str | None = None
	timestamp: str = Field(default_factory=utc_now_iso)


class BatchRound(BaseModel):
	"""All cells of one outer round."""

	round: int
	cells: list[BatchCell] = Field(default_factory=list)
	timestamp: str = Field(default_factory=utc_now_iso)


class TestSummary(BaseModel):
	"""Cell-level counts across the whole batch."""

	__test__ = False

	total_rounds: int = 0
	total_cells: int = 0
	successful_cells: int = 0
	failed_cells: int = 0
	success_rate: float = 0.0
	engines_tested: list[str] = Field(default_factory=list)
	queries_tested: list[str] = Field(default_factory=list)
	not_attempted: list[str] = Field(
	    default_factory=list,
	    description="Registered providers that never appeared in a completed cell",
	)


class BatchMetadata(BaseModel):
	"""Run parameters recorded alongside the report."""

	total_rounds: int = 0
	total_queries: int = 0
	repeat_times: int = 0
	batch_rounds: int = 0
	enabled_engines: list[str] = Field(default_factory=list)
	dimensions: list[str] = Field(default_factory=list)
	generation_time: str = Field(default_factory=utc_now_iso)


class BatchReport(BaseModel):
	"""Final report of a batch run."""

	metadata: BatchMetadata = Field(default_factory=BatchMetadata)
	rounds: list[BatchRound] = Field(default_factory=list)
	performance: dict[str, AggregatedPerformance] = Field(
	    default_factory=dict)
	rankings: Rankings = Field(default_factory=Rankings)
	summary: TestSummary = Field(default_factory=TestSummary)
	cancelled: bool = False
	cancel_reason: str | None = None


__all__ = [
    "ScoreStats",
    "StabilityStats",
    "AggregatedPerformance",
    "BatchCell",
    "BatchRound",
    "TestSummary",
    "BatchMetadata",
    "BatchReport",
]
