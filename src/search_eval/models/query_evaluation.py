"""
Query-level evaluation and ranking models.

Defines ranking entries, per-query summaries and the evaluation of one
query across all providers.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from search_eval.utils.clock import utc_now_iso
from .provider_evaluation import ProviderEvaluation, ProviderFailure


class RankingEntry(BaseModel):
	"""One provider's position in a ranking."""

	rank: int
	engine: str
	score: float
	stability: float | None = None
	success_rate: float | None = None


class Rankings(BaseModel):
	"""Rankings per scoring system plus the normalized combined ranking."""

	binary: list[RankingEntry] = Field(default_factory=list)
	five_point: list[RankingEntry] = Field(default_factory=list)
	combined: list[RankingEntry] = Field(default_factory=list)

	def for_system(self, name: str) -> list[RankingEntry]:
		return getattr(self, name)


class QuerySummary(BaseModel):
	"""Success/failure counts and rankings for one query."""

	total_engines: int = 0
	successful_engines: int = 0
	failed_engines: int = 0
	failures: dict[str, str] = Field(default_factory=dict)
	rankings: Rankings = Field(default_factory=Rankings)


class QueryEvaluation(BaseModel):
	"""Evaluation of one query across every provider."""

	query: str
	engines: dict[str, ProviderEvaluation | ProviderFailure] = Field(
	    default_factory=dict)
	summary: QuerySummary = Field(default_factory=QuerySummary)
	round: int | None = None
	query_index: int | None = None
	timestamp: str = Field(default_factory=utc_now_iso)

	def successful(self) -> dict[str, ProviderEvaluation]:
		"""Return provider evaluations that did not fail."""
		return {
		    name: ev
		    for name, ev in self.engines.items()
		    if isinstance(ev, ProviderEvaluation)
		}


__all__ = ["RankingEntry", "Rankings", "QuerySummary", "QueryEvaluation"]
