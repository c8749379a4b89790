"""
Batch runs over a query set.

Repeats the whole query set for several outer rounds, evaluates every
(round, query) cell and aggregates per-provider performance across all
cells: mean, spread and stability of each provider's weighted scores.
"""

from __future__ import annotations

import statistics
from collections.abc import Sequence
from typing import Any

from search_eval.errors import EvaluationCancelled
from search_eval.core.aggregator import combined_score, rank_entries
from search_eval.core.evaluator import SingleQueryEvaluator
from search_eval.integrations.search import ProviderRegistry, search_all
from search_eval.models.batch_report import (
    AggregatedPerformance,
    BatchCell,
    BatchMetadata,
    BatchReport,
    BatchRound,
    ScoreStats,
    StabilityStats,
    TestSummary,
)
from search_eval.models.provider_evaluation import ProviderEvaluation
from search_eval.models.query_evaluation import RankingEntry, Rankings
from search_eval.models.scoring_system import BINARY, FIVE_POINT, SCORING_SYSTEMS
from search_eval.ui.progress import BATCH_RUN_ID, ProgressCallback, emit
from search_eval.utils.cancellation import CancellationToken, check_cancelled
from search_eval.utils.clock import sleep_ms
from search_eval.utils.logging import get_logger

logger = get_logger(__name__)


def _completed_cells(rounds: Sequence[BatchRound]) -> list[BatchCell]:
	return [
	    cell for rnd in rounds for cell in rnd.cells
	    if cell.evaluation is not None
	]


def score_stats(values: Sequence[float]) -> tuple[ScoreStats, StabilityStats]:
	"""
	Describe a non-empty sample of weighted scores.

	Uses the population standard deviation. The coefficient of variation
	is 0 when the mean is 0.
	"""
	mean = statistics.fmean(values)
	std_dev = statistics.pstdev(values)
	cov = std_dev / mean if mean != 0 else 0.0
	stats = ScoreStats(
	    mean=mean,
	    min=min(values),
	    max=max(values),
	    std_dev=std_dev,
	    count=len(values),
	)
	return stats, StabilityStats(coefficient_of_variation=cov,
	                             range=max(values) - min(values))


def aggregate_performance(
        rounds: Sequence[BatchRound],
        engines: Sequence[str] = ()) -> dict[str, AggregatedPerformance]:
	"""
	Aggregate each provider's results over every completed cell.

	A cell counts as successful for a provider when the provider was
	evaluated and got a mean weighted score on at least one scoring
	system. Registered providers that never appeared in a completed
	cell are reported with ``attempted=False``.

	Parameters:
		rounds: Batch rounds.
		engines: Registered provider names, so that providers absent
			from every cell are still reported.

	Returns:
		Performance keyed by provider name.
	"""
	order = list(engines)
	total: dict[str, int] = {name: 0 for name in order}
	successful: dict[str, int] = {name: 0 for name in order}
	samples: dict[str, dict[str, list[float]]] = {}

	for cell in _completed_cells(rounds):
		for name, ev in cell.evaluation.engines.items():
			if name not in total:
				order.append(name)
				total[name] = 0
				successful[name] = 0
			total[name] += 1
			if not isinstance(ev, ProviderEvaluation):
				continue
			scored = False
			for system, avg in ev.average_scores.items():
				if avg.weighted is None:
					continue
				samples.setdefault(name, {}).setdefault(system,
				                                        []).append(avg.weighted)
				scored = True
			if scored:
				successful[name] += 1

	performance: dict[str, AggregatedPerformance] = {}
	for name in order:
		average_scores: dict[str, ScoreStats] = {}
		stability: dict[str, StabilityStats] = {}
		for system in SCORING_SYSTEMS:
			values = samples.get(name, {}).get(system)
			if values:
				average_scores[system], stability[system] = score_stats(
				    values)
		performance[name] = AggregatedPerformance(
		    engine=name,
		    success_rate=(successful[name] /
		                  total[name] if total[name] else 0.0),
		    total_cells=total[name],
		    successful_cells=successful[name],
		    attempted=total[name] > 0,
		    average_scores=average_scores,
		    score_stability=stability,
		)
	return performance


def rank_performance(
        performance: dict[str, AggregatedPerformance]) -> Rankings:
	"""
	Rank providers by batch-wide mean weighted score.

	Stability is ``1 - CoV``; for the combined ranking it is the mean
	stability over the scoring systems the provider was scored on.
	"""
	rankings: dict[str, list[RankingEntry]] = {}
	for system in SCORING_SYSTEMS:
		items: list[dict[str, Any]] = []
		for name, perf in performance.items():
			stats = perf.average_scores.get(system)
			if stats is None:
				continue
			items.append({
			    "engine": name,
			    "score": stats.mean,
			    "stability":
			    1 - perf.score_stability[system].coefficient_of_variation,
			    "success_rate": perf.success_rate,
			})
		rankings[system] = rank_entries(items)

	combined: list[dict[str, Any]] = []
	for name, perf in performance.items():
		if not perf.average_scores:
			continue
		binary = perf.average_scores.get(BINARY.name)
		five_point = perf.average_scores.get(FIVE_POINT.name)
		stabilities = [
		    1 - s.coefficient_of_variation
		    for s in perf.score_stability.values()
		]
		combined.append({
		    "engine": name,
		    "score": combined_score(
		        binary.mean if binary else None,
		        five_point.mean if five_point else None,
		    ),
		    "stability": sum(stabilities) / len(stabilities),
		    "success_rate": perf.success_rate,
		})
	rankings["combined"] = rank_entries(combined)
	return Rankings(**rankings)


def summarize_batch(rounds: Sequence[BatchRound],
                    engines: Sequence[str] = ()) -> TestSummary:
	"""Count cells and list the providers and queries that were tested."""
	cells = [cell for rnd in rounds for cell in rnd.cells]
	completed = _completed_cells(rounds)
	tested: list[str] = []
	for cell in completed:
		for name in cell.evaluation.engines:
			if name not in tested:
				tested.append(name)
	queries: list[str] = []
	for cell in cells:
		if cell.query not in queries:
			queries.append(cell.query)
	return TestSummary(
	    total_rounds=len(rounds),
	    total_cells=len(cells),
	    successful_cells=len(completed),
	    failed_cells=len(cells) - len(completed),
	    success_rate=len(completed) / len(cells) if cells else 0.0,
	    engines_tested=tested,
	    queries_tested=queries,
	    not_attempted=[name for name in engines if name not in tested],
	)


class BatchAggregationEngine:
	"""Runs the outer rounds of a batch and aggregates the results."""

	def __init__(
	    self,
	    registry: ProviderRegistry,
	    evaluator: SingleQueryEvaluator,
	    batch_rounds: int = 3,
	    query_delay_ms: int = 2000,
	    round_delay_ms: int = 5000,
	    search_options: dict[str, Any] | None = None,
	    provider_timeout_seconds: float | None = 30,
	    progress_cb: ProgressCallback | None = None,
	):
		self.registry = registry
		self.evaluator = evaluator
		self.batch_rounds = batch_rounds
		self.query_delay_ms = query_delay_ms
		self.round_delay_ms = round_delay_ms
		self.search_options = search_options
		self.provider_timeout_seconds = provider_timeout_seconds
		self.progress_cb = progress_cb

	async def run_cell(
	    self,
	    round_no: int,
	    query_index: int,
	    query: str,
	    cancel_token: CancellationToken | None = None,
	) -> BatchCell:
		"""
		Search all providers for one query and evaluate the responses.

		Any failure other than cancellation becomes an error cell.

		Raises:
			EvaluationCancelled: If the token was cancelled mid-cell.
		"""
		try:
			responses = await search_all(
			    self.registry,
			    query,
			    self.search_options,
			    self.provider_timeout_seconds,
			)
			evaluation = await self.evaluator.evaluate_query(
			    query,
			    responses,
			    cancel_token,
			    round_no=round_no,
			    query_index=query_index,
			)
		except EvaluationCancelled:
			raise
		except Exception as exc:
			logger.warning("cell failed round=%d query=%d: %s", round_no,
			               query_index, exc)
			return BatchCell(round=round_no, query_index=query_index,
			                 query=query, error=str(exc))
		return BatchCell(round=round_no, query_index=query_index, query=query,
		                 evaluation=evaluation)

	async def run(
	    self,
	    queries: Sequence[str],
	    cancel_token: CancellationToken | None = None,
	) -> BatchReport:
		"""
		Run every query for every outer round and build the report.

		Cancellation is checked before each cell; a cancelled run keeps
		the cells completed so far and is flagged ``cancelled``.

		Parameters:
			queries: Queries in evaluation order.
			cancel_token: Optional cancellation token.

		Returns:
			BatchReport with cells, performance, rankings and summary.
		"""
		engines = self.registry.names()
		logger.info(
		    "batch start rounds=%d queries=%d providers=%s",
		    self.batch_rounds,
		    len(queries),
		    ",".join(engines),
		)
		rounds: list[BatchRound] = []
		cancelled = False
		cancel_reason = None
		try:
			for round_no in range(1, self.batch_rounds + 1):
				if round_no > 1:
					await sleep_ms(self.round_delay_ms)
				current = BatchRound(round=round_no)
				try:
					for index, query in enumerate(queries):
						if index > 0:
							await sleep_ms(self.query_delay_ms)
						check_cancelled(cancel_token)
						emit(
						    self.progress_cb, BATCH_RUN_ID,
						    f"round {round_no}/{self.batch_rounds} "
						    f"query {index + 1}/{len(queries)}")
						logger.info("cell start round=%d query=%d", round_no,
						            index)
						current.cells.append(await self.run_cell(
						    round_no, index, query, cancel_token))
				finally:
					if current.cells:
						rounds.append(current)
		except EvaluationCancelled as exc:
			cancelled = True
			cancel_reason = str(exc)
			logger.warning("batch cancelled: %s", cancel_reason)
			emit(self.progress_cb, BATCH_RUN_ID, f"cancelled: {cancel_reason}")

		performance = aggregate_performance(rounds, engines)
		report = BatchReport(
		    metadata=BatchMetadata(
		        total_rounds=len(rounds),
		        total_queries=len(queries),
		        repeat_times=self.evaluator.repeat_times,
		        batch_rounds=self.batch_rounds,
		        enabled_engines=engines,
		        dimensions=[d.name for d in self.evaluator.dimensions],
		    ),
		    rounds=rounds,
		    performance=performance,
		    rankings=rank_performance(performance),
		    summary=summarize_batch(rounds, engines),
		    cancelled=cancelled,
		    cancel_reason=cancel_reason,
		)
		if not cancelled:
			emit(self.progress_cb, BATCH_RUN_ID, "done")
		logger.info("batch done cells=%d cancelled=%s",
		            report.summary.total_cells, cancelled)
		return report


__all__ = [
    "BatchAggregationEngine",
    "aggregate_performance",
    "rank_performance",
    "summarize_batch",
    "score_stats",
]
