"""
Single-query evaluation across providers.

Each provider's result-set is scored over several inner rounds on both
scoring systems, and the rounds are averaged per scoring system.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from search_eval.errors import EvaluationCancelled
from search_eval.core.aggregator import summarize_query
from search_eval.core.scorer import DimensionScorer
from search_eval.models.config import Config
from search_eval.models.eval_config import Dimension, EvalConfig
from search_eval.models.provider_evaluation import (
    ProviderEvaluation,
    ProviderFailure,
    RoundSummary,
    ScoringAverage,
)
from search_eval.models.query_evaluation import QueryEvaluation
from search_eval.models.score_record import RoundEvaluation, RoundStatus
from search_eval.models.scoring_system import SCORING_SYSTEMS
from search_eval.models.search import SearchResponse
from search_eval.ui.progress import ProgressCallback, emit
from search_eval.utils.cancellation import CancellationToken, check_cancelled
from search_eval.utils.clock import sleep_ms
from search_eval.utils.logging import get_logger
from search_eval.utils.protocols import JudgeProtocol

logger = get_logger(__name__)


def average_rounds(rounds: Sequence[RoundEvaluation],
                   dimensions: Sequence[Dimension]) -> ScoringAverage:
	"""
	Average the valid rounds of one scoring system.

	Failed rounds are excluded and counted in ``error_rounds``. Error
	records inside valid rounds are left out of the dimension means.

	Parameters:
		rounds: Rounds of one scoring system.
		dimensions: Configured dimensions.

	Returns:
		ScoringAverage; ``weighted`` is None when no round was valid.
	"""
	valid = [r for r in rounds if r.valid]
	dim_means: dict[str, float] = {}
	for dim in dimensions:
		values = [
		    r.overall_scores[dim.name].score
		    for r in valid
		    if dim.name in r.overall_scores
		    and not r.overall_scores[dim.name].error
		]
		if values:
			dim_means[dim.name] = sum(values) / len(values)
	weighted = (sum(r.weighted_score for r in valid) /
	            len(valid) if valid else None)
	return ScoringAverage(
	    dimensions=dim_means,
	    weighted=weighted,
	    valid_rounds=len(valid),
	    error_rounds=len(rounds) - len(valid),
	    total_rounds=len(rounds),
	    rounds=[
	        RoundSummary(round=r.round, weighted=r.weighted_score,
	                     timestamp=r.timestamp) for r in valid
	    ],
	)


class SingleQueryEvaluator:
	"""Evaluates every provider's result-set for one query."""

	def __init__(
	    self,
	    scorers: Mapping[str, DimensionScorer],
	    dimensions: Sequence[Dimension],
	    repeat_times: int = 3,
	    dimension_delay_ms: int = 1000,
	    repeat_delay_ms: int = 1000,
	    progress_cb: ProgressCallback | None = None,
	):
		self.scorers = dict(scorers)
		self.dimensions = list(dimensions)
		self.repeat_times = repeat_times
		self.dimension_delay_ms = dimension_delay_ms
		self.repeat_delay_ms = repeat_delay_ms
		self.progress_cb = progress_cb

	@classmethod
	def from_config(
	    cls,
	    judge: JudgeProtocol,
	    eval_config: EvalConfig,
	    config: Config,
	    rubrics: Mapping[str, Mapping[str, str]] | None = None,
	    progress_cb: ProgressCallback | None = None,
	) -> "SingleQueryEvaluator":
		"""Build an evaluator with one scorer per scoring system."""
		rubrics = rubrics or {}
		scorers = {
		    name: DimensionScorer(
		        judge,
		        system,
		        rubrics=rubrics.get(name),
		        dimension_delay_ms=config.dimension_delay_ms,
		    ) for name, system in SCORING_SYSTEMS.items()
		}
		return cls(
		    scorers,
		    eval_config.dimensions,
		    repeat_times=config.repeat_times,
		    dimension_delay_ms=config.dimension_delay_ms,
		    repeat_delay_ms=config.repeat_delay_ms,
		    progress_cb=progress_cb,
		)

	async def _score_round(self, scorer: DimensionScorer,
	                       response: SearchResponse, query: str,
	                       round_no: int,
	                       cancel_token: CancellationToken | None
	                       ) -> RoundEvaluation:
		try:
			return await scorer.score_round(
			    response.results,
			    query,
			    self.dimensions,
			    round_no,
			    cancel_token=cancel_token,
			    dimension_delay_ms=self.dimension_delay_ms,
			)
		except EvaluationCancelled:
			raise
		except Exception as exc:
			logger.warning(
			    "round %d failed engine=%s system=%s: %s",
			    round_no,
			    response.engine,
			    scorer.scoring_system.name,
			    exc,
			)
			return RoundEvaluation(
			    round=round_no,
			    scoring_system=scorer.scoring_system.name,
			    status=RoundStatus.FAILED,
			    error=str(exc),
			)

	async def evaluate_provider(
	    self,
	    query: str,
	    response: SearchResponse,
	    cancel_token: CancellationToken | None = None,
	) -> ProviderEvaluation:
		"""
		Score one provider's result-set over the configured rounds.

		Parameters:
			query: Query text.
			response: The provider's successful search response.
			cancel_token: Checked before each judge call.

		Returns:
			ProviderEvaluation with per-system rounds and averages.

		Raises:
			EvaluationCancelled: If the token was cancelled.
		"""
		engine = response.engine
		logger.info("evaluate_provider start engine=%s results=%d", engine,
		            len(response.results))
		rounds: dict[str, list[RoundEvaluation]] = {
		    name: [] for name in self.scorers
		}
		for round_no in range(1, self.repeat_times + 1):
			if round_no > 1:
				await sleep_ms(self.repeat_delay_ms)
			check_cancelled(cancel_token)
			emit(self.progress_cb, engine,
			     f"round {round_no}/{self.repeat_times}")
			for name, scorer in self.scorers.items():
				rounds[name].append(await self._score_round(
				    scorer, response, query, round_no, cancel_token))
		averages = {
		    name: average_rounds(system_rounds, self.dimensions)
		    for name, system_rounds in rounds.items()
		}
		emit(self.progress_cb, engine, "done")
		logger.info("evaluate_provider done engine=%s", engine)
		return ProviderEvaluation(
		    engine=engine,
		    total_results=len(response.results),
		    repeat_times=self.repeat_times,
		    rounds=rounds,
		    average_scores=averages,
		)

	async def evaluate_query(
	    self,
	    query: str,
	    responses: Mapping[str, SearchResponse],
	    cancel_token: CancellationToken | None = None,
	    round_no: int | None = None,
	    query_index: int | None = None,
	) -> QueryEvaluation:
		"""
		Evaluate every provider's response for one query, sequentially.

		Providers whose search failed, or whose evaluation raised, are
		recorded as ProviderFailure.

		Raises:
			EvaluationCancelled: If the token was cancelled.
		"""
		engines: dict[str, ProviderEvaluation | ProviderFailure] = {}
		for name, response in responses.items():
			if response.error is not None:
				logger.warning("search failed engine=%s: %s", name,
				               response.error)
				emit(self.progress_cb, name, f"search failed: {response.error}")
				engines[name] = ProviderFailure(engine=name,
				                                error=response.error)
				continue
			try:
				engines[name] = await self.evaluate_provider(
				    query, response, cancel_token)
			except EvaluationCancelled:
				raise
			except Exception as exc:
				logger.warning("evaluation failed engine=%s: %s", name, exc)
				engines[name] = ProviderFailure(engine=name, error=str(exc))
		return QueryEvaluation(
		    query=query,
		    engines=engines,
		    summary=summarize_query(engines),
		    round=round_no,
		    query_index=query_index,
		)


__all__ = ["SingleQueryEvaluator", "average_rounds"]
