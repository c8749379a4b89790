"""
Dimension scoring against the judge.

Builds one judge request per (result-set, dimension), turns the answer
into a clamped ScoreRecord and groups a pass over all dimensions into a
RoundEvaluation.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from string import Template

from search_eval.errors import JudgeUnavailable, Unparseable
from search_eval.core.judge import parse_judge_response
from search_eval.core.weighting import combine_weighted_scores
from search_eval.loaders.prompts import (
    RUBRIC_TEMPLATE,
    SCORING_REQUEST_TEMPLATE,
    load_prompt,
)
from search_eval.models.eval_config import Dimension
from search_eval.models.prompt import JudgePrompt
from search_eval.models.score_record import (
    RoundEvaluation,
    RoundStatus,
    ScoredResult,
    ScoreRecord,
)
from search_eval.models.scoring_system import ScoringSystem
from search_eval.models.search import SearchResultItem
from search_eval.utils.cancellation import CancellationToken, check_cancelled
from search_eval.utils.clock import sleep_ms
from search_eval.utils.logging import get_logger
from search_eval.utils.parsing import truncate_reasoning
from search_eval.utils.protocols import JudgeProtocol

logger = get_logger(__name__)

SNIPPET_LIMIT = 300


def format_results(results: Sequence[SearchResultItem]) -> str:
	"""Render a compact numbered listing of a result-set."""
	if not results:
		return "(no results)"
	lines = []
	for i, item in enumerate(results, start=1):
		lines.append(f"{i}. {item.title or '(untitled)'}")
		if item.url:
			lines.append(f"   URL: {item.url}")
		if item.source:
			lines.append(f"   Source: {item.source}")
		if item.published_time:
			lines.append(f"   Published: {item.published_time}")
		snippet = (item.snippet or "").strip()
		if snippet:
			if len(snippet) > SNIPPET_LIMIT:
				snippet = snippet[:SNIPPET_LIMIT] + "..."
			lines.append(f"   {snippet}")
	return "\n".join(lines)


def classify_round(records: Mapping[str, ScoreRecord]) -> RoundStatus:
	"""Return FAILED when every record errored, PARTIAL when some did."""
	errors = sum(1 for rec in records.values() if rec.error)
	if not records or errors == len(records):
		return RoundStatus.FAILED
	if errors:
		return RoundStatus.PARTIAL
	return RoundStatus.SUCCESS


class DimensionScorer:
	"""Scores result-sets on one scoring system."""

	def __init__(
	    self,
	    judge: JudgeProtocol,
	    scoring_system: ScoringSystem,
	    rubrics: Mapping[str, str] | None = None,
	    dimension_delay_ms: int = 1000,
	):
		self.judge = judge
		self.scoring_system = scoring_system
		self.rubrics = dict(rubrics or {})
		self.dimension_delay_ms = dimension_delay_ms
		self._rubric_template = Template(load_prompt(RUBRIC_TEMPLATE))
		self._request_template = Template(
		    load_prompt(SCORING_REQUEST_TEMPLATE))

	def _template_values(self, dimension: Dimension) -> dict[str, object]:
		system = self.scoring_system
		return {
		    "dimension": dimension.name,
		    "description": dimension.description or dimension.name,
		    "scale_name": system.name,
		    "minimum": system.minimum,
		    "maximum": system.maximum,
		    "scale_lines": system.describe_scale(),
		}

	def build_prompt(self, results: Sequence[SearchResultItem], query: str,
	                 dimension: Dimension) -> JudgePrompt:
		"""
		Build the system rubric and user content for one judge call.

		A configured rubric for the dimension replaces the bundled
		default; ``$``-placeholders in it are filled where known.
		"""
		values = self._template_values(dimension)
		custom = self.rubrics.get(dimension.name)
		if custom:
			system_prompt = Template(custom).safe_substitute(values)
		else:
			system_prompt = self._rubric_template.substitute(values)
		user_prompt = self._request_template.substitute(
		    values,
		    query=query,
		    result_count=len(results),
		    results=format_results(results),
		)
		return JudgePrompt(system=system_prompt, user=user_prompt)

	def _error_record(self, dimension: Dimension, reasoning: str,
	                  result_count: int) -> ScoreRecord:
		return ScoreRecord(
		    dimension=dimension.name,
		    scoring_system=self.scoring_system.name,
		    score=0,
		    reasoning=reasoning,
		    result_count=result_count,
		    error=True,
		)

	async def score_dimension(self, results: Sequence[SearchResultItem],
	                          query: str, dimension: Dimension) -> ScoreRecord:
		"""
		Score a result-set on one dimension with a single judge call.

		Parameters:
			results: The provider's ranked results for the query.
			query: The query the results were returned for.
			dimension: Dimension to judge.

		Returns:
			ScoreRecord with a clamped score, or an error record when
			the judge was unavailable or its answer had no score.
		"""
		prompt = self.build_prompt(results, query, dimension)
		try:
			text = await self.judge.judge(prompt)
		except JudgeUnavailable as exc:
			logger.warning("judge unavailable system=%s dimension=%s: %s",
			               self.scoring_system.name, dimension.name, exc)
			return self._error_record(dimension, str(exc), len(results))
		try:
			parsed = parse_judge_response(text)
		except Unparseable as exc:
			logger.warning(
			    "unparseable judge answer system=%s dimension=%s: %s",
			    self.scoring_system.name,
			    dimension.name,
			    truncate_reasoning(exc.raw_text),
			)
			return self._error_record(dimension, exc.raw_text or str(exc),
			                          len(results))
		score = self.scoring_system.clamp(parsed.score)
		if not self.scoring_system.contains(parsed.score):
			logger.debug("out-of-range score %s clamped to %d for dimension=%s",
			             parsed.score, score, dimension.name)
		return ScoreRecord(
		    dimension=dimension.name,
		    scoring_system=self.scoring_system.name,
		    score=score,
		    reasoning=parsed.reasoning,
		    result_count=len(results),
		)

	async def score_round(
	    self,
	    results: Sequence[SearchResultItem],
	    query: str,
	    dimensions: Sequence[Dimension],
	    round_no: int,
	    cancel_token: CancellationToken | None = None,
	    dimension_delay_ms: int | None = None,
	) -> RoundEvaluation:
		"""
		Score every dimension once, in configured order.

		Parameters:
			results: Result-set to score.
			query: Query text.
			dimensions: Dimensions in configured order.
			round_no: 1-based round number.
			cancel_token: Checked before each judge call.
			dimension_delay_ms: Pause between dimensions; defaults to
				the scorer's setting.

		Returns:
			RoundEvaluation with the weighted score and status.

		Raises:
			EvaluationCancelled: If the token was cancelled.
		"""
		delay = (self.dimension_delay_ms
		         if dimension_delay_ms is None else dimension_delay_ms)
		records: dict[str, ScoreRecord] = {}
		for i, dim in enumerate(dimensions):
			if i > 0:
				await sleep_ms(delay)
			check_cancelled(cancel_token)
			records[dim.name] = await self.score_dimension(results, query, dim)
		status = classify_round(records)
		weighted = combine_weighted_scores(records, dimensions)
		logger.info(
		    "round %d system=%s status=%s weighted=%.3f",
		    round_no,
		    self.scoring_system.name,
		    status.value,
		    weighted,
		)
		round_eval = RoundEvaluation(
		    round=round_no,
		    scoring_system=self.scoring_system.name,
		    overall_scores=records,
		    weighted_score=weighted,
		    status=status,
		)
		round_eval.results = self.apply_scores(results, round_eval)
		return round_eval

	def apply_scores(self, results: Sequence[SearchResultItem],
	                 round_eval: RoundEvaluation) -> list[ScoredResult]:
		"""Annotate each result with the round's non-error scores."""
		scores = {
		    name: rec.score
		    for name, rec in round_eval.overall_scores.items() if not rec.error
		}
		return [
		    ScoredResult(
		        **item.model_dump(),
		        dimension_scores=dict(scores),
		        weighted_score=round_eval.weighted_score,
		    ) for item in results
		]


__all__ = ["DimensionScorer", "format_results", "classify_round"]
