import pytest

from search_eval.core.evaluator import SingleQueryEvaluator, average_rounds
from search_eval.core.scorer import DimensionScorer
from search_eval.errors import EvaluationCancelled
from search_eval.models.config import Config
from search_eval.models.eval_config import Dimension, EvalConfig
from search_eval.models.provider_evaluation import (
    ProviderEvaluation,
    ProviderFailure,
)
from search_eval.models.score_record import (
    RoundEvaluation,
    RoundStatus,
    ScoreRecord,
)
from search_eval.models.scoring_system import BINARY, FIVE_POINT
from search_eval.models.search import SearchResponse, SearchResultItem
from search_eval.utils.cancellation import CancellationToken

DIMS = [
    Dimension(name="relevance", weight=0.5),
    Dimension(name="accuracy", weight=0.5),
]

RESULTS = [SearchResultItem(title="A", url="https://a.test")]


class ScriptedJudge:
	"""Returns queued answers in call order and records each call."""

	def __init__(self, answers=None, default="<result>2</result>"):
		self.answers = list(answers or [])
		self.default = default
		self.calls = []

	async def judge(self, payload):
		self.calls.append(payload.user)
		answer = self.answers.pop(0) if self.answers else self.default
		if isinstance(answer, Exception):
			raise answer
		return answer


def _evaluator(judge, repeat_times=3, progress_cb=None):
	scorers = {
	    BINARY.name: DimensionScorer(judge, BINARY, dimension_delay_ms=0),
	    FIVE_POINT.name: DimensionScorer(judge, FIVE_POINT,
	                                     dimension_delay_ms=0),
	}
	return SingleQueryEvaluator(
	    scorers,
	    DIMS,
	    repeat_times=repeat_times,
	    dimension_delay_ms=0,
	    repeat_delay_ms=0,
	    progress_cb=progress_cb,
	)


def _rec(dim, score):
	if score is None:
		return ScoreRecord(dimension=dim, scoring_system="five_point", score=0,
		                   error=True)
	return ScoreRecord(dimension=dim, scoring_system="five_point", score=score)


def _round(no, status, weighted, scores):
	return RoundEvaluation(
	    round=no,
	    scoring_system="five_point",
	    status=status,
	    weighted_score=weighted,
	    overall_scores={dim: _rec(dim, score) for dim, score in scores.items()},
	)


def test_average_rounds_excludes_failed_rounds_and_error_records():
	rounds = [
	    _round(1, RoundStatus.SUCCESS, 4.0, {
	        "relevance": 4,
	        "accuracy": 4
	    }),
	    _round(2, RoundStatus.PARTIAL, 5.0, {
	        "relevance": 5,
	        "accuracy": None
	    }),
	    _round(3, RoundStatus.FAILED, 0.0, {
	        "relevance": None,
	        "accuracy": None
	    }),
	]
	avg = average_rounds(rounds, DIMS)
	assert avg.valid_rounds == 2
	assert avg.error_rounds == 1
	assert avg.total_rounds == 3
	assert avg.weighted == pytest.approx(4.5)
	assert avg.dimensions == {"relevance": 4.5, "accuracy": 4.0}
	assert [r.round for r in avg.rounds] == [1, 2]


def test_average_rounds_no_valid_rounds():
	rounds = [_round(1, RoundStatus.FAILED, 0.0, {"relevance": None})]
	avg = average_rounds(rounds, DIMS)
	assert avg.weighted is None
	assert avg.valid_rounds == 0
	assert avg.error_rounds == 1
	assert avg.dimensions == {}


@pytest.mark.asyncio
async def test_evaluate_provider_call_count_and_order():
	judge = ScriptedJudge()
	evaluator = _evaluator(judge, repeat_times=2)
	response = SearchResponse(engine="A", query="q", results=RESULTS)
	ev = await evaluator.evaluate_provider("q", response)
	# dimensions x systems x rounds
	assert len(judge.calls) == 2 * 2 * 2
	scales = ["(binary)" in c for c in judge.calls]
	assert scales == [True, True, False, False, True, True, False, False]
	assert [r.round for r in ev.rounds["binary"]] == [1, 2]
	assert ev.average_scores["binary"].weighted == pytest.approx(2.0)
	assert ev.average_scores["five_point"].weighted == pytest.approx(2.0)
	assert ev.total_results == 1
	assert ev.repeat_times == 2


@pytest.mark.asyncio
async def test_partial_failure_one_dimension_unparseable():
	# round 1 binary: relevance unparseable, accuracy ok
	judge = ScriptedJudge(answers=["???", "<result>2</result>"])
	evaluator = _evaluator(judge, repeat_times=1)
	response = SearchResponse(engine="A", query="q", results=RESULTS)
	ev = await evaluator.evaluate_provider("q", response)
	rnd = ev.rounds["binary"][0]
	assert rnd.status == RoundStatus.PARTIAL
	assert rnd.overall_scores["relevance"].error is True
	assert rnd.weighted_score == pytest.approx(2.0)
	avg = ev.average_scores["binary"]
	assert avg.dimensions == {"accuracy": 2.0}
	assert avg.valid_rounds == 1


@pytest.mark.asyncio
async def test_nan_judge_score_keeps_round_valid():
	judge = ScriptedJudge(answers=['{"score": NaN}', "<result>4</result>"])
	evaluator = _evaluator(judge, repeat_times=1)
	response = SearchResponse(engine="A", query="q", results=RESULTS)
	ev = await evaluator.evaluate_provider("q", response)
	rnd = ev.rounds["binary"][0]
	assert rnd.status == RoundStatus.PARTIAL
	assert rnd.error is None
	assert rnd.overall_scores["accuracy"].score == 2
	assert ev.average_scores["binary"].weighted == pytest.approx(2.0)


@pytest.mark.asyncio
async def test_round_that_raises_is_failed_round():
	judge = ScriptedJudge(answers=[RuntimeError("boom")])
	evaluator = _evaluator(judge, repeat_times=2)
	response = SearchResponse(engine="A", query="q", results=RESULTS)
	ev = await evaluator.evaluate_provider("q", response)
	first = ev.rounds["binary"][0]
	assert first.status == RoundStatus.FAILED
	assert first.error == "boom"
	avg = ev.average_scores["binary"]
	assert avg.valid_rounds == 1
	assert avg.error_rounds == 1
	assert avg.total_rounds == 2


@pytest.mark.asyncio
async def test_evaluate_query_failed_search_becomes_failure():
	judge = ScriptedJudge()
	evaluator = _evaluator(judge, repeat_times=1)
	responses = {
	    "A": SearchResponse(engine="A", query="q", results=RESULTS),
	    "B": SearchResponse(engine="B", query="q", error="HTTP 500"),
	}
	qe = await evaluator.evaluate_query("q", responses, round_no=1,
	                                    query_index=0)
	assert isinstance(qe.engines["A"], ProviderEvaluation)
	assert isinstance(qe.engines["B"], ProviderFailure)
	assert qe.engines["B"].error == "HTTP 500"
	assert qe.summary.total_engines == 2
	assert qe.summary.successful_engines == 1
	assert qe.summary.failures == {"B": "HTTP 500"}
	assert [e.engine for e in qe.summary.rankings.combined] == ["A"]
	# no judge calls for the failed provider
	assert len(judge.calls) == 4
	assert qe.round == 1
	assert qe.query_index == 0


@pytest.mark.asyncio
async def test_evaluate_query_propagates_cancellation():
	judge = ScriptedJudge()
	evaluator = _evaluator(judge, repeat_times=1)
	token = CancellationToken()
	token.cancel()
	responses = {"A": SearchResponse(engine="A", query="q", results=RESULTS)}
	with pytest.raises(EvaluationCancelled):
		await evaluator.evaluate_query("q", responses, cancel_token=token)
	assert judge.calls == []


@pytest.mark.asyncio
async def test_progress_callback_receives_rounds():
	seen = []
	judge = ScriptedJudge()
	evaluator = _evaluator(judge, repeat_times=2,
	                       progress_cb=lambda rid, msg: seen.append((rid, msg)))
	response = SearchResponse(engine="A", query="q", results=RESULTS)
	await evaluator.evaluate_provider("q", response)
	assert seen == [("A", "round 1/2"), ("A", "round 2/2"), ("A", "done")]


def test_from_config_builds_scorer_per_system():
	cfg = Config(REPEAT_TIMES=2, DIMENSION_DELAY_MS=0, REPEAT_DELAY_MS=0)
	eval_cfg = EvalConfig(dimensions=DIMS)
	evaluator = SingleQueryEvaluator.from_config(
	    ScriptedJudge(), eval_cfg, cfg,
	    rubrics={"binary": {
	        "relevance": "custom"
	    }})
	assert list(evaluator.scorers) == ["binary", "five_point"]
	assert evaluator.scorers["binary"].rubrics == {"relevance": "custom"}
	assert evaluator.scorers["five_point"].rubrics == {}
	assert evaluator.repeat_times == 2
