import pytest

from search_eval.core import runner
from search_eval.integrations.search import ProviderRegistry
from search_eval.models.config import Config
from search_eval.models.eval_config import EvalConfig
from search_eval.models.run_params import RunParams
from search_eval.models.search import SearchResponse, SearchResultItem


class DummyProvider:

	def __init__(self, name):
		self.name = name

	async def search(self, query, options=None):
		return SearchResponse(engine=self.name, query=query,
		                      results=[SearchResultItem(title=query)])


class DummyJudge:

	async def judge(self, payload):
		return "Mostly relevant. <result>4</result>"


def _config(tmp_path, **overrides):
	values = dict(
	    JUDGE_URL="https://judge.test",
	    JUDGE_MODEL="m",
	    JUDGE_API_KEY="k",
	    REPEAT_TIMES=1,
	    BATCH_ROUNDS=1,
	    DIMENSION_DELAY_MS=0,
	    REPEAT_DELAY_MS=0,
	    QUERY_DELAY_MS=0,
	    ROUND_DELAY_MS=0,
	    OUTPUT_DIR=str(tmp_path / "results"),
	)
	values.update(overrides)
	return Config(**values)


EVAL_CONFIG = EvalConfig.from_mapping({
    "dimensions": [{
        "name": "relevance",
        "weight": 1.0
    }],
    "providers": {
        "serper": {
            "enabled": True,
            "api_key": "x"
        }
    },
})


def test_resolve_queries(tmp_path):
	assert runner.resolve_queries(RunParams(query="one")) == ["one"]
	f = tmp_path / "q.txt"
	f.write_text("a\nb\n")
	assert runner.resolve_queries(RunParams(queries_file=str(f))) == ["a", "b"]
	empty = tmp_path / "empty.txt"
	empty.write_text("\n\n")
	with pytest.raises(ValueError):
		runner.resolve_queries(RunParams(queries_file=str(empty)))
	with pytest.raises(ValueError):
		runner.resolve_queries(RunParams())


@pytest.mark.asyncio
async def test_run_evaluation_with_stubs(tmp_path):
	report = await runner.run_evaluation(
	    _config(tmp_path),
	    EVAL_CONFIG,
	    ProviderRegistry([DummyProvider("serper")]),
	    DummyJudge(),
	    ["q1", "q2"],
	)
	assert report.summary.total_cells == 2
	perf = report.performance["serper"]
	assert perf.average_scores["five_point"].mean == 4.0
	assert perf.average_scores["binary"].mean == 2.0
	assert report.metadata.dimensions == ["relevance"]


@pytest.mark.asyncio
async def test_run_batch_saves_results(tmp_path, monkeypatch):
	monkeypatch.setattr(runner, "create_judge",
	                    lambda config, client: DummyJudge())
	monkeypatch.setattr(
	    runner, "build_registry", lambda eval_config, config, client:
	    ProviderRegistry([DummyProvider("serper")]))
	progress = []
	report, paths = await runner.run_batch(
	    _config(tmp_path),
	    RunParams(query="single"),
	    progress_cb=lambda rid, msg: progress.append((rid, msg)),
	    eval_config=EVAL_CONFIG,
	)
	assert report.summary.queries_tested == ["single"]
	assert all(p.exists() for p in paths.values())
	assert paths["csv"].parent == tmp_path / "results"
	assert ("batch", "done") in progress
	assert ("serper", "done") in progress
