from pathlib import Path

from search_eval.models.batch_report import (
    AggregatedPerformance,
    BatchCell,
    BatchReport,
    BatchRound,
    ScoreStats,
    StabilityStats,
    TestSummary,
)
from search_eval.models.provider_evaluation import ProviderFailure
from search_eval.models.query_evaluation import (
    QueryEvaluation,
    QuerySummary,
    RankingEntry,
    Rankings,
)
from search_eval.models.summary import build_summary_data


def _report(**kwargs) -> BatchReport:
	perf = {
	    "A":
	    AggregatedPerformance(
	        engine="A",
	        success_rate=1.0,
	        total_cells=1,
	        successful_cells=1,
	        attempted=True,
	        average_scores={
	            "five_point":
	            ScoreStats(mean=4.5, min=4.0, max=5.0, std_dev=0.5, count=2)
	        },
	        score_stability={
	            "five_point":
	            StabilityStats(coefficient_of_variation=0.111, range=1.0)
	        },
	    ),
	    "B":
	    AggregatedPerformance(engine="B", total_cells=1, attempted=True),
	}
	cell = BatchCell(
	    round=1,
	    query_index=0,
	    query="q",
	    evaluation=QueryEvaluation(
	        query="q",
	        engines={"B": ProviderFailure(engine="B", error="HTTP 503")},
	        summary=QuerySummary(failures={"B": "HTTP 503"}),
	    ),
	)
	return BatchReport(
	    rounds=[BatchRound(round=1, cells=[cell])],
	    performance=perf,
	    rankings=Rankings(combined=[
	        RankingEntry(rank=1, engine="A", score=0.8125, stability=0.889,
	                     success_rate=1.0)
	    ]),
	    summary=TestSummary(total_cells=1, successful_cells=1,
	                        not_attempted=["C"]),
	    **kwargs,
	)


def test_build_summary_rankings_formatted():
	data = build_summary_data(_report())
	row = data.rankings["combined"][0]
	assert row.engine == "A"
	assert row.score == "0.812"
	assert row.stability == "0.889"
	assert row.success_rate == "100%"
	assert data.rankings["binary"] == []


def test_build_summary_stability_and_failures():
	data = build_summary_data(_report())
	assert len(data.stability) == 1
	assert data.stability[0].cov == "0.111"
	assert data.failures == {"B": "HTTP 503"}
	assert data.not_attempted == ["C"]


def test_build_summary_cancelled_and_files():
	data = build_summary_data(
	    _report(cancelled=True, cancel_reason="deadline exceeded"),
	    saved_files={"csv": Path("/tmp/s.csv")},
	)
	assert data.cancelled is True
	assert data.cancel_reason == "deadline exceeded"
	assert data.files == {"csv": "/tmp/s.csv"}
