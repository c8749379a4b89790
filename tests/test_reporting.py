import csv
import json

from search_eval.models.batch_report import BatchCell, BatchReport, BatchRound
from search_eval.models.provider_evaluation import (
    ProviderEvaluation,
    ProviderFailure,
    ScoringAverage,
)
from search_eval.models.query_evaluation import QueryEvaluation
from search_eval.ui.reporting import (
    flatten_for_csv,
    save_csv,
    save_json,
    save_results,
)


def _rounds():
	ok = ProviderEvaluation(
	    engine="A",
	    average_scores={
	        "binary":
	        ScoringAverage(dimensions={"relevance": 2.0}, weighted=2.0,
	                       valid_rounds=3, total_rounds=3),
	        "five_point":
	        ScoringAverage(dimensions={"relevance": 4.5}, weighted=4.5,
	                       valid_rounds=2, error_rounds=1, total_rounds=3),
	    },
	)
	failed = ProviderFailure(engine="B", error="HTTP 500")
	return [
	    BatchRound(
	        round=1,
	        cells=[
	            BatchCell(
	                round=1,
	                query_index=0,
	                query="q0",
	                evaluation=QueryEvaluation(query="q0", engines={
	                    "A": ok,
	                    "B": failed
	                }),
	            ),
	            BatchCell(round=1, query_index=1, query="q1", error="boom"),
	        ],
	    )
	]


def test_flatten_for_csv_rows():
	rows = flatten_for_csv(_rounds())
	assert len(rows) == 4
	binary, five, failure, cell_error = rows
	assert binary["engine"] == "A"
	assert binary["scoring_type"] == "binary"
	assert binary["relevance_score"] == 2.0
	assert five["weighted_score"] == 4.5
	assert five["error_rounds"] == 1
	assert failure == {
	    "round": 1,
	    "query": "q0",
	    "engine": "B",
	    "timestamp": failure["timestamp"],
	    "error": "HTTP 500",
	}
	assert cell_error["error"] == "boom"
	assert "engine" not in cell_error


def test_save_csv_header_and_blanks(tmp_path):
	path = tmp_path / "out" / "s.csv"
	save_csv(path, [{"round": 1, "query": "q", "x_score": 1.0},
	                {"round": 2, "query": "r", "error": None}])
	with path.open(newline="", encoding="utf-8") as fh:
		rows = list(csv.DictReader(fh))
	assert list(rows[0]) == ["round", "query", "error", "x_score"]
	assert rows[0]["error"] == ""
	assert rows[1]["x_score"] == ""


def test_save_json_utf8(tmp_path):
	path = tmp_path / "nested" / "d.json"
	save_json(path, {"query": "天气"})
	assert "天气" in path.read_text(encoding="utf-8")


def test_save_results_writes_three_files(tmp_path):
	report = BatchReport(rounds=_rounds())
	paths = save_results(report, tmp_path)
	assert paths["detailed"].name.startswith("detailed_results_")
	assert paths["final"].name.startswith("final_report_")
	assert paths["csv"].name.startswith("summary_")
	detailed = json.loads(paths["detailed"].read_text(encoding="utf-8"))
	assert detailed[0]["cells"][1]["error"] == "boom"
	final = json.loads(paths["final"].read_text(encoding="utf-8"))
	assert "rounds" not in final
	assert set(final) >= {"metadata", "performance", "rankings", "summary"}
	assert paths["csv"].read_text(encoding="utf-8").startswith("round,")
