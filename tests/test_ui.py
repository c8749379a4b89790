from rich.console import Console

from search_eval.models.batch_report import BatchReport
from search_eval.models.query_evaluation import RankingEntry, Rankings
from search_eval.ui.progress import BATCH_RUN_ID
from search_eval.ui.tui import TUI


def test_tui_tracks_provider_status():
	ui = TUI(["serper", "jina"])
	ui.update("serper", "round 1/3")
	assert ui.states["serper"].status == "running"
	ui.update("serper", "done")
	assert ui.states["serper"].status == "completed"
	ui.update("jina", "search failed: HTTP 500")
	assert ui.states["jina"].status == "failed"
	assert "search failed: HTTP 500" in ui.states["jina"].render_cell().plain


def test_tui_batch_position_resets_providers():
	ui = TUI(["serper"])
	ui.update("serper", "done")
	ui.update(BATCH_RUN_ID, "round 1/2 query 2/5")
	batch = ui.states[BATCH_RUN_ID]
	assert batch.position == "round 1/2 query 2/5"
	assert batch.status == "running"
	assert list(batch.messages) == []
	assert ui.states["serper"].status == "pending"


def test_tui_message_limit_and_unknown_run():
	ui = TUI(["a"])
	for i in range(15):
		ui.update("a", f"round {i}/15")
	assert len(ui.states["a"].messages) == 6
	ui.update("nope", "ignored")
	assert "nope" not in ui.states


def test_print_summary_renders_tables():
	console = Console(record=True, width=120)
	ui = TUI(["A"], console=console)
	report = BatchReport(rankings=Rankings(combined=[
	    RankingEntry(rank=1, engine="A", score=0.9, stability=0.95,
	                 success_rate=1.0)
	]))
	ui.print_summary(report)
	out = console.export_text()
	assert "Combined Ranking" in out
	assert "0.900" in out
	assert "cells: 0/0 completed" in out
