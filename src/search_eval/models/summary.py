"""
Summary data model for TUI rendering.

Pure data extraction for the final summary display,
separating data logic from Rich rendering.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from .batch_report import BatchReport


class RankingRow(BaseModel):
	"""One line of a ranking table, pre-formatted for display."""

	rank: int
	engine: str
	score: str
	stability: str = "-"
	success_rate: str = "-"


class StabilityRow(BaseModel):
	"""Per-provider spread for one scoring system."""

	engine: str
	scoring_system: str
	mean: str
	std_dev: str
	cov: str
	range: str
	count: int


class SummaryData(BaseModel):
	"""All data needed to render the final summary.

	This model is populated by `build_summary_data()` and consumed
	by `_render_summary()`, separating data extraction from rendering.
	"""

	rankings: dict[str, list[RankingRow]] = Field(default_factory=dict)
	stability: list[StabilityRow] = Field(default_factory=list)
	failures: dict[str, str] = Field(default_factory=dict)
	not_attempted: list[str] = Field(default_factory=list)
	total_cells: int = 0
	successful_cells: int = 0
	cancelled: bool = False
	cancel_reason: str | None = None
	files: dict[str, str] = Field(default_factory=dict)


def _fmt(value: float | None, fmt: str = ".3f") -> str:
	return "-" if value is None else format(value, fmt)


def build_summary_data(
    report: BatchReport,
    saved_files: dict[str, Path] | None = None,
) -> SummaryData:
	"""Extract display data from a batch report.

	Pure function with no rendering side effects, returns a SummaryData
	model that can be unit tested independently.

	Parameters:
		report: Completed batch report.
		saved_files: Optional paths written by ``save_results``.

	Returns:
		Populated SummaryData model.
	"""
	data = SummaryData(
	    not_attempted=list(report.summary.not_attempted),
	    total_cells=report.summary.total_cells,
	    successful_cells=report.summary.successful_cells,
	    cancelled=report.cancelled,
	    cancel_reason=report.cancel_reason,
	    files={k: str(v) for k, v in (saved_files or {}).items()},
	)

	for system in ("combined", "binary", "five_point"):
		data.rankings[system] = [
		    RankingRow(
		        rank=entry.rank,
		        engine=entry.engine,
		        score=_fmt(entry.score),
		        stability=_fmt(entry.stability),
		        success_rate=_fmt(entry.success_rate, ".0%"),
		    ) for entry in report.rankings.for_system(system)
		]

	for engine, perf in report.performance.items():
		for system, stats in perf.average_scores.items():
			spread = perf.score_stability.get(system)
			data.stability.append(
			    StabilityRow(
			        engine=engine,
			        scoring_system=system,
			        mean=_fmt(stats.mean),
			        std_dev=_fmt(stats.std_dev),
			        cov=_fmt(spread.coefficient_of_variation if spread else None),
			        range=_fmt(spread.range if spread else None),
			        count=stats.count,
			    ))
		if perf.attempted and perf.successful_cells == 0:
			data.failures[engine] = "failed in every cell"

	# last error message per provider wins
	for rnd in report.rounds:
		for cell in rnd.cells:
			if cell.evaluation is None:
				continue
			for engine, message in cell.evaluation.summary.failures.items():
				if engine in data.failures:
					data.failures[engine] = message

	return data


__all__ = [
    "RankingRow",
    "StabilityRow",
    "SummaryData",
    "build_summary_data",
]
