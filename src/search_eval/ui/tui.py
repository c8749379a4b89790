"""
Terminal UI for batch progress visualization.

Provides a Rich-based TUI showing one column per search provider plus
the batch position, and the final ranking and stability tables.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from pathlib import Path

from rich import box
from rich.console import Console, Group
from rich.live import Live
from rich.table import Table
from rich.text import Text

from search_eval.models.batch_report import BatchReport
from search_eval.models.summary import SummaryData, build_summary_data
from search_eval.ui.progress import BATCH_RUN_ID

_MAX_MESSAGES = 6

_RANKING_TITLES = {
    "combined": "Combined Ranking",
    "binary": "Binary Ranking (0-2)",
    "five_point": "Five-Point Ranking (1-5)",
}


@dataclass
class RunDisplayState:
	"""State for a single provider (or the batch) column in the TUI."""

	run_id: str
	status: str = "pending"  # pending|running|completed|failed
	position: str | None = None
	messages: deque[str] = field(
	    default_factory=lambda: deque(maxlen=_MAX_MESSAGES))

	def add_message(self, msg: str) -> None:
		"""Add a message to the scrolling log."""
		self.messages.append(msg)

	def render_cell(self) -> Text:
		"""Render cell content for display."""
		text = Text()
		text.append(f"status: {self.status}\n", style="bold")
		if self.position:
			text.append(f"{self.position}\n", style="magenta")
		for msg in self.messages:
			clean = msg.strip()
			lowered = clean.lower()
			if "error" in lowered or "failed" in lowered:
				text.append(f"• {clean}\n", style="red")
			elif clean == "done":
				text.append(f"• {clean}\n", style="green")
			else:
				text.append(f"• {clean}\n", style="dim")
		return text


class TUI:
	"""
	Rich-based TUI for batch progress.

	Uses Rich's Live display with auto-refresh to update in place.
	"""

	def __init__(self, engines: list[str], console: Console | None = None):
		self.console = console or Console()
		self.engines = list(engines)
		self.states: dict[str, RunDisplayState] = {
		    name: RunDisplayState(run_id=name)
		    for name in self.engines
		}
		self.states[BATCH_RUN_ID] = RunDisplayState(run_id=BATCH_RUN_ID)
		self.live: Live | None = None

	def _build_table(self) -> Group:
		"""Build the display tables."""
		engines_table = Table(box=box.ROUNDED, expand=True, show_header=True)
		for name in self.engines:
			engines_table.add_column(name, min_width=24)
		if self.engines:
			engines_table.add_row(
			    *[self.states[name].render_cell() for name in self.engines])

		batch_table = Table(box=box.ROUNDED, expand=True, show_header=True)
		batch_table.add_column("Batch", min_width=24)
		batch_table.add_row(self.states[BATCH_RUN_ID].render_cell())
		return Group(engines_table, batch_table)

	def __enter__(self):
		"""Start the Live display."""
		self.live = Live(
		    self._build_table(),
		    console=self.console,
		    refresh_per_second=4,
		)
		self.live.start()
		return self

	def __exit__(self, exc_type, exc, tb):
		"""Stop the Live display."""
		if self.live:
			self.live.stop()

	def update(self, run_id: str, msg: str) -> None:
		"""Update state for a provider or the batch and refresh display."""
		state = self.states.get(run_id)
		if not state:
			return

		lowered = msg.lower()
		if run_id == BATCH_RUN_ID and msg.startswith("round "):
			state.status = "running"
			state.position = msg
			# a new cell starts; provider columns are reset
			for name in self.engines:
				self.states[name].status = "pending"
		elif msg == "done":
			state.status = "completed"
		elif "failed" in lowered or "error" in lowered or msg.startswith(
		    "cancelled"):
			state.status = "failed"
		elif msg.startswith("round "):
			state.status = "running"

		if not (run_id == BATCH_RUN_ID and msg.startswith("round ")):
			state.add_message(msg)

		if self.live:
			self.live.update(self._build_table())

	def refresh(self):
		"""Force a display refresh."""
		if self.live:
			self.live.update(self._build_table())

	def finalize(self):
		"""Stop the live display."""
		if self.live:
			self.live.stop()

	def print_summary(self, report: BatchReport,
	                  saved_files: dict[str, Path] | None = None):
		"""Print final rankings after the batch completes."""
		self.finalize()
		self.console.print()
		self._render_summary(build_summary_data(report, saved_files))

	def _render_ranking_table(self, system: str, data: SummaryData) -> Table:
		table = Table(
		    title=_RANKING_TITLES.get(system, system),
		    box=box.ROUNDED,
		    expand=True,
		    title_style="bold cyan",
		)
		table.add_column("Rank", justify="right")
		table.add_column("Engine", style="bold")
		table.add_column("Score", justify="right")
		table.add_column("Stability", justify="right")
		table.add_column("Success", justify="right")
		for row in data.rankings.get(system, []):
			table.add_row(
			    str(row.rank),
			    row.engine,
			    row.score,
			    row.stability,
			    row.success_rate,
			    style="green" if row.rank == 1 else None,
			)
		return table

	def _render_stability_table(self, data: SummaryData) -> Table:
		table = Table(
		    title="Score Stability",
		    box=box.ROUNDED,
		    expand=True,
		    title_style="bold cyan",
		)
		table.add_column("Engine", style="bold")
		table.add_column("System")
		table.add_column("Mean", justify="right")
		table.add_column("Std Dev", justify="right")
		table.add_column("CoV", justify="right")
		table.add_column("Range", justify="right")
		table.add_column("Samples", justify="right")
		for row in data.stability:
			table.add_row(row.engine, row.scoring_system, row.mean,
			              row.std_dev, row.cov, row.range, str(row.count))
		return table

	def _render_summary(self, data: SummaryData):
		"""Render the summary to console using pre-extracted data.

		Parameters:
			data: SummaryData model with all display values.
		"""
		if data.cancelled:
			self.console.print(
			    Text(f"Batch cancelled: {data.cancel_reason or 'cancelled'}",
			         style="bold yellow"))

		for system in ("combined", "binary", "five_point"):
			if data.rankings.get(system):
				self.console.print(self._render_ranking_table(system, data))

		if data.stability:
			self.console.print(self._render_stability_table(data))

		if data.failures or data.not_attempted:
			fail_table = Table(
			    title="Failed Engines",
			    box=box.ROUNDED,
			    show_header=False,
			    expand=True,
			    title_style="bold red",
			)
			fail_table.add_column("Engine", style="bold")
			fail_table.add_column("Reason")
			for engine, reason in data.failures.items():
				fail_table.add_row(engine, Text(reason, style="red"))
			for engine in data.not_attempted:
				fail_table.add_row(engine, Text("not attempted", style="dim"))
			self.console.print(fail_table)

		self.console.print(
		    f"cells: {data.successful_cells}/{data.total_cells} completed")
		for label, path in data.files.items():
			self.console.print(f"{label}: {path}", style="dim")


__all__ = ["TUI", "RunDisplayState"]
