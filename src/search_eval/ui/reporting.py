"""
Result export and persistence utilities.

Writes the detailed per-cell results, the final report and a flat CSV
summary of a batch run to disk.
"""

from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from search_eval.models.batch_report import BatchReport, BatchRound
from search_eval.models.provider_evaluation import ProviderFailure
from search_eval.models.scoring_system import SCORING_SYSTEMS

BASE_COLUMNS = [
    "round",
    "query",
    "engine",
    "scoring_type",
    "weighted_score",
    "valid_rounds",
    "error_rounds",
    "error",
    "timestamp",
]


def save_json(path: Path | str, data: Any) -> None:
	"""
	Write data as indented UTF-8 JSON, creating parent directories.

	Parameters:
		path: Destination file path.
		data: JSON-serializable data.
	"""
	Path(path).parent.mkdir(parents=True, exist_ok=True)
	Path(path).write_text(json.dumps(data, indent=2, ensure_ascii=False),
	                      encoding="utf-8")


def flatten_for_csv(rounds: Sequence[BatchRound]) -> list[dict[str, Any]]:
	"""
	Flatten batch cells into CSV rows.

	One row per (cell, provider, scoring system); failed cells and
	failed providers get one row carrying the error. Dimension means
	appear as ``<dimension>_score`` columns.

	Parameters:
		rounds: Batch rounds.

	Returns:
		List of flat row dicts.
	"""
	rows: list[dict[str, Any]] = []
	for rnd in rounds:
		for cell in rnd.cells:
			if cell.evaluation is None:
				rows.append({
				    "round": cell.round,
				    "query": cell.query,
				    "error": cell.error,
				    "timestamp": cell.timestamp,
				})
				continue
			for engine, ev in cell.evaluation.engines.items():
				base = {
				    "round": cell.round,
				    "query": cell.query,
				    "engine": engine,
				    "timestamp": ev.timestamp,
				}
				if isinstance(ev, ProviderFailure):
					rows.append({**base, "error": ev.error})
					continue
				for system in SCORING_SYSTEMS:
					avg = ev.average_scores.get(system)
					if avg is None:
						continue
					row = {
					    **base,
					    "scoring_type": system,
					    "weighted_score": avg.weighted,
					    "valid_rounds": avg.valid_rounds,
					    "error_rounds": avg.error_rounds,
					}
					for dim, score in avg.dimensions.items():
						row[f"{dim}_score"] = score
					rows.append(row)
	return rows


def save_csv(path: Path | str, rows: Sequence[dict[str, Any]]) -> None:
	"""
	Write rows as CSV with a header covering every key seen.

	Known columns come first, dimension columns follow in first-seen
	order. Missing values are left empty.
	"""
	columns = [c for c in BASE_COLUMNS if any(c in row for row in rows)]
	for row in rows:
		for key in row:
			if key not in columns:
				columns.append(key)
	Path(path).parent.mkdir(parents=True, exist_ok=True)
	with Path(path).open("w", newline="", encoding="utf-8") as fh:
		writer = csv.DictWriter(fh, fieldnames=columns, restval="")
		writer.writeheader()
		for row in rows:
			writer.writerow(
			    {k: ("" if v is None else v) for k, v in row.items()})


def _file_timestamp() -> str:
	return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")


def save_results(report: BatchReport,
                 output_dir: Path | str) -> dict[str, Path]:
	"""
	Persist a batch report as detailed JSON, final JSON and CSV files.

	Parameters:
		report: Completed batch report.
		output_dir: Destination directory.

	Returns:
		Mapping of ``detailed``, ``final`` and ``csv`` to written paths.
	"""
	out = Path(output_dir)
	out.mkdir(parents=True, exist_ok=True)
	ts = _file_timestamp()
	data = report.model_dump(mode="json")
	paths = {
	    "detailed": out / f"detailed_results_{ts}.json",
	    "final": out / f"final_report_{ts}.json",
	    "csv": out / f"summary_{ts}.csv",
	}
	save_json(paths["detailed"], data["rounds"])
	save_json(paths["final"], {k: v for k, v in data.items() if k != "rounds"})
	save_csv(paths["csv"], flatten_for_csv(report.rounds))
	return paths


__all__ = [
    "save_json",
    "flatten_for_csv",
    "save_csv",
    "save_results",
]
