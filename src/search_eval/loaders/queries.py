"""
Query list loading.

Supports plain text (one query per line), JSON and CSV files.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path

_CSV_COLUMNS = ("query", "q", "search", "keyword")


def _from_json(path: Path) -> list[str]:
	data = json.loads(path.read_text(encoding="utf-8"))
	if isinstance(data, dict) and isinstance(data.get("queries"), list):
		data = data["queries"]
	if not isinstance(data, list):
		raise ValueError(
		    "JSON queries must be a list or an object with a 'queries' list")
	queries = []
	for item in data:
		if isinstance(item, str):
			queries.append(item)
		elif isinstance(item, dict):
			queries.append(str(item.get("query") or item.get("q") or ""))
	return queries


def _from_csv(path: Path) -> list[str]:
	with path.open(newline="", encoding="utf-8") as fh:
		reader = csv.DictReader(fh)
		fields = reader.fieldnames or []
		column = next((c for c in _CSV_COLUMNS if c in fields),
		              fields[0] if fields else None)
		if column is None:
			return []
		return [row.get(column) or "" for row in reader]


def _from_txt(path: Path) -> list[str]:
	return path.read_text(encoding="utf-8").splitlines()


_READERS = {
    ".json": _from_json,
    ".csv": _from_csv,
    ".txt": _from_txt,
}


def load_queries(path: str | Path) -> list[str]:
	"""
	Load queries from a file, dropping blank entries.

	Parameters:
		path: Path to a ``.txt``, ``.json`` or ``.csv`` file.

	Returns:
		Queries in file order.

	Raises:
		FileNotFoundError: If the file does not exist.
		ValueError: If the format is unsupported or malformed.
	"""
	path = Path(path)
	if not path.exists():
		raise FileNotFoundError(f"queries file not found: {path}")
	reader = _READERS.get(path.suffix.lower())
	if reader is None:
		raise ValueError(f"unsupported queries file format: {path.suffix}")
	return [q.strip() for q in reader(path) if q and q.strip()]


__all__ = ["load_queries"]
