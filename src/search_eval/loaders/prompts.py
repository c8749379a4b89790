"""
Bundled judge prompt templates.

The package ships two ``string.Template`` files: the default rubric used
as the judge's system prompt and the scoring request that carries the
query and the result listing.
"""

from __future__ import annotations

from pathlib import Path

PROMPTS_DIR = Path(__file__).resolve().parents[1] / "prompts"

RUBRIC_TEMPLATE = "rubric.md"
SCORING_REQUEST_TEMPLATE = "scoring_request.md"


def load_prompt(name: str) -> str:
	"""
	Read a bundled template by filename.

	Parameters:
		name: Template filename, e.g. ``RUBRIC_TEMPLATE``.

	Returns:
		Template text.

	Raises:
		FileNotFoundError: If the package ships no such template.
	"""
	path = PROMPTS_DIR / name
	if not path.is_file():
		raise FileNotFoundError(f"no bundled prompt template: {name}")
	return path.read_text(encoding="utf-8")


__all__ = [
    "PROMPTS_DIR",
    "RUBRIC_TEMPLATE",
    "SCORING_REQUEST_TEMPLATE",
    "load_prompt",
]
