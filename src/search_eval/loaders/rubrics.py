"""
Custom rubric loading.

Per-dimension rubric text can be given inline in the evaluation config
or as ``<prompts_dir>/<scoring system>/<dimension>.md`` files. Inline
text wins over files.
"""

from __future__ import annotations

from pathlib import Path

from search_eval.models.eval_config import EvalConfig
from search_eval.models.scoring_system import SCORING_SYSTEMS
from search_eval.loaders.frontmatter import split_frontmatter
from search_eval.utils.logging import get_logger

logger = get_logger(__name__)


def _load_rubric_files(prompts_dir: Path, system: str,
                       dimensions: list[str]) -> dict[str, str]:
	rubrics: dict[str, str] = {}
	system_dir = prompts_dir / system
	if not system_dir.is_dir():
		return rubrics
	for name in dimensions:
		path = system_dir / f"{name}.md"
		if not path.exists():
			continue
		_, body = split_frontmatter(path.read_text(encoding="utf-8"))
		body = body.strip()
		if body:
			rubrics[name] = body
			logger.debug("loaded rubric %s", path)
	return rubrics


def load_rubrics(eval_config: EvalConfig) -> dict[str, dict[str, str]]:
	"""
	Collect custom rubric text per scoring system and dimension.

	Parameters:
		eval_config: Validated evaluation config.

	Returns:
		Mapping of scoring system name to {dimension: rubric text}.
		Every known scoring system is present, possibly empty.
	"""
	names = eval_config.dimension_names
	rubrics: dict[str, dict[str, str]] = {}
	for system in SCORING_SYSTEMS:
		merged: dict[str, str] = {}
		if eval_config.prompts_dir:
			merged.update(
			    _load_rubric_files(Path(eval_config.prompts_dir), system,
			                       names))
		for dim, text in eval_config.prompts.get(system, {}).items():
			if text and text.strip():
				merged[dim] = text.strip()
		rubrics[system] = merged
	return rubrics


__all__ = ["load_rubrics"]
