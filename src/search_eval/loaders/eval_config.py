"""
Evaluation config loader.

Reads the dimensions/providers file (YAML or JSON) and validates it.
Any problem is reported as ConfigInvalid so the run stops before the
first judge call.
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from search_eval.errors import ConfigInvalid
from search_eval.models.eval_config import EvalConfig
from search_eval.utils.logging import get_logger

logger = get_logger(__name__)


def load_eval_config(path: str | Path) -> EvalConfig:
	"""
	Load and validate an evaluation config file.

	Parameters:
		path: Path to a ``.yaml``/``.yml`` or ``.json`` file.

	Returns:
		Validated EvalConfig.

	Raises:
		ConfigInvalid: If the file is missing, unreadable or invalid.
	"""
	path = Path(path)
	if not path.exists():
		raise ConfigInvalid(f"evaluation config not found: {path}")
	try:
		raw = path.read_text(encoding="utf-8")
		if path.suffix.lower() == ".json":
			data = json.loads(raw)
		else:
			data = yaml.safe_load(raw)
	except (OSError, ValueError, yaml.YAMLError) as exc:
		raise ConfigInvalid(
		    f"failed to read evaluation config {path}: {exc}") from exc
	if data is None:
		raise ConfigInvalid(f"evaluation config is empty: {path}")
	cfg = EvalConfig.from_mapping(data)
	logger.info(
	    "loaded eval config path=%s dimensions=%s providers=%s",
	    path,
	    ",".join(cfg.dimension_names),
	    ",".join(cfg.enabled_providers),
	)
	return cfg


__all__ = ["load_eval_config"]
