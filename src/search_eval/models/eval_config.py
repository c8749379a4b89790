"""
Evaluation configuration models.

Defines the weighted dimensions, per-dimension rubric overrides and
provider settings loaded from the evaluation config file. Weight-sum
validation happens here, before any evaluation starts.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from search_eval.errors import ConfigInvalid
from .scoring_system import SCORING_SYSTEMS

WEIGHT_TOLERANCE = 0.01


class Dimension(BaseModel):
	"""A named, weighted evaluation criterion."""

	model_config = ConfigDict(frozen=True)

	name: str = Field(min_length=1, description="Dimension name")
	weight: float = Field(gt=0, le=1, description="Weight in (0, 1]")
	description: str = Field(default="",
	                         description="What the judge should assess")


class ProviderSettings(BaseModel):
	"""Connection settings and enable flag for one search provider."""

	kind: str | None = Field(
	    default=None,
	    description="Adapter kind; defaults to the provider's key",
	)
	enabled: bool = False
	api_key: str | None = None
	base_url: str | None = None
	options: dict[str, Any] = Field(default_factory=dict)


def validate_dimensions(dimensions: list[Dimension]) -> list[Dimension]:
	"""
	Check that dimensions are non-empty, unique and weights sum to 1.0.

	Parameters:
		dimensions: Ordered dimension list.

	Returns:
		The same list when valid.

	Raises:
		ConfigInvalid: On any violation.
	"""
	if not dimensions:
		raise ConfigInvalid("at least one evaluation dimension is required")
	names = [d.name for d in dimensions]
	duplicates = sorted({n for n in names if names.count(n) > 1})
	if duplicates:
		raise ConfigInvalid(
		    f"duplicate dimension names: {', '.join(duplicates)}")
	total = sum(d.weight for d in dimensions)
	if abs(total - 1.0) > WEIGHT_TOLERANCE:
		raise ConfigInvalid(
		    f"dimension weights must sum to 1.0, got {total:g}")
	return dimensions


class EvalConfig(BaseModel):
	"""Evaluation settings: dimensions, rubric overrides and providers."""

	dimensions: list[Dimension]
	prompts: dict[str, dict[str, str]] = Field(
	    default_factory=dict,
	    description="Custom rubric text keyed by scoring system, then dimension",
	)
	prompts_dir: str | None = Field(
	    default=None,
	    description="Directory holding <system>/<dimension>.md rubric files",
	)
	providers: dict[str, ProviderSettings] = Field(default_factory=dict)

	@model_validator(mode="after")
	def check_consistency(self) -> "EvalConfig":
		validate_dimensions(self.dimensions)
		known = set(self.dimension_names)
		for system, by_dim in self.prompts.items():
			if system not in SCORING_SYSTEMS:
				raise ConfigInvalid(
				    f"prompts reference unknown scoring system: {system}")
			unknown = sorted(set(by_dim) - known)
			if unknown:
				raise ConfigInvalid(
				    f"prompts.{system} reference unknown dimensions: "
				    f"{', '.join(unknown)}")
		return self

	@property
	def dimension_names(self) -> list[str]:
		return [d.name for d in self.dimensions]

	@property
	def enabled_providers(self) -> dict[str, ProviderSettings]:
		"""Return enabled providers in configured order."""
		return {
		    name: settings
		    for name, settings in self.providers.items() if settings.enabled
		}

	@classmethod
	def from_mapping(cls, data: Mapping[str, Any]) -> "EvalConfig":
		"""
		Build and validate an EvalConfig from plain data.

		Raises:
			ConfigInvalid: If the data is missing fields or inconsistent.
		"""
		if not isinstance(data, Mapping):
			raise ConfigInvalid("evaluation config must be a mapping")
		try:
			return cls.model_validate(dict(data))
		except ValidationError as exc:
			raise ConfigInvalid(f"invalid evaluation config: {exc}") from exc


__all__ = [
    "WEIGHT_TOLERANCE",
    "Dimension",
    "ProviderSettings",
    "EvalConfig",
    "validate_dimensions",
]
