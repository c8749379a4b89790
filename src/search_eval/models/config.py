from __future__ import annotations

from pathlib import Path
from typing import Any, TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_core.core_schema import ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

from search_eval.errors import ConfigInvalid

if TYPE_CHECKING:
	from .run_params import RunParams


def load_env(env_file: str | Path | None = None) -> None:
	"""Load environment variables from an `.env` file if present."""
	env_path = Path(env_file) if env_file else Path(".env")
	if env_path.exists():
		load_dotenv(env_path)


class Config(BaseSettings):
	"""Runtime configuration loaded from environment variables."""

	model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

	judge_url: str | None = Field(
	    default=None,
	    alias="JUDGE_URL",
	    description="OpenAI-compatible chat completions endpoint",
	)
	judge_model: str | None = Field(
	    default=None,
	    alias="JUDGE_MODEL",
	    description="Judge model identifier",
	)
	judge_api_key: str | None = Field(
	    default=None,
	    alias="JUDGE_API_KEY",
	    description="Bearer credential for the judge endpoint",
	)
	judge_timeout_seconds: int = Field(
	    30,
	    alias="JUDGE_TIMEOUT_SECONDS",
	    description="Per-request judge timeout in seconds",
	)
	judge_max_retries: int = Field(
	    3,
	    alias="JUDGE_MAX_RETRIES",
	    description="Maximum judge attempts per scoring request",
	)
	judge_retry_backoff_ms: int = Field(
	    1000,
	    alias="JUDGE_RETRY_BACKOFF_MS",
	    description="Linear backoff step between judge attempts",
	)
	judge_temperature: float = Field(0.1, alias="JUDGE_TEMPERATURE",
	                                 description="Judge sampling temperature")
	judge_max_tokens: int = Field(500, alias="JUDGE_MAX_TOKENS",
	                              description="Judge completion token limit")
	repeat_times: int = Field(
	    3,
	    alias="REPEAT_TIMES",
	    description="Scoring rounds per provider per query",
	)
	batch_rounds: int = Field(
	    3,
	    alias="BATCH_ROUNDS",
	    description="Outer repeats of the whole query set",
	)
	dimension_delay_ms: int = Field(
	    1000,
	    alias="DIMENSION_DELAY_MS",
	    description="Pause between dimension judge calls",
	)
	repeat_delay_ms: int = Field(
	    1000,
	    alias="REPEAT_DELAY_MS",
	    description="Pause between scoring rounds",
	)
	query_delay_ms: int = Field(
	    2000,
	    alias="QUERY_DELAY_MS",
	    description="Pause between queries in a batch",
	)
	round_delay_ms: int = Field(
	    5000,
	    alias="ROUND_DELAY_MS",
	    description="Pause between outer batch rounds",
	)
	provider_timeout_seconds: int = Field(
	    30,
	    alias="PROVIDER_TIMEOUT_SECONDS",
	    description="Timeout for one provider search",
	)
	max_results: int = Field(
	    10,
	    alias="MAX_RESULTS",
	    description="Results requested from each provider",
	)
	eval_config_file: str = Field(
	    "eval.yaml",
	    alias="EVAL_CONFIG_FILE",
	    description="Path to the dimensions/providers config",
	)
	output_dir: str = Field("results", alias="OUTPUT_DIR",
	                        description="Base output directory")
	log_level: str = Field("info", alias="LOG_LEVEL",
	                       description="Log level")
	deadline_seconds: float | None = Field(
	    default=None,
	    alias="DEADLINE_SECONDS",
	    description="Abort the batch between cells after this many seconds",
	)

	@field_validator("judge_timeout_seconds", "judge_max_retries",
	                 "repeat_times", "batch_rounds",
	                 "provider_timeout_seconds", "max_results",
	                 "deadline_seconds")
	@classmethod
	def validate_positive(cls, v: Any, info: "ValidationInfo") -> Any:
		if v is None:
			return v
		if v <= 0:
			raise ValueError(f"{info.field_name} must be > 0")
		return v

	@field_validator("judge_retry_backoff_ms", "dimension_delay_ms",
	                 "repeat_delay_ms", "query_delay_ms", "round_delay_ms")
	@classmethod
	def validate_non_negative(cls, v: int, info: "ValidationInfo") -> int:
		if v < 0:
			raise ValueError(f"{info.field_name} must be >= 0")
		return v

	@property
	def output_path(self) -> Path:
		"""Return output_dir as Path."""
		return Path(self.output_dir)

	@property
	def search_options(self) -> dict[str, Any]:
		return {"max_results": self.max_results}

	def require_judge(self) -> None:
		"""
		Ensure the judge endpoint is fully configured.

		Raises:
			ConfigInvalid: If URL, model or API key is missing.
		"""
		missing = [
		    name for name, value in (
		        ("JUDGE_URL", self.judge_url),
		        ("JUDGE_MODEL", self.judge_model),
		        ("JUDGE_API_KEY", self.judge_api_key),
		    ) if not value
		]
		if missing:
			raise ConfigInvalid(
			    f"missing judge settings: {', '.join(missing)}")

	def apply_overrides(self, run_params: "RunParams") -> None:
		"""Apply CLI overrides from RunParams onto this config.

		Only non-None fields in run_params are applied, preserving
		environment-based defaults for anything the user didn't explicitly set.

		Parameters:
			run_params: Validated run parameters with optional overrides.
		"""
		_OVERRIDES: list[tuple[str, str]] = [
			("repeat_times", "repeat_times"),
			("batch_rounds", "batch_rounds"),
			("output_dir", "output_dir"),
			("config_file", "eval_config_file"),
			("deadline", "deadline_seconds"),
		]
		for param_field, config_field in _OVERRIDES:
			value = getattr(run_params, param_field)
			if value is not None:
				setattr(self, config_field, value)


__all__ = ["Config", "load_env"]
