"""
Run parameters model.

Defines validated CLI overrides for batch and single-query runs.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field, field_validator
from pydantic_core.core_schema import ValidationInfo


class RunParams(BaseModel):
	"""Validated run parameters for CLI/runner.

	Either ``queries_file`` (batch) or ``query`` (single query) is set.
	"""

	queries_file: Optional[str] = Field(default=None,
	                                    description="Path to queries file")
	query: Optional[str] = Field(default=None, description="Single query")
	repeat_times: Optional[int] = Field(default=None,
	                                    description="Override scoring rounds")
	batch_rounds: Optional[int] = Field(default=None,
	                                    description="Override outer rounds")
	output_dir: Optional[str] = Field(default=None,
	                                  description="Override output directory")
	config_file: Optional[str] = Field(
	    default=None, description="Override evaluation config path")
	deadline: Optional[float] = Field(default=None,
	                                  description="Batch deadline in seconds")

	@field_validator('query')
	@classmethod
	def validate_query(cls, v: Optional[str]) -> Optional[str]:
		if v is None:
			return v
		v = v.strip()
		if not v:
			raise ValueError("query must not be blank")
		return v

	@field_validator('repeat_times', 'batch_rounds', 'deadline')
	@classmethod
	def validate_positive(cls, v: Optional[float],
	                      info: ValidationInfo) -> Optional[float]:
		if v is None:
			return v
		if v <= 0:
			raise ValueError(f"{info.field_name} must be > 0")
		return v


__all__ = ["RunParams"]
