"""
Search result models.

Defines the provider-agnostic result item and the response envelope
returned by every search provider.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from search_eval.utils.clock import utc_now_iso


class SearchResultItem(BaseModel):
	"""A single ranked search hit."""

	title: str = ""
	url: str = ""
	snippet: str = ""
	source: str = ""
	published_time: str | None = None


class SearchResponse(BaseModel):
	"""Result-set from one provider for one query.

	A failed search carries ``error`` and an empty result list.
	"""

	engine: str
	query: str = ""
	results: list[SearchResultItem] = Field(default_factory=list)
	error: str | None = None
	timestamp: str = Field(default_factory=utc_now_iso)

	@property
	def ok(self) -> bool:
		return self.error is None


__all__ = ["SearchResultItem", "SearchResponse"]
