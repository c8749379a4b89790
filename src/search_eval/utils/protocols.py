"""
Protocol definitions for dependency injection.

Defines Protocol classes for the judge and search provider
capabilities so the engine can run against stubs in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
	from search_eval.models.prompt import JudgePrompt
	from search_eval.models.search import SearchResponse


class JudgeProtocol(Protocol):
	"""
	Protocol for the scoring oracle.

	Takes a prompt (plain string or system/user pair) and returns the
	judge's raw text answer.
	"""

	async def judge(self, payload: str | JudgePrompt) -> str:
		"""Send a scoring request and return raw response text."""
		...


class SearchProviderProtocol(Protocol):
	"""
	Protocol for a search provider.

	Implementations should surface failures through
	``SearchResponse.error`` instead of raising.
	"""

	name: str

	async def search(self, query: str,
	                 options: dict[str, Any] | None = None) -> SearchResponse:
		"""Run a search and return the ranked result-set."""
		...


__all__ = ["JudgeProtocol", "SearchProviderProtocol"]
