"""
Provider registry and concurrent search fan-out.

Every provider search for one query runs concurrently; each outcome is
returned as a SearchResponse value, so a failing provider never affects
the others.
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterator

from search_eval.errors import ProviderUnavailable
from search_eval.models.search import SearchResponse
from search_eval.utils.logging import get_logger
from search_eval.utils.protocols import SearchProviderProtocol

logger = get_logger(__name__)


class ProviderRegistry:
	"""Search providers keyed by name, in registration order."""

	def __init__(self, providers: list[SearchProviderProtocol] | None = None):
		self._providers: dict[str, SearchProviderProtocol] = {}
		for provider in providers or []:
			self.register(provider)

	def register(self, provider: SearchProviderProtocol) -> None:
		if provider.name in self._providers:
			raise ValueError(f"provider already registered: {provider.name}")
		self._providers[provider.name] = provider

	def get(self, name: str) -> SearchProviderProtocol:
		"""
		Return the provider registered under name.

		Raises:
			ProviderUnavailable: If no such provider is registered.
		"""
		try:
			return self._providers[name]
		except KeyError:
			raise ProviderUnavailable(name, "not registered") from None

	def names(self) -> list[str]:
		return list(self._providers)

	def __iter__(self) -> Iterator[SearchProviderProtocol]:
		return iter(self._providers.values())

	def __len__(self) -> int:
		return len(self._providers)

	def __contains__(self, name: object) -> bool:
		return name in self._providers


async def search_one(
    provider: SearchProviderProtocol,
    query: str,
    options: dict[str, Any] | None = None,
    timeout_seconds: float | None = 30,
) -> SearchResponse:
	"""
	Run one provider search, turning any failure into an error response.

	Parameters:
		provider: Provider to query.
		query: Query text.
		options: Provider search options.
		timeout_seconds: Upper bound for the search; None disables it.

	Returns:
		The provider's response, or a SearchResponse carrying ``error``.
	"""
	try:
		response = await asyncio.wait_for(provider.search(query, options),
		                                  timeout=timeout_seconds)
	except asyncio.TimeoutError:
		logger.warning("search timed out engine=%s after %ss", provider.name,
		               timeout_seconds)
		return SearchResponse(engine=provider.name, query=query,
		                      error=f"timed out after {timeout_seconds}s")
	except Exception as exc:
		logger.warning("search failed engine=%s: %s", provider.name, exc)
		return SearchResponse(engine=provider.name, query=query,
		                      error=str(exc) or exc.__class__.__name__)
	if response.engine != provider.name:
		response = response.model_copy(update={"engine": provider.name})
	return response


async def search_all(
    registry: ProviderRegistry,
    query: str,
    options: dict[str, Any] | None = None,
    timeout_seconds: float | None = 30,
) -> dict[str, SearchResponse]:
	"""
	Search every registered provider concurrently.

	Returns:
		Responses keyed by provider name, in registration order.
	"""
	logger.info("search_all start query=%r providers=%s", query,
	            ",".join(registry.names()))
	providers = list(registry)
	responses = await asyncio.gather(*(search_one(p, query, options,
	                                              timeout_seconds)
	                                   for p in providers))
	ok = sum(1 for r in responses if r.ok)
	logger.info("search_all done query=%r ok=%d/%d", query, ok,
	            len(responses))
	return {p.name: r for p, r in zip(providers, responses)}


__all__ = ["ProviderRegistry", "search_one", "search_all"]
