"""
HTTP search provider adapters.

One adapter class serves every JSON web search API. What differs per
API is captured in a ``SearchApi``: how to build the request and how to
turn the decoded body into SearchResultItem lists. All adapters share an
httpx.AsyncClient and report failures through ``SearchResponse.error``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

import httpx

from search_eval.errors import ConfigInvalid
from search_eval.models.config import Config
from search_eval.models.eval_config import EvalConfig, ProviderSettings
from search_eval.models.search import SearchResponse, SearchResultItem
from search_eval.integrations.search import ProviderRegistry
from search_eval.utils.logging import get_logger

logger = get_logger(__name__)

# (query, api_key, base_url, options) -> httpx.AsyncClient.request kwargs
RequestBuilder = Callable[[str, str, str, dict[str, Any]], dict[str, Any]]
ResultParser = Callable[[Any], list[SearchResultItem]]


def extract_domain(url: str | None) -> str:
	if not url:
		return ""
	return urlparse(url).hostname or ""


@dataclass(frozen=True)
class SearchApi:
	"""Request and response shape of one web search API."""

	kind: str
	default_base_url: str
	build_request: RequestBuilder
	parse_results: ResultParser


class HttpSearchProvider:
	"""Search provider backed by a JSON web search API."""

	def __init__(self, name: str, settings: ProviderSettings,
	             client: httpx.AsyncClient, api: SearchApi):
		if not settings.api_key:
			raise ConfigInvalid(f"provider {name} is enabled but has no api_key")
		self.name = name
		self.settings = settings
		self.client = client
		self.api = api
		self.base_url = settings.base_url or api.default_base_url

	def _options(self, options: dict[str, Any] | None) -> dict[str, Any]:
		merged = dict(self.settings.options)
		merged.update(options or {})
		return merged

	async def search(self, query: str,
	                 options: dict[str, Any] | None = None) -> SearchResponse:
		"""Run a search; HTTP and decoding errors become ``error``."""
		opts = self._options(options)
		request = self.api.build_request(query, self.settings.api_key,
		                                 self.base_url, opts)
		try:
			response = await self.client.request(**request)
			response.raise_for_status()
			results = self.api.parse_results(response.json())
		except httpx.HTTPStatusError as exc:
			return SearchResponse(
			    engine=self.name,
			    query=query,
			    error=f"HTTP {exc.response.status_code}",
			)
		except (httpx.HTTPError, ValueError) as exc:
			return SearchResponse(engine=self.name, query=query,
			                      error=str(exc) or exc.__class__.__name__)
		max_results = opts.get("max_results")
		if max_results:
			results = results[:max_results]
		logger.debug("search engine=%s kind=%s results=%d", self.name,
		             self.api.kind, len(results))
		return SearchResponse(engine=self.name, query=query, results=results)


def _list_field(data: Any, *keys: str) -> list[dict[str, Any]]:
	"""Return the first list found under keys, keeping only dict items."""
	if not isinstance(data, dict):
		return []
	for key in keys:
		items = data.get(key)
		if isinstance(items, list):
			return [item for item in items if isinstance(item, dict)]
	return []


def serper_request(query: str, api_key: str, base_url: str,
                   options: dict[str, Any]) -> dict[str, Any]:
	return {
	    "method": "POST",
	    "url": base_url,
	    "json": {
	        "q": query,
	        "hl": options.get("language", "zh-cn"),
	        "num": options.get("max_results", 10),
	    },
	    "headers": {
	        "X-API-KEY": api_key,
	        "Content-Type": "application/json",
	    },
	}


def parse_serper(data: Any) -> list[SearchResultItem]:
	return [
	    SearchResultItem(
	        title=item.get("title") or "",
	        url=item.get("link") or "",
	        snippet=item.get("snippet") or "",
	        source=item.get("source") or extract_domain(item.get("link")),
	        published_time=item.get("date"),
	    ) for item in _list_field(data, "organic")
	]


def jina_request(query: str, api_key: str, base_url: str,
                 options: dict[str, Any]) -> dict[str, Any]:
	return {
	    "method": "GET",
	    "url": base_url,
	    "params": {
	        "q": query,
	        "hl": options.get("language", "zh-cn")
	    },
	    "headers": {
	        "Accept": "application/json",
	        "Authorization": f"Bearer {api_key}",
	        "X-Respond-With": "no-content",
	    },
	}


def parse_jina(data: Any) -> list[SearchResultItem]:
	return [
	    SearchResultItem(
	        title=item.get("title") or "",
	        url=item.get("url") or "",
	        snippet=item.get("content") or item.get("description") or "",
	        source=item.get("source") or extract_domain(item.get("url")),
	        published_time=item.get("publishedDate"),
	    ) for item in _list_field(data, "data")
	]


def zhipu_request(query: str, api_key: str, base_url: str,
                  options: dict[str, Any]) -> dict[str, Any]:
	"""
	Build a Zhipu web search request.

	The ``engine`` option selects the backend (``search_pro``,
	``search_pro_sogou``, ``search_pro_quark``).
	"""
	return {
	    "method": "POST",
	    "url": base_url,
	    "json": {
	        "search_query": query,
	        "search_engine": options.get("engine", "search_pro"),
	        "search_intent": False,
	        "count": options.get("max_results", 10),
	        "search_recency_filter": options.get("recency_filter", "noLimit"),
	        "content_size": options.get("content_size", "medium"),
	    },
	    "headers": {
	        "Authorization": f"Bearer {api_key}",
	        "Content-Type": "application/json",
	    },
	}


def parse_zhipu(data: Any) -> list[SearchResultItem]:
	results = []
	for item in _list_field(data, "search_result", "data"):
		url = item.get("link") or item.get("url") or ""
		results.append(
		    SearchResultItem(
		        title=item.get("title") or "",
		        url=url,
		        snippet=item.get("content") or item.get("snippet") or "",
		        source=(item.get("media") or item.get("source")
		                or extract_domain(url)),
		        published_time=(item.get("publish_date")
		                        or item.get("publish_time")),
		    ))
	return results


SERPER = SearchApi(
    kind="serper",
    default_base_url="https://google.serper.dev/search",
    build_request=serper_request,
    parse_results=parse_serper,
)

JINA = SearchApi(
    kind="jina",
    default_base_url="https://s.jina.ai/",
    build_request=jina_request,
    parse_results=parse_jina,
)

ZHIPU = SearchApi(
    kind="zhipu",
    default_base_url="https://open.bigmodel.cn/api/paas/v4/web_search",
    build_request=zhipu_request,
    parse_results=parse_zhipu,
)

PROVIDER_KINDS: dict[str, SearchApi] = {
    api.kind: api for api in (SERPER, JINA, ZHIPU)
}


def build_registry(eval_config: EvalConfig, config: Config,
                   client: httpx.AsyncClient) -> ProviderRegistry:
	"""
	Create adapters for every enabled provider.

	Parameters:
		eval_config: Provider settings and enable flags.
		config: Runtime configuration.
		client: Shared HTTP client.

	Returns:
		Registry holding the enabled providers in configured order.

	Raises:
		ConfigInvalid: If no provider is enabled, or one has an unknown
			kind or no credentials.
	"""
	registry = ProviderRegistry()
	for name, settings in eval_config.enabled_providers.items():
		kind = settings.kind or name
		api = PROVIDER_KINDS.get(kind)
		if api is None:
			raise ConfigInvalid(f"provider {name} has unknown kind: {kind}")
		registry.register(HttpSearchProvider(name, settings, client, api))
	if not len(registry):
		raise ConfigInvalid("no search provider is enabled")
	logger.info("providers enabled: %s (max_results=%d)",
	            ",".join(registry.names()), config.max_results)
	return registry


__all__ = [
    "SearchApi",
    "HttpSearchProvider",
    "SERPER",
    "JINA",
    "ZHIPU",
    "PROVIDER_KINDS",
    "build_registry",
]
