"""Search provider integrations.

Key modules:
    - search: Provider registry and concurrent fan-out
    - http_providers: Serper, Jina and Zhipu HTTP adapters
"""

from search_eval.integrations.search import (
    ProviderRegistry,
    search_one,
    search_all,
)
from search_eval.integrations.http_providers import (
    SearchApi,
    HttpSearchProvider,
    SERPER,
    JINA,
    ZHIPU,
    PROVIDER_KINDS,
    build_registry,
)

__all__ = [
    "ProviderRegistry",
    "search_one",
    "search_all",
    "SearchApi",
    "HttpSearchProvider",
    "SERPER",
    "JINA",
    "ZHIPU",
    "PROVIDER_KINDS",
    "build_registry",
]
