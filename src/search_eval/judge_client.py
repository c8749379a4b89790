"""
Judge client factory module.

Provides factory functions for the shared HTTP client and the
ScoreJudge built from runtime configuration.
"""

from __future__ import annotations

import httpx

from search_eval.core.judge import ScoreJudge
from search_eval.models.config import Config


def create_http_client(config: Config) -> httpx.AsyncClient:
	"""Factory for the AsyncClient shared by the judge and providers."""
	timeout = max(config.judge_timeout_seconds,
	              config.provider_timeout_seconds)
	return httpx.AsyncClient(timeout=httpx.Timeout(timeout))


def create_judge(config: Config, client: httpx.AsyncClient) -> ScoreJudge:
	"""
	Factory for ScoreJudge with configured endpoint and retry policy.

	Raises:
		ConfigInvalid: If the judge URL, model or key is missing.
	"""
	config.require_judge()
	return ScoreJudge(
	    client,
	    config.judge_url,
	    config.judge_model,
	    config.judge_api_key,
	    max_retries=config.judge_max_retries,
	    retry_backoff_ms=config.judge_retry_backoff_ms,
	    temperature=config.judge_temperature,
	    max_tokens=config.judge_max_tokens,
	)


__all__ = ["create_http_client", "create_judge"]
