"""
Judge client for scoring result-sets.

Wraps one call to an OpenAI-compatible chat completions endpoint with
bounded, linearly backed-off retries, and converts the judge's free-form
answer into a numeric score.
"""

from __future__ import annotations

import json
import math
from typing import Any

import httpx
from pydantic import BaseModel

from search_eval.errors import JudgeUnavailable, Unparseable
from search_eval.models.prompt import JudgePrompt
from search_eval.utils.clock import sleep_ms
from search_eval.utils.logging import get_logger
from search_eval.utils.parsing import (
    extract_balanced_json,
    extract_first_number,
    extract_result_tag,
    parse_bare_number,
)

logger = get_logger(__name__)


class ParsedScore(BaseModel):
	"""Score and reasoning extracted from a judge answer."""

	score: float
	reasoning: str


def _coerce_score(payload: Any) -> float | None:
	"""Return the numeric ``score`` field, or None (NaN counts as missing)."""
	if not isinstance(payload, dict):
		return None
	value = payload.get("score")
	if isinstance(value, bool):
		return None
	try:
		score = float(value)
	except (TypeError, ValueError):
		return None
	if math.isnan(score):
		return None
	return score


def _from_json(candidate: str, full_text: str) -> ParsedScore | None:
	try:
		payload = json.loads(candidate)
	except ValueError:
		return None
	score = _coerce_score(payload)
	if score is None:
		return None
	reasoning = payload.get("reasoning")
	return ParsedScore(score=score,
	                   reasoning=str(reasoning) if reasoning else full_text)


def parse_judge_response(text: str) -> ParsedScore:
	"""
	Extract a score from judge output.

	Tries, in order: a ``<result>`` tag holding a bare number, JSON or
	some number, the first balanced JSON object, then the first number
	in the text.

	Parameters:
		text: Raw judge answer.

	Returns:
		ParsedScore with the unclamped score.

	Raises:
		Unparseable: If no score can be found.
	"""
	text = text or ""
	full = text.strip()

	tag = extract_result_tag(text)
	if tag is not None:
		number = parse_bare_number(tag)
		if number is not None:
			return ParsedScore(score=number, reasoning=full)
		parsed = _from_json(tag, full)
		if parsed is not None:
			return parsed
		# e.g. <result>Score: 4</result>
		number = extract_first_number(tag)
		if number is not None:
			return ParsedScore(score=number, reasoning=full)

	balanced = extract_balanced_json(text)
	if balanced is not None:
		parsed = _from_json(balanced, full)
		if parsed is not None:
			return parsed

	number = extract_first_number(text)
	if number is not None:
		return ParsedScore(score=number, reasoning=full)

	raise Unparseable("no score found in judge response", raw_text=text)


def _extract_content(response: httpx.Response) -> str:
	"""Return the first choice's message content, or the raw body."""
	try:
		data = response.json()
	except ValueError:
		return response.text
	if isinstance(data, dict) and isinstance(data.get("choices"),
	                                         list) and data["choices"]:
		first_choice = data["choices"][0]
		if isinstance(first_choice, dict):
			message = first_choice.get("message") or {}
			content = (message.get("content") if isinstance(message, dict)
			           else None) or first_choice.get("text")
			if content:
				return content
	if isinstance(data, dict) and "text" in data:
		return str(data["text"])
	return response.text


class ScoreJudge:
	"""Scoring oracle backed by a chat completions endpoint."""

	def __init__(
	    self,
	    client: httpx.AsyncClient,
	    url: str,
	    model: str,
	    api_key: str,
	    *,
	    max_retries: int = 3,
	    retry_backoff_ms: int = 1000,
	    temperature: float = 0.1,
	    max_tokens: int = 500,
	):
		self.client = client
		self.url = url
		self.model = model
		self.api_key = api_key
		self.max_retries = max(1, max_retries)
		self.retry_backoff_ms = retry_backoff_ms
		self.temperature = temperature
		self.max_tokens = max_tokens

	def build_request(self, payload: str | JudgePrompt) -> dict[str, Any]:
		"""Build the chat completions request body."""
		if isinstance(payload, JudgePrompt):
			messages = payload.to_messages()
		else:
			messages = [{"role": "user", "content": payload}]
		return {
		    "model": self.model,
		    "messages": messages,
		    "temperature": self.temperature,
		    "max_tokens": self.max_tokens,
		}

	async def judge(self, payload: str | JudgePrompt) -> str:
		"""
		Send a scoring request and return the judge's text answer.

		Parameters:
			payload: Combined instruction string or system/user prompt.

		Returns:
			Raw answer text.

		Raises:
			JudgeUnavailable: After every attempt failed.
		"""
		body = self.build_request(payload)
		headers = {
		    "Authorization": f"Bearer {self.api_key}",
		    "Content-Type": "application/json",
		}
		last_error: Exception | None = None
		for attempt in range(1, self.max_retries + 1):
			try:
				response = await self.client.post(self.url, json=body,
				                                  headers=headers)
				response.raise_for_status()
				return _extract_content(response)
			except httpx.HTTPError as exc:
				last_error = exc
				logger.warning(
				    "judge call failed attempt=%d/%d error=%s",
				    attempt,
				    self.max_retries,
				    exc,
				)
				if attempt < self.max_retries:
					await sleep_ms(attempt * self.retry_backoff_ms)
		raise JudgeUnavailable(
		    f"judge unavailable after {self.max_retries} attempts: "
		    f"{last_error}",
		    attempts=self.max_retries,
		)


__all__ = ["ParsedScore", "parse_judge_response", "ScoreJudge"]
