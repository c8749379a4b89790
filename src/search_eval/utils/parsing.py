"""
Judge response parsing utilities.

Provides functions for extracting ``<result>`` tags, JSON objects
and bare numbers from free-form judge output.
"""

from __future__ import annotations

import re
from typing import Optional

RESULT_TAG_RE = re.compile(r"<result>(.*?)</result>", re.S | re.I)
NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
BARE_NUMBER_RE = re.compile(r"^\s*-?\d+(?:\.\d+)?\s*$")


def extract_result_tag(text: str) -> Optional[str]:
	"""
	Return the stripped content of the first ``<result>`` tag.

	Parameters:
		text: Judge output.

	Returns:
		Tag content, or None if the text has no result tag.
	"""
	m = RESULT_TAG_RE.search(text)
	if m:
		return m.group(1).strip()
	return None


def extract_balanced_json(text: str) -> Optional[str]:
	"""Heuristic: extract the first balanced ``{...}`` block from text."""
	stack = 0
	start = None
	for i, ch in enumerate(text):
		if ch == '{':
			if stack == 0:
				start = i
			stack += 1
		elif ch == '}':
			if stack > 0:
				stack -= 1
				if stack == 0 and start is not None:
					return text[start:i + 1]
	return None


def parse_bare_number(text: str) -> Optional[float]:
	"""Return text as a float when it is nothing but a number."""
	if BARE_NUMBER_RE.match(text):
		return float(text)
	return None


def extract_first_number(text: str) -> Optional[float]:
	"""
	Return the first decimal number appearing in text.

	Parameters:
		text: Input text.

	Returns:
		The number as float, or None when text holds no digits.
	"""
	m = NUMBER_RE.search(text)
	if m:
		return float(m.group(0))
	return None


def truncate_reasoning(reasoning: str | None, limit: int = 200) -> str:
	"""
	Shorten judge reasoning for log lines.

	Keeps the ``<result>`` tag visible when present.

	Parameters:
		reasoning: Raw reasoning text.
		limit: Maximum length of the text before the tag.

	Returns:
		Display-friendly reasoning.
	"""
	if not reasoning:
		return "no reasoning"
	m = RESULT_TAG_RE.search(reasoning)
	if m:
		before = reasoning[:m.start()]
		if len(before) > limit:
			before = before[:limit] + "..."
		return f"{before}{m.group(0)}"
	if len(reasoning) > limit:
		return reasoning[:limit] + "..."
	return reasoning


__all__ = [
    "extract_result_tag",
    "extract_balanced_json",
    "parse_bare_number",
    "extract_first_number",
    "truncate_reasoning",
]
