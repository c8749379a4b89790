"""
Judge prompt model.

A judge request is either a single instruction string or a
system/user message pair.
"""

from __future__ import annotations

from pydantic import BaseModel


class JudgePrompt(BaseModel):
	"""System rubric plus user content for one judge call."""

	system: str | None = None
	user: str | None = None

	def to_messages(self) -> list[dict[str, str]]:
		"""Render as chat-completion messages, skipping empty parts."""
		messages = []
		if self.system:
			messages.append({"role": "system", "content": self.system})
		if self.user:
			messages.append({"role": "user", "content": self.user})
		return messages


__all__ = ["JudgePrompt"]
