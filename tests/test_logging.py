"""Tests for the logging module: credential sanitization."""

from __future__ import annotations

import logging

from search_eval.utils.logging import (
	sanitize_text,
	CredentialSanitizingFilter,
	configure_logging,
)


class TestSanitizeText:
	"""Tests for sanitize_text()."""

	def test_masks_bearer_token(self) -> None:
		"""Bearer credential sent to the judge is replaced with ***."""
		result = sanitize_text("Authorization: Bearer sk-abc123.def")
		assert "sk-abc123" not in result
		assert result == "Authorization: Bearer ***"

	def test_masks_api_key_header(self) -> None:
		"""X-API-KEY header value is masked."""
		result = sanitize_text("headers X-API-KEY: serper-secret sent")
		assert "serper-secret" not in result
		assert "sent" in result

	def test_masks_api_key_in_dict_repr(self) -> None:
		"""api_key inside a dict repr is masked."""
		result = sanitize_text("{'api_key': 'jina-secret', 'enabled': True}")
		assert "jina-secret" not in result
		assert "'enabled': True" in result

	def test_masks_query_string_key(self) -> None:
		"""api-key=... in a URL is masked without eating the next param."""
		result = sanitize_text("https://h.test/s?api-key=abc&q=python")
		assert "abc" not in result
		assert "&q=python" in result

	def test_no_change_without_credentials(self) -> None:
		"""Plain text passes through unchanged."""
		text = "round 1 system=binary status=success weighted=2.000"
		assert sanitize_text(text) == text

	def test_empty_string(self) -> None:
		"""Empty string returns empty."""
		assert sanitize_text("") == ""


class TestCredentialSanitizingFilter:
	"""Tests for the CredentialSanitizingFilter logging.Filter."""

	def _make_record(
		self,
		msg: str,
		args: tuple | dict | None = None,
	) -> logging.LogRecord:
		"""Create a minimal LogRecord for testing."""
		return logging.LogRecord(
			name="test",
			level=logging.WARNING,
			pathname="test.py",
			lineno=1,
			msg=msg,
			args=args,
			exc_info=None,
		)

	def test_sanitizes_msg(self) -> None:
		"""Credential in record.msg is masked."""
		f = CredentialSanitizingFilter()
		record = self._make_record("judge call with Bearer secret-token")
		f.filter(record)
		assert "secret-token" not in record.msg

	def test_sanitizes_tuple_args(self) -> None:
		"""Credential in tuple args is masked."""
		f = CredentialSanitizingFilter()
		record = self._make_record("request: %s", ("Bearer tok123",))
		f.filter(record)
		assert isinstance(record.args, tuple)
		assert "tok123" not in record.args[0]

	def test_sanitizes_dict_args(self) -> None:
		"""Credential in dict args is masked."""
		f = CredentialSanitizingFilter()
		record = self._make_record("%(hdr)s failed")
		record.args = {"hdr": "X-API-KEY: k-999"}
		f.filter(record)
		assert "k-999" not in record.args["hdr"]

	def test_non_string_args_unchanged(self) -> None:
		"""Non-string args pass through without modification."""
		f = CredentialSanitizingFilter()
		record = self._make_record("attempt=%d", (2,))
		f.filter(record)
		assert record.args == (2,)

	def test_always_returns_true(self) -> None:
		"""Filter never suppresses records."""
		f = CredentialSanitizingFilter()
		assert f.filter(self._make_record("any message")) is True


class TestConfigureLoggingFilter:
	"""Tests that configure_logging installs the filter."""

	def _count(self, target) -> int:
		return sum(
			1 for f in target.filters
			if isinstance(f, CredentialSanitizingFilter)
		)

	def test_no_duplicate_on_repeated_calls(self) -> None:
		"""Calling configure_logging twice doesn't add duplicate filters."""
		root = logging.getLogger()
		root.filters = [
			f for f in root.filters
			if not isinstance(f, CredentialSanitizingFilter)
		]
		configure_logging("info")
		configure_logging("info")
		assert self._count(root) == 1
		for handler in root.handlers:
			assert self._count(handler) == 1
