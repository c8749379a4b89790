"""Timestamp and delay helpers."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone


def utc_now_iso() -> str:
	"""Return the current UTC time as an ISO-8601 string."""
	return datetime.now(timezone.utc).isoformat()


async def sleep_ms(ms: int | float) -> None:
	"""Sleep for ``ms`` milliseconds; no-op for zero or negative values."""
	if ms and ms > 0:
		await asyncio.sleep(ms / 1000)


__all__ = ["utc_now_iso", "sleep_ms"]
