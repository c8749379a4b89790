"""
Scoring system definitions.

Two fixed integer scales are used to express every dimension score:
a three-level binary-style scale and a five-point scale.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict


class ScoringSystem(BaseModel):
	"""An ordered integer scale with a label per value."""

	model_config = ConfigDict(frozen=True)

	name: str
	description: str
	scale: tuple[int, ...]
	labels: dict[int, str]

	@property
	def minimum(self) -> int:
		return min(self.scale)

	@property
	def maximum(self) -> int:
		return max(self.scale)

	def clamp(self, value: float) -> int:
		"""
		Round half-up and clamp into the scale bounds.

		Infinities clamp to the nearest bound. NaN has no position on
		the scale and raises ValueError.
		"""
		if math.isnan(value):
			raise ValueError(f"cannot clamp NaN into {self.name} scale")
		if math.isinf(value):
			return self.maximum if value > 0 else self.minimum
		rounded = math.floor(value + 0.5)
		return max(self.minimum, min(self.maximum, rounded))

	def contains(self, value: float) -> bool:
		"""Return True when value lies within the scale bounds."""
		return self.minimum <= value <= self.maximum

	def normalize(self, value: float) -> float:
		"""Map a value on this scale to [0, 1]."""
		span = self.maximum - self.minimum
		return (value - self.minimum) / span

	def describe_scale(self) -> str:
		"""Render one line per scale value for rubric prompts."""
		return "\n".join(
		    f"- {value}: {self.labels.get(value, '')}".rstrip()
		    for value in self.scale)


BINARY = ScoringSystem(
    name="binary",
    description="Three-level scale (0-2)",
    scale=(0, 1, 2),
    labels={
        0: "does not meet the requirement",
        1: "partially meets the requirement",
        2: "fully meets the requirement",
    },
)

FIVE_POINT = ScoringSystem(
    name="five_point",
    description="Five-point scale (1-5)",
    scale=(1, 2, 3, 4, 5),
    labels={
        1: "very poor, does not meet the requirement at all",
        2: "poor, mostly fails the requirement",
        3: "fair, partially meets the requirement",
        4: "good, meets most of the requirement",
        5: "excellent, fully meets the requirement",
    },
)

SCORING_SYSTEMS: dict[str, ScoringSystem] = {
    BINARY.name: BINARY,
    FIVE_POINT.name: FIVE_POINT,
}


def get_scoring_system(name: str) -> ScoringSystem:
	"""
	Look up a scoring system by name.

	Raises:
		KeyError: If the name is not one of the known systems.
	"""
	try:
		return SCORING_SYSTEMS[name]
	except KeyError:
		raise KeyError(f"unknown scoring system: {name}") from None


__all__ = [
    "ScoringSystem",
    "BINARY",
    "FIVE_POINT",
    "SCORING_SYSTEMS",
    "get_scoring_system",
]
