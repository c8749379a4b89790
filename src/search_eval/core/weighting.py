"""
Weighted combination of dimension scores.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from search_eval.models.eval_config import Dimension
from search_eval.models.score_record import ScoreRecord


def combine_weighted_scores(scores: Mapping[str, ScoreRecord],
                            dimensions: Sequence[Dimension]) -> float:
	"""
	Combine dimension scores into one weighted score.

	Missing and error records are skipped and the remaining weights are
	renormalized, so one failed dimension does not drag the score down.

	Parameters:
		scores: Records keyed by dimension name.
		dimensions: Configured dimensions with weights.

	Returns:
		Weighted mean of the usable scores, or 0.0 if none are usable.
	"""
	total = 0.0
	weight_sum = 0.0
	for dim in dimensions:
		record = scores.get(dim.name)
		if record is None or record.error:
			continue
		total += record.score * dim.weight
		weight_sum += dim.weight
	if weight_sum == 0:
		return 0.0
	return total / weight_sum


__all__ = ["combine_weighted_scores"]
