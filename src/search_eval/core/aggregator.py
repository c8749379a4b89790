"""
Cross-provider ranking for one query.

Ranks providers per scoring system by their mean weighted score and on
a combined scale where both systems are normalized to [0, 1].
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from search_eval.models.provider_evaluation import (
    ProviderEvaluation,
    ProviderFailure,
)
from search_eval.models.query_evaluation import (
    QuerySummary,
    RankingEntry,
    Rankings,
)
from search_eval.models.scoring_system import (
    BINARY,
    FIVE_POINT,
    SCORING_SYSTEMS,
    get_scoring_system,
)


def normalize_score(system: str, value: float) -> float:
	"""Map a score on the named scale to [0, 1]."""
	return get_scoring_system(system).normalize(value)


def combined_score(binary: float | None, five_point: float | None) -> float:
	"""
	Average of both normalized scores.

	A missing scale contributes 0 instead of being skipped, so providers
	scored on only one system rank below fully scored ones.
	"""
	b = normalize_score(BINARY.name, binary) if binary is not None else 0.0
	f = (normalize_score(FIVE_POINT.name, five_point)
	     if five_point is not None else 0.0)
	return (f + b) / 2


def rank_entries(items: Iterable[Mapping[str, Any]]) -> list[RankingEntry]:
	"""
	Sort by score descending and assign ranks 1..n.

	Ties keep their input order and still get distinct ranks.

	Parameters:
		items: Mappings with ``engine`` and ``score``, plus optional
			``stability`` and ``success_rate``.

	Returns:
		Ranking entries in rank order.
	"""
	ordered = sorted(items, key=lambda item: item["score"], reverse=True)
	return [
	    RankingEntry(
	        rank=i,
	        engine=item["engine"],
	        score=item["score"],
	        stability=item.get("stability"),
	        success_rate=item.get("success_rate"),
	    ) for i, item in enumerate(ordered, start=1)
	]


def rank_providers(
    engines: Mapping[str, ProviderEvaluation | ProviderFailure]) -> Rankings:
	"""
	Rank the providers of one query.

	Providers without a mean weighted score for a system are left out of
	that system's ranking; failed providers are left out of all of them.
	"""
	by_system: dict[str, dict[str, float]] = {
	    name: {} for name in SCORING_SYSTEMS
	}
	rates: dict[str, float] = {}
	for engine, ev in engines.items():
		if not isinstance(ev, ProviderEvaluation):
			continue
		for system, avg in ev.average_scores.items():
			if system in by_system and avg.weighted is not None:
				by_system[system][engine] = avg.weighted
				rates[engine] = max(rates.get(engine, 0.0),
				                    avg.round_success_rate)

	rankings: dict[str, list[RankingEntry]] = {}
	for system, scores in by_system.items():
		rankings[system] = rank_entries({
		    "engine": engine,
		    "score": score,
		    "success_rate": rates.get(engine),
		} for engine, score in scores.items())

	combined_engines = [
	    engine for engine in engines
	    if any(engine in scores for scores in by_system.values())
	]
	rankings["combined"] = rank_entries({
	    "engine": engine,
	    "score": combined_score(
	        by_system[BINARY.name].get(engine),
	        by_system[FIVE_POINT.name].get(engine),
	    ),
	    "success_rate": rates.get(engine),
	} for engine in combined_engines)
	return Rankings(**rankings)


def summarize_query(
    engines: Mapping[str, ProviderEvaluation | ProviderFailure]
) -> QuerySummary:
	"""Count successes and failures and rank the providers of one query."""
	failures = {
	    name: ev.error
	    for name, ev in engines.items() if isinstance(ev, ProviderFailure)
	}
	return QuerySummary(
	    total_engines=len(engines),
	    successful_engines=len(engines) - len(failures),
	    failed_engines=len(failures),
	    failures=failures,
	    rankings=rank_providers(engines),
	)


__all__ = [
    "normalize_score",
    "combined_score",
    "rank_entries",
    "rank_providers",
    "summarize_query",
]
