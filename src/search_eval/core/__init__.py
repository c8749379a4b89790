"""Core evaluation logic.

This subpackage contains the judge client, scoring, per-query
evaluation, ranking and batch aggregation.

Key modules:
    - judge: Judge HTTP client and response parsing
    - scorer: Per-dimension scoring and round classification
    - weighting: Weighted score combination
    - evaluator: Repeated scoring of every provider for one query
    - aggregator: Cross-provider ranking
    - batch: Multi-round batch runs and performance statistics
    - runner: Main orchestration via run_batch()
"""

from search_eval.core.judge import ScoreJudge, ParsedScore, parse_judge_response
from search_eval.core.weighting import combine_weighted_scores
from search_eval.core.scorer import DimensionScorer, classify_round, format_results
from search_eval.core.aggregator import (
    normalize_score,
    combined_score,
    rank_entries,
    rank_providers,
    summarize_query,
)
from search_eval.core.evaluator import SingleQueryEvaluator, average_rounds
from search_eval.core.batch import (
    BatchAggregationEngine,
    aggregate_performance,
    rank_performance,
    summarize_batch,
    score_stats,
)
from search_eval.core.runner import run_batch, run_evaluation, resolve_queries

__all__ = [
    # judge
    "ScoreJudge",
    "ParsedScore",
    "parse_judge_response",
    # weighting
    "combine_weighted_scores",
    # scorer
    "DimensionScorer",
    "classify_round",
    "format_results",
    # aggregator
    "normalize_score",
    "combined_score",
    "rank_entries",
    "rank_providers",
    "summarize_query",
    # evaluator
    "SingleQueryEvaluator",
    "average_rounds",
    # batch
    "BatchAggregationEngine",
    "aggregate_performance",
    "rank_performance",
    "summarize_batch",
    "score_stats",
    # runner
    "run_batch",
    "run_evaluation",
    "resolve_queries",
]
