"""
Search evaluation models.

This subpackage contains Pydantic models for configuration, search
results, scoring records, per-query evaluations and batch reports.

Key models:
    - Config: Application configuration loaded from environment
    - EvalConfig: Dimensions, rubric overrides and provider settings
    - ScoringSystem: The binary and five-point scales
    - ProviderEvaluation: Repeated scoring rounds for one provider
    - QueryEvaluation: One query evaluated across providers
    - BatchReport: Aggregated result of a batch run
"""

from .config import Config, load_env
from .run_params import RunParams
from .scoring_system import (
    ScoringSystem,
    BINARY,
    FIVE_POINT,
    SCORING_SYSTEMS,
    get_scoring_system,
)
from .eval_config import (
    WEIGHT_TOLERANCE,
    Dimension,
    ProviderSettings,
    EvalConfig,
    validate_dimensions,
)
from .search import SearchResultItem, SearchResponse
from .prompt import JudgePrompt
from .score_record import ScoreRecord, RoundStatus, RoundEvaluation, ScoredResult
from .provider_evaluation import (
    RoundSummary,
    ScoringAverage,
    ProviderEvaluation,
    ProviderFailure,
)
from .query_evaluation import RankingEntry, Rankings, QuerySummary, QueryEvaluation
from .batch_report import (
    ScoreStats,
    StabilityStats,
    AggregatedPerformance,
    BatchCell,
    BatchRound,
    TestSummary,
    BatchMetadata,
    BatchReport,
)
from .summary import RankingRow, StabilityRow, SummaryData, build_summary_data

__all__ = [
    "Config",
    "load_env",
    "RunParams",
    "ScoringSystem",
    "BINARY",
    "FIVE_POINT",
    "SCORING_SYSTEMS",
    "get_scoring_system",
    "WEIGHT_TOLERANCE",
    "Dimension",
    "ProviderSettings",
    "EvalConfig",
    "validate_dimensions",
    "SearchResultItem",
    "SearchResponse",
    "JudgePrompt",
    "ScoreRecord",
    "RoundStatus",
    "RoundEvaluation",
    "ScoredResult",
    "RoundSummary",
    "ScoringAverage",
    "ProviderEvaluation",
    "ProviderFailure",
    "RankingEntry",
    "Rankings",
    "QuerySummary",
    "QueryEvaluation",
    "ScoreStats",
    "StabilityStats",
    "AggregatedPerformance",
    "BatchCell",
    "BatchRound",
    "TestSummary",
    "BatchMetadata",
    "BatchReport",
    "RankingRow",
    "StabilityRow",
    "SummaryData",
    "build_summary_data",
]
