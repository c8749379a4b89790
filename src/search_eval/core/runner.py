"""
Main orchestrator for batch evaluation runs.

Wires configuration, providers, the judge and the aggregation engine
together and persists the results.
"""

from __future__ import annotations

from pathlib import Path

from search_eval.core.batch import BatchAggregationEngine
from search_eval.core.evaluator import SingleQueryEvaluator
from search_eval.integrations.http_providers import build_registry
from search_eval.integrations.search import ProviderRegistry
from search_eval.judge_client import create_http_client, create_judge
from search_eval.loaders.eval_config import load_eval_config
from search_eval.loaders.queries import load_queries
from search_eval.loaders.rubrics import load_rubrics
from search_eval.models.batch_report import BatchReport
from search_eval.models.config import Config
from search_eval.models.eval_config import EvalConfig
from search_eval.models.run_params import RunParams
from search_eval.ui.progress import ProgressCallback
from search_eval.ui.reporting import save_results
from search_eval.utils.cancellation import CancellationToken
from search_eval.utils.logging import get_logger
from search_eval.utils.protocols import JudgeProtocol

logger = get_logger(__name__)


def resolve_queries(run_params: RunParams) -> list[str]:
	"""
	Return the queries selected by the run parameters.

	Raises:
		ValueError: If neither a query nor a non-empty queries file is
			given.
	"""
	if run_params.query:
		return [run_params.query]
	if not run_params.queries_file:
		raise ValueError("either a query or a queries file is required")
	queries = load_queries(run_params.queries_file)
	if not queries:
		raise ValueError(f"no queries found in {run_params.queries_file}")
	return queries


async def run_evaluation(
    config: Config,
    eval_config: EvalConfig,
    registry: ProviderRegistry,
    judge: JudgeProtocol,
    queries: list[str],
    progress_cb: ProgressCallback | None = None,
    cancel_token: CancellationToken | None = None,
) -> BatchReport:
	"""
	Run a batch with already constructed providers and judge.

	Parameters:
		config: Runtime configuration.
		eval_config: Dimensions and rubric settings.
		registry: Search providers.
		judge: Scoring oracle.
		queries: Queries to evaluate.
		progress_cb: Optional progress callback.
		cancel_token: Optional cancellation token.

	Returns:
		The batch report.
	"""
	evaluator = SingleQueryEvaluator.from_config(
	    judge,
	    eval_config,
	    config,
	    rubrics=load_rubrics(eval_config),
	    progress_cb=progress_cb,
	)
	engine = BatchAggregationEngine(
	    registry,
	    evaluator,
	    batch_rounds=config.batch_rounds,
	    query_delay_ms=config.query_delay_ms,
	    round_delay_ms=config.round_delay_ms,
	    search_options=config.search_options,
	    provider_timeout_seconds=config.provider_timeout_seconds,
	    progress_cb=progress_cb,
	)
	return await engine.run(queries, cancel_token)


async def run_batch(
    config: Config,
    run_params: RunParams,
    progress_cb: ProgressCallback | None = None,
    eval_config: EvalConfig | None = None,
) -> tuple[BatchReport, dict[str, Path]]:
	"""
	Load inputs, run the batch and save the results.

	Parameters:
		config: Application configuration with CLI overrides applied.
		run_params: Validated run parameters.
		progress_cb: Optional progress callback.
		eval_config: Preloaded evaluation config; loaded from
			``config.eval_config_file`` when omitted.

	Returns:
		The report and the paths of the saved result files.

	Raises:
		ConfigInvalid: If the judge, providers or evaluation config are
			not usable.
	"""
	eval_config = eval_config or load_eval_config(config.eval_config_file)
	queries = resolve_queries(run_params)
	logger.info("run_batch start queries=%d rounds=%d repeat=%d",
	            len(queries), config.batch_rounds, config.repeat_times)
	token = CancellationToken(config.deadline_seconds)
	async with create_http_client(config) as client:
		judge = create_judge(config, client)
		registry = build_registry(eval_config, config, client)
		report = await run_evaluation(
		    config,
		    eval_config,
		    registry,
		    judge,
		    queries,
		    progress_cb=progress_cb,
		    cancel_token=token,
		)
	paths = save_results(report, config.output_path)
	logger.info("run_batch done output=%s", config.output_path)
	return report, paths


__all__ = ["run_batch", "run_evaluation", "resolve_queries"]
