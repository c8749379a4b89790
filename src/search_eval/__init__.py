"""
Search Eval - comparative, multi-round evaluation of search providers.

This package scores result-sets from several search providers with an
LLM judge, repeats the scoring to measure judge variance, and aggregates
the observations into rankings with stability metrics.

Main entry points:
    - search_eval.main: CLI entrypoint
    - search_eval.core.batch: BatchAggregationEngine for batch runs
    - search_eval.models.config: Config and load_env()
"""
