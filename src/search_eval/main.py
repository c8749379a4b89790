from __future__ import annotations

import asyncio
import sys

import typer
from typer.main import get_command

from search_eval.errors import ConfigInvalid
from search_eval.models.config import Config, load_env
from search_eval.models.run_params import RunParams
from search_eval.loaders.eval_config import load_eval_config
from search_eval.core.runner import run_batch
from search_eval.ui.tui import TUI
from search_eval.utils.logging import configure_logging

cli = typer.Typer(add_completion=False, no_args_is_help=True)


@cli.callback()
def root() -> None:
	"""
	Root callback for the search-eval CLI.

	Sets up the Typer application with no-args-is-help behavior.
	"""
	return None


def run_impl(
    queries_file: str | None = None,
    query: str | None = None,
    repeat_times: int | None = None,
    batch_rounds: int | None = None,
    output_dir: str | None = None,
    deadline: float | None = None,
    config_file: str | None = None,
) -> None:
	"""
	Evaluate every enabled search provider and rank them.

	Loads configuration, runs the batch (one outer round when a single
	query is given), shows progress in the TUI and prints the rankings.

	Parameters:
		queries_file: Path to a .txt/.json/.csv query list.
		query: A single query, instead of a queries file.
		repeat_times: Override for scoring rounds per provider.
		batch_rounds: Override for outer rounds over the query set.
		output_dir: Override for the results directory.
		deadline: Stop between cells after this many seconds.
		config_file: Override for the evaluation config path.
	"""
	load_env()
	try:
		params = RunParams(
		    queries_file=queries_file,
		    query=query,
		    repeat_times=repeat_times,
		    batch_rounds=batch_rounds,
		    output_dir=output_dir,
		    deadline=deadline,
		    config_file=config_file,
		)
		config = Config()
	except ValueError as exc:
		typer.echo(f"invalid arguments: {exc}", err=True)
		raise typer.Exit(code=2)
	config.apply_overrides(params)
	if params.query:
		config.batch_rounds = 1
	configure_logging(config.log_level)

	try:
		eval_config = load_eval_config(config.eval_config_file)
		config.require_judge()
	except ConfigInvalid as exc:
		typer.echo(f"configuration error: {exc}", err=True)
		raise typer.Exit(code=2)

	typer.echo(
	    f"Running with judge={config.judge_model}, "
	    f"dimensions={','.join(eval_config.dimension_names)}, "
	    f"engines={','.join(eval_config.enabled_providers)}, "
	    f"repeat_times={config.repeat_times}, "
	    f"batch_rounds={config.batch_rounds}")

	try:
		with TUI(list(eval_config.enabled_providers)) as ui:

			def progress_cb(run_id: str, msg: str) -> None:
				ui.update(str(run_id), msg)

			report, paths = asyncio.run(
			    run_batch(
			        config,
			        params,
			        progress_cb=progress_cb,
			        eval_config=eval_config,
			    ))
			ui.print_summary(report, paths)
	except ConfigInvalid as exc:
		typer.echo(f"configuration error: {exc}", err=True)
		raise typer.Exit(code=2)
	except (FileNotFoundError, ValueError) as exc:
		typer.echo(f"error: {exc}", err=True)
		raise typer.Exit(code=1)


@cli.command()
def run(
    queries_file: str,
    repeat_times: int = typer.Option(None, "--repeat-times",
                                     help="Override scoring rounds"),
    batch_rounds: int = typer.Option(None, "--batch-rounds",
                                     help="Override outer batch rounds"),
    output_dir: str = typer.Option(None, "--output-dir",
                                   help="Override output directory"),
    deadline: float = typer.Option(None, "--deadline",
                                   help="Batch deadline in seconds"),
    config_file: str = typer.Option(None, "--config",
                                    help="Evaluation config file"),
) -> None:
	"""
	Run a batch evaluation over every query in QUERIES_FILE.
	"""
	run_impl(queries_file, None, repeat_times, batch_rounds, output_dir,
	         deadline, config_file)


@cli.command("eval")
def eval_query(
    query: str,
    repeat_times: int = typer.Option(None, "--repeat-times",
                                     help="Override scoring rounds"),
    output_dir: str = typer.Option(None, "--output-dir",
                                   help="Override output directory"),
    deadline: float = typer.Option(None, "--deadline",
                                   help="Deadline in seconds"),
    config_file: str = typer.Option(None, "--config",
                                    help="Evaluation config file"),
) -> None:
	"""
	Evaluate a single QUERY across every enabled engine.
	"""
	run_impl(None, query, repeat_times, None, output_dir, deadline,
	         config_file)


def entrypoint(argv=None, *, standalone_mode: bool = True):
	"""
	Typer entrypoint that defaults to `run` when appropriate.

	Allows calling 'search-eval queries.txt' without explicitly
	specifying the 'run' subcommand.

	Parameters:
		argv: Command-line arguments. Defaults to sys.argv[1:].
		standalone_mode: If True, Click handles exit codes.

	Returns:
		Result of the Click application main invocation.
	"""
	args = sys.argv[1:] if argv is None else list(argv)

	_click_app = get_command(cli)
	commands = getattr(_click_app, "commands", {}).keys()
	# allow optional `run` prefix; default to run when first arg is not a command/option
	if args and args[0] == "run":
		args = args[1:]
	if args and not args[0].startswith("-") and args[0] not in commands:
		args = ["run"] + args
	return _click_app.main(
	    args=args,
	    prog_name="search-eval",
	    standalone_mode=standalone_mode,
	)


if __name__ == "__main__":
	entrypoint()
