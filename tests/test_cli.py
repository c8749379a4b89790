import pytest

from search_eval.main import entrypoint


def _make_fake_run_impl():
	"""Return a (fake_run_impl, seen_dict) pair for monkeypatching."""
	seen = {}

	def fake_run_impl(
	    queries_file=None,
	    query=None,
	    repeat_times=None,
	    batch_rounds=None,
	    output_dir=None,
	    deadline=None,
	    config_file=None,
	):
		seen["queries_file"] = queries_file
		seen["query"] = query
		seen["repeat_times"] = repeat_times
		seen["batch_rounds"] = batch_rounds
		seen["output_dir"] = output_dir
		seen["deadline"] = deadline
		seen["config_file"] = config_file

	return fake_run_impl, seen


def test_cli_entrypoint_defaults_to_run(monkeypatch):
	fake_run_impl, seen = _make_fake_run_impl()
	monkeypatch.setattr("search_eval.main.run_impl", fake_run_impl)
	entrypoint(
	    [
	        "queries.txt",
	        "--repeat-times",
	        "2",
	        "--batch-rounds",
	        "4",
	        "--output-dir",
	        "out",
	        "--deadline",
	        "90",
	        "--config",
	        "eval.json",
	    ],
	    standalone_mode=False,
	)
	assert seen == {
	    "queries_file": "queries.txt",
	    "query": None,
	    "repeat_times": 2,
	    "batch_rounds": 4,
	    "output_dir": "out",
	    "deadline": 90.0,
	    "config_file": "eval.json",
	}


def test_cli_entrypoint_strips_run_prefix(monkeypatch):
	"""'run queries.txt' is equivalent to 'queries.txt'."""
	fake_run_impl, seen = _make_fake_run_impl()
	monkeypatch.setattr("search_eval.main.run_impl", fake_run_impl)
	entrypoint(["run", "queries.csv"], standalone_mode=False)
	assert seen["queries_file"] == "queries.csv"
	assert seen["repeat_times"] is None


def test_cli_eval_single_query(monkeypatch):
	fake_run_impl, seen = _make_fake_run_impl()
	monkeypatch.setattr("search_eval.main.run_impl", fake_run_impl)
	entrypoint(["eval", "best pizza in naples", "--repeat-times", "1"],
	           standalone_mode=False)
	assert seen["query"] == "best pizza in naples"
	assert seen["queries_file"] is None
	assert seen["repeat_times"] == 1
	assert seen["batch_rounds"] is None


def test_cli_entrypoint_help_does_not_crash():
	"""--help should exit cleanly (SystemExit with code 0)."""
	with pytest.raises(SystemExit) as exc_info:
		entrypoint(["--help"], standalone_mode=True)
	assert exc_info.value.code == 0


def test_cli_invalid_eval_config_exits_2(monkeypatch, tmp_path):
	bad = tmp_path / "eval.yaml"
	bad.write_text("dimensions:\n  - {name: a, weight: 0.3}\n")
	queries = tmp_path / "q.txt"
	queries.write_text("hello\n")
	monkeypatch.chdir(tmp_path)
	monkeypatch.setenv("JUDGE_URL", "https://judge.test")
	monkeypatch.setenv("JUDGE_MODEL", "m")
	monkeypatch.setenv("JUDGE_API_KEY", "k")
	with pytest.raises(SystemExit) as exc_info:
		entrypoint([str(queries), "--config", str(bad)])
	assert exc_info.value.code == 2


def test_cli_missing_judge_settings_exits_2(monkeypatch, tmp_path):
	cfg = tmp_path / "eval.yaml"
	cfg.write_text("dimensions:\n  - {name: a, weight: 1.0}\n")
	monkeypatch.chdir(tmp_path)
	for name in ("JUDGE_URL", "JUDGE_MODEL", "JUDGE_API_KEY"):
		monkeypatch.delenv(name, raising=False)
	with pytest.raises(SystemExit) as exc_info:
		entrypoint(["eval", "q", "--config", str(cfg)])
	assert exc_info.value.code == 2
