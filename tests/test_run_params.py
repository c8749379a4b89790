import pytest

from search_eval.models.run_params import RunParams


def test_query_is_stripped():
	assert RunParams(query="  hello ").query == "hello"


def test_blank_query_rejected():
	with pytest.raises(ValueError):
		RunParams(query="   ")


@pytest.mark.parametrize("field", ["repeat_times", "batch_rounds", "deadline"])
def test_positive_overrides(field):
	with pytest.raises(ValueError):
		RunParams(queries_file="q.txt", **{field: 0})


def test_overrides_default_to_none():
	params = RunParams(queries_file="q.txt")
	assert params.repeat_times is None
	assert params.batch_rounds is None
	assert params.deadline is None
