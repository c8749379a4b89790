import pytest

from search_eval.loaders.frontmatter import split_frontmatter
from search_eval.loaders.prompts import (
    RUBRIC_TEMPLATE,
    SCORING_REQUEST_TEMPLATE,
    load_prompt,
)
from search_eval.loaders.rubrics import load_rubrics
from search_eval.models.eval_config import EvalConfig


def test_split_frontmatter():
	meta, body = split_frontmatter("---\ntitle: Relevance\n---\n\nBody text\n")
	assert meta == {"title": "Relevance"}
	assert body == "Body text"


def test_split_frontmatter_without_block():
	meta, body = split_frontmatter("just text")
	assert meta == {}
	assert body == "just text"


def test_split_frontmatter_non_mapping():
	meta, body = split_frontmatter("---\n- a\n- b\n---\nbody")
	assert meta == {}
	assert body == "body"


def test_bundled_prompts_load():
	rubric = load_prompt(RUBRIC_TEMPLATE)
	assert "$dimension" in rubric
	assert "<result>" in rubric
	assert "$results" in load_prompt(SCORING_REQUEST_TEMPLATE)


def test_unknown_prompt_template():
	with pytest.raises(FileNotFoundError):
		load_prompt("missing.md")


def test_load_rubrics_merges_files_and_inline(tmp_path):
	five = tmp_path / "five_point"
	five.mkdir()
	(five / "relevance.md").write_text(
	    "---\nauthor: qa\n---\nFile rubric for $dimension\n")
	(five / "freshness.md").write_text("File freshness rubric")
	(five / "unknown.md").write_text("ignored")
	cfg = EvalConfig(
	    dimensions=[
	        {
	            "name": "relevance",
	            "weight": 0.5
	        },
	        {
	            "name": "freshness",
	            "weight": 0.5
	        },
	    ],
	    prompts={"five_point": {
	        "freshness": "Inline freshness rubric"
	    }},
	    prompts_dir=str(tmp_path),
	)
	rubrics = load_rubrics(cfg)
	assert rubrics["binary"] == {}
	assert rubrics["five_point"] == {
	    "relevance": "File rubric for $dimension",
	    "freshness": "Inline freshness rubric",
	}


def test_load_rubrics_without_dir():
	cfg = EvalConfig(dimensions=[{"name": "a", "weight": 1.0}])
	assert load_rubrics(cfg) == {"binary": {}, "five_point": {}}
