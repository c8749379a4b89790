"""File and resource loading utilities.

This subpackage handles loading configuration, rubrics, prompts and
query lists used throughout the application.

Key modules:
    - eval_config: Evaluation config loading and validation
    - rubrics: Custom per-dimension rubric loading
    - prompts: Bundled prompt template loading
    - queries: Query list loading
    - frontmatter: YAML frontmatter parsing
"""

from .frontmatter import split_frontmatter
from .prompts import load_prompt
from .eval_config import load_eval_config
from .rubrics import load_rubrics
from .queries import load_queries

__all__ = [
    "split_frontmatter",
    "load_prompt",
    "load_eval_config",
    "load_rubrics",
    "load_queries",
]
