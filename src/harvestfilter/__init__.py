"""
Gitignore-style path filtering for file harvesting.
"""

from .errors import FilterLoadError, HarvestFilterError, InvalidFragmentError
from .filter import FilterRegistry, PathFilter
from .pattern import compile_pattern, translate_pattern
from .definition import parse_definition, read_definition
from .types import FilterMode, Matcher, ParseResult, Rule, WalkEntry
from .walk import iter_included_files, walk

__all__ = [
    "FilterLoadError",
    "FilterMode",
    "FilterRegistry",
    "HarvestFilterError",
    "InvalidFragmentError",
    "Matcher",
    "ParseResult",
    "PathFilter",
    "Rule",
    "WalkEntry",
    "compile_pattern",
    "iter_included_files",
    "parse_definition",
    "read_definition",
    "translate_pattern",
    "walk",
]
