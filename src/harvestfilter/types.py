"""Type definitions used across the codebase."""

from enum import Enum
from typing import NamedTuple, Tuple
import re


class FilterMode(Enum):
    """How a loaded fragment treats paths that no rule matches."""

    UNSET = 0  # No tag line seen, nothing is filtered
    INCLUDE_LIST = 1  # Tagged with '+', unmatched paths are rejected
    EXCLUDE_LIST = 2  # Tagged with '-', unmatched paths are accepted


class Matcher(NamedTuple):
    """A compiled gitignore-style pattern."""

    pattern: str  # Pattern text the matcher was compiled from
    regex: re.Pattern  # Compiled regex, searched against "/rel/path"
    is_rooted: bool  # True if anchored at the base path
    is_dir_only: bool  # True if it only matches at a directory boundary

    def matches(self, path: str) -> bool:
        return self.regex.search(path) is not None


class Rule(NamedTuple):
    """One filter rule of a loaded fragment."""

    pattern: str  # Pattern text without the leading !
    matcher: Matcher
    is_negation: bool  # True if the line started with !

    @property
    def priority(self) -> int:
        """Longer pattern text wins over shorter pattern text."""
        return len(self.pattern)


class ParseResult(NamedTuple):
    """Mode and raw pattern lines read for one fragment."""

    mode: FilterMode
    patterns: Tuple[str, ...]


class WalkEntry(NamedTuple):
    """A path visited while walking a directory tree."""

    path: str
    is_dir: bool
    included: bool
