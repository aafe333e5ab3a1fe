"""PathFilter class"""

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Dict, Hashable, Optional, Tuple, Union
from .definition import read_definition
from .pattern import compile_pattern
from .types import FilterMode, Rule

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

# Verdict of the highest priority matching rule, by (mode, is_negation)
VERDICTS = {
    (FilterMode.INCLUDE_LIST, False): True,
    (FilterMode.INCLUDE_LIST, True): False,
    (FilterMode.EXCLUDE_LIST, False): False,
    (FilterMode.EXCLUDE_LIST, True): True,
    (FilterMode.UNSET, False): False,
    (FilterMode.UNSET, True): True,
}


class PathFilter:
    """Decides which paths a harvesting pass should include.

    A filter is loaded from one fragment of a definition file and then
    answers is_included() for absolute paths below its base path:

    1. Without rules (never loaded, no definition file, fragment not found)
       every path is included
    2. The path is made relative to the base path, e.g. "/sub/file.dll"
    3. An include list rejects unmatched paths, an exclude list accepts them
    4. Among the matching rules the one with the longest pattern text decides;
       of equally long patterns the first declared one wins

    Loading replaces the whole rule snapshot at once, so concurrent queries
    see either the previous or the new rules.
    """

    def __init__(self, ignore_case: bool = True):
        self.ignore_case = ignore_case
        self._lock = threading.Lock()
        self._definition_path: Optional[Path] = None
        self._base_path: Optional[str] = None
        self._fragment: Optional[str] = None
        self._mode = FilterMode.UNSET
        self._rules: Optional[Tuple[Rule, ...]] = None
        self._loaded = False

    @property
    def definition_path(self) -> Optional[Path]:
        return self._definition_path

    @property
    def base_path(self) -> Optional[str]:
        return self._base_path

    @property
    def fragment(self) -> Optional[str]:
        return self._fragment

    @property
    def mode(self) -> FilterMode:
        return self._mode

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return self._rules or ()

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(
        self,
        definition_path: PathLike,
        base_path: PathLike,
        fragment: Optional[str] = None,
    ) -> None:
        """Load the rules of one fragment from a definition file.

        Args:
            definition_path: Filter definition file; a missing file filters nothing
            base_path: Directory that rooted patterns are anchored at
            fragment: Fragment id; None or blank loads no rules

        Raises:
            ValueError: definition_path or base_path is empty
            FilterLoadError: the definition file exists but cannot be read
            InvalidFragmentError: fragment is not a valid expression fragment
        """
        if not definition_path:
            raise ValueError("definition_path is required")
        if not base_path:
            raise ValueError("base_path is required")

        definition_path = Path(definition_path)
        base_path = os.path.abspath(os.fspath(base_path))
        logger.debug(
            "loading filter %s:%s (base %s)", definition_path, fragment, base_path
        )

        mode = FilterMode.UNSET
        rules = None
        if fragment and fragment.strip():
            result = read_definition(definition_path, fragment)
            mode = result.mode
            rules = tuple(self._compile_rule(line) for line in result.patterns)
            self._log_rules(fragment, mode, rules)
        else:
            logger.info("no fragment given for %s, nothing is filtered", definition_path)

        with self._lock:
            self._definition_path = definition_path
            self._base_path = base_path
            self._fragment = fragment
            self._mode, self._rules = mode, rules
            self._loaded = True

    def load_spec(self, spec: str, base_path: PathLike) -> None:
        """Load from a "path;fragment" string, as given on a command line."""
        if not spec:
            raise ValueError("filter spec is required")
        path, _, fragment = spec.partition(";")
        if not path:
            raise ValueError(f"filter spec {spec!r} names no definition file")
        self.load(os.path.abspath(path), base_path, fragment or None)

    def is_included(self, path: PathLike, is_dir: bool = False) -> bool:
        """Return True if the harvester should keep this path.

        Args:
            path: Absolute path of the file or directory
            is_dir: True if the path is a directory, so that directory-only
                patterns ("build/") match the directory itself
        """
        if not path:
            raise ValueError("path is required")

        with self._lock:
            if not self._loaded:
                logger.warning("filter queried before it was loaded: %s is included", path)
                return True
            if not self._rules:
                return True

            candidate = self._relative_path(path, is_dir)
            accept = self._mode is not FilterMode.INCLUDE_LIST
            priority = 0
            for rule in self._rules:
                if rule.priority > priority and rule.matcher.matches(candidate):
                    priority = rule.priority
                    accept = VERDICTS[(self._mode, rule.is_negation)]
            return accept

    def is_filtered(self, path: PathLike, is_dir: bool = False) -> bool:
        return not self.is_included(path, is_dir)

    def _compile_rule(self, line: str) -> Rule:
        is_negation = line.startswith("!")
        pattern = line[1:] if is_negation else line
        return Rule(
            pattern=pattern,
            matcher=compile_pattern(pattern, ignore_case=self.ignore_case),
            is_negation=is_negation,
        )

    def _relative_path(self, path: PathLike, is_dir: bool) -> str:
        """Express a path relative to the base path as "/a/b"."""
        path = os.path.abspath(os.fspath(path))
        try:
            rel = os.path.relpath(path, self._base_path)
        except ValueError:
            # On another drive than the base path
            rel = path
        if rel == os.curdir:
            rel = ""

        rel = rel.replace(os.sep, "/")
        if os.altsep:
            rel = rel.replace(os.altsep, "/")
        rel = "/" + rel.lstrip("/")
        if is_dir and not rel.endswith("/"):
            rel += "/"
        return rel

    @staticmethod
    def _log_rules(fragment: str, mode: FilterMode, rules: Tuple[Rule, ...]) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        logger.debug("filter %s (%s): %d rules", fragment, mode.name, len(rules))
        for negated in (False, True):
            group = [rule for rule in rules if rule.is_negation == negated]
            if not group:
                continue
            logger.debug("  %s", "negative" if negated else "positive")
            for rule in sorted(group, key=lambda r: r.priority):
                logger.debug("    %s : %d", rule.matcher.regex.pattern, rule.priority)


class FilterRegistry:
    """Hands out one PathFilter per consumer.

    Consumers are any hashable key, typically the class of the harvester
    that owns the filter. Filters are created on first request.
    """

    def __init__(self, factory: Callable[[], PathFilter] = PathFilter):
        self._factory = factory
        self._filters: Dict[Hashable, PathFilter] = {}
        self._lock = threading.Lock()

    def get(self, consumer: Hashable) -> PathFilter:
        with self._lock:
            path_filter = self._filters.get(consumer)
            if path_filter is None:
                path_filter = self._factory()
                self._filters[consumer] = path_filter
                logger.debug("created filter for %r", consumer)
            return path_filter

    def __contains__(self, consumer: Hashable) -> bool:
        with self._lock:
            return consumer in self._filters

    def __len__(self) -> int:
        with self._lock:
            return len(self._filters)
