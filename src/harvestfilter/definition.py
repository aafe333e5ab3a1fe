"""Filter definition file parsing"""

import logging
import re
from pathlib import Path
from typing import Iterable, List, Union
from .errors import FilterLoadError, InvalidFragmentError
from .types import FilterMode, ParseResult

logger = logging.getLogger(__name__)

BLOCK_MARKER = re.compile(r"^###")
EXIT_MARKER = re.compile(r"^<")
COMMENT = re.compile(r"^#")
TAG_LINE = re.compile(r"^[+-]")
KEY_LINE = re.compile(r"^[.\w\\:*!/]")
INLINE_COMMENT = re.compile(r"\s+#.*$")


def _fragment_tags(fragment: str):
    """Compile the include and exclude tag expressions for a fragment id.

    The fragment id is spliced into the expressions as is, so it may itself
    use regular expression syntax (e.g. "(app|tools)").
    """
    try:
        return (
            re.compile(rf"^\+{fragment}"),
            re.compile(rf"^-{fragment}"),
        )
    except re.error as e:
        raise InvalidFragmentError(f"invalid fragment id {fragment!r}: {e}") from e


def parse_definition(text: Union[str, Iterable[str]], fragment: str) -> ParseResult:
    """Collect the patterns of one fragment from a filter definition.

    Line rules, checked in order:
    - "###" toggles a skipped block; everything inside it is ignored
    - "<" stops parsing
    - "#" starts a comment line
    - "+<fragment>" / "-<fragment>" opens the fragment (include / exclude)
    - inside the fragment, other "+" / "-" lines are ignored, key lines are
      collected and any other line closes the fragment

    The mode is taken from the first tag that opens the fragment; later tags
    may reopen it but never change the mode.

    Args:
        text: Definition file contents, or an iterable of its lines
        fragment: Fragment id selecting the section to collect

    Returns:
        ParseResult with the mode and the pattern lines in file order
    """
    lines = text.splitlines() if isinstance(text, str) else text
    include_tag, exclude_tag = _fragment_tags(fragment)

    mode = FilterMode.UNSET
    patterns: List[str] = []
    seen = set()
    skip_block = False
    inside_fragment = False

    for line in lines:
        line = line.rstrip("\r\n")

        if BLOCK_MARKER.match(line):
            skip_block = not skip_block
            continue
        if skip_block:
            continue
        if EXIT_MARKER.match(line):
            break
        if COMMENT.match(line):
            continue

        if not inside_fragment:
            if include_tag.match(line):
                inside_fragment = True
                if mode is FilterMode.UNSET:
                    mode = FilterMode.INCLUDE_LIST
            elif exclude_tag.match(line):
                inside_fragment = True
                if mode is FilterMode.UNSET:
                    mode = FilterMode.EXCLUDE_LIST
            continue

        if TAG_LINE.match(line):
            continue
        if KEY_LINE.match(line):
            pattern = INLINE_COMMENT.sub("", line).strip()
            if pattern not in seen:
                seen.add(pattern)
                patterns.append(pattern)
        else:
            inside_fragment = False

    return ParseResult(mode=mode, patterns=tuple(patterns))


def read_definition(path: Union[str, Path], fragment: str) -> ParseResult:
    """Read and parse a filter definition file.

    A missing file means no filtering is configured and yields an empty
    result. A file that exists but cannot be read raises FilterLoadError.
    """
    path = Path(path)
    if not path.exists():
        logger.info("filter definition %s not found, nothing is filtered", path)
        return ParseResult(mode=FilterMode.UNSET, patterns=())

    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise FilterLoadError(path, e) from e

    return parse_definition(text, fragment)
