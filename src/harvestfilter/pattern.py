"""Gitignore-style pattern compiler"""

import logging
import re
from typing import Tuple
from .types import Matcher

logger = logging.getLogger(__name__)

# Leading text without an unescaped '[', then one bracketed character range
RANGE_PATTERN = re.compile(r"^((?:[^\[\\]|\\.)*)\[((?:[^\]\\]|\\.)*)\]", re.DOTALL)

# Tokens are tried in this order at every position, first match wins
TOKEN_PATTERN = re.compile(
    r"(?P<escape>\\(?P<escaped>.))"
    r"|(?P<globstar_mid>/\*\*/)"
    r"|(?P<globstar_lead>^\*\*/)"
    r"|(?P<globstar_tail>/\*\*$)"
    r"|(?P<globstar>\*\*)"
    r"|(?P<segment>/\*(?=/|$))"
    r"|(?P<star>\*)"
    r"|(?P<qmark>\?)"
    r"|(?P<literal>.)",
    re.DOTALL,
)

TRANSLATIONS = {
    "globstar_mid": "(?:/|/.+/)",  # one separator, or separated segments
    "globstar_lead": "(?:|.+/)",  # any number of leading segments
    "globstar_tail": "(?:|/.+)",  # any suffix
    "globstar": ".*",
    "segment": "/[^/]+",  # exactly one path segment
    "star": "[^/]*",
    "qmark": "[^/]",
}

ROOTED_PREFIX = "^/"
ANYWHERE_PREFIX = "/"
DIRECTORY_SUFFIX = "/"
BOUNDARY_SUFFIX = "(?:$|/)"


def _split_anchors(pattern: str) -> Tuple[str, bool, bool]:
    """Strip a leading and a trailing '/' and report what they meant."""
    is_rooted = pattern.startswith("/")
    if is_rooted:
        pattern = pattern[1:]

    is_dir_only = pattern.endswith("/")
    if is_dir_only:
        pattern = pattern[:-1]

    return pattern, is_rooted, is_dir_only


def _translate_part(part: str) -> Tuple[str, bool]:
    """Translate range-free pattern text into regex source.

    Returns:
        The regex source and whether a trailing '/**' made the pattern
        directory-only.
    """
    pieces = []
    is_dir_only = False
    for match in TOKEN_PATTERN.finditer(part):
        if match.group("escape") is not None:
            pieces.append(re.escape(match.group("escaped")))
            continue
        kind = match.lastgroup
        if kind == "literal":
            pieces.append(re.escape(match.group(kind)))
            continue
        if kind == "globstar_tail":
            is_dir_only = True
        pieces.append(TRANSLATIONS[kind])
    return "".join(pieces), is_dir_only


def _assemble(body: str, is_rooted: bool, is_dir_only: bool) -> str:
    prefix = ROOTED_PREFIX if is_rooted else ANYWHERE_PREFIX
    suffix = DIRECTORY_SUFFIX if is_dir_only else BOUNDARY_SUFFIX
    return prefix + body + suffix


def translate_pattern(pattern: str) -> Tuple[str, bool, bool]:
    """Translate a gitignore-style pattern into regex source.

    The resulting expression is meant to be searched against a path relative
    to the filter's base path, using '/' separators and a single leading '/'.

    Args:
        pattern: Pattern text, without a leading '!' negation marker

    Returns:
        Tuple of (regex source, is_rooted, is_dir_only)
    """
    rest, is_rooted, is_dir_only = _split_anchors(pattern)
    pieces = []

    # 1. Character ranges are copied through, the text before them translated
    while True:
        match = RANGE_PATTERN.match(rest)
        if match is None:
            break
        prefix, chars = match.groups()
        if "/" in prefix:
            is_rooted = True
        translated, tail = _translate_part(prefix)
        is_dir_only = is_dir_only or tail
        pieces.append(translated)
        pieces.append(f"[{chars}]")
        rest = rest[match.end() :]

    # 2. A slash anywhere in what remains anchors the pattern at the root
    if rest.strip():
        if "/" in rest:
            is_rooted = True
        translated, tail = _translate_part(rest)
        is_dir_only = is_dir_only or tail
        pieces.append(translated)

    return _assemble("".join(pieces), is_rooted, is_dir_only), is_rooted, is_dir_only


def compile_pattern(pattern: str, ignore_case: bool = True) -> Matcher:
    """Compile a gitignore-style pattern into a Matcher.

    Never raises: text that does not translate into a valid expression is
    matched literally instead.
    """
    flags = re.IGNORECASE if ignore_case else 0
    source, is_rooted, is_dir_only = translate_pattern(pattern)
    try:
        regex = re.compile(source, flags)
    except re.error as e:
        logger.warning("pattern %r matched literally: %s", pattern, e)
        body, is_rooted, is_dir_only = _split_anchors(pattern)
        regex = re.compile(_assemble(re.escape(body), is_rooted, is_dir_only), flags)

    return Matcher(
        pattern=pattern,
        regex=regex,
        is_rooted=is_rooted,
        is_dir_only=is_dir_only,
    )
