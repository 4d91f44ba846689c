"""Segment-aware, dotfile-aware glob matching for repository paths."""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Iterable, List, Sequence


GLOBSTAR = "**"


def _normalize(pattern: str) -> str:
    while pattern.startswith("./"):
        pattern = pattern[2:]
    return pattern


def _segment_match(pattern: str, name: str) -> bool:
    """Match *name* against a single glob *pattern* segment.

    ``*`` and ``?`` do not match a leading ``.`` unless the pattern itself
    starts with ``.``.
    """
    if not pattern.startswith(".") and name.startswith("."):
        return False
    return fnmatchcase(name, pattern)


def _match_parts(pattern: Sequence[str], parts: Sequence[str]) -> bool:
    if not pattern:
        return not parts

    head, rest = pattern[0], pattern[1:]
    if head == GLOBSTAR:
        if _match_parts(rest, parts):
            return True
        for i, part in enumerate(parts):
            # ** never descends into dot directories
            if part.startswith("."):
                return False
            if _match_parts(rest, parts[i + 1:]):
                return True
        return False

    if not parts:
        return False
    return _segment_match(head, parts[0]) and _match_parts(rest, parts[1:])


def _split_alternatives(body: str) -> List[str]:
    """Split a brace body on top-level commas."""
    parts, depth, start = [], 0, 0
    for i, char in enumerate(body):
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append(body[start:i])
            start = i + 1
    parts.append(body[start:])
    return parts


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternatives, nested groups included.

    Braces without a comma, or without a closing ``}``, stay literal.
    """
    depth = 0
    open_at = None
    for i, char in enumerate(pattern):
        if char == "{":
            if depth == 0:
                open_at = i
            depth += 1
        elif char == "}" and depth:
            depth -= 1
            if depth == 0:
                alternatives = _split_alternatives(pattern[open_at + 1:i])
                if len(alternatives) < 2:
                    continue
                head, tail = pattern[:open_at], pattern[i + 1:]
                expanded = []
                for alternative in alternatives:
                    expanded.extend(expand_braces(head + alternative + tail))
                return expanded
    return [pattern]


def match(path: str, pattern: str) -> bool:
    """Return True if *path* matches a single glob *pattern*.

    A leading ``!`` negates the pattern; ``{a,b}`` matches either alternative.
    """
    negated = pattern.startswith("!")
    if negated:
        pattern = pattern[1:]
    parts = _normalize(path).split("/")
    matched = any(
        _match_parts(_normalize(alternative).split("/"), parts)
        for alternative in expand_braces(pattern)
    )
    return not matched if negated else matched


def is_match(path: str, patterns: Iterable[str]) -> bool:
    """Return True if *path* matches at least one of *patterns*."""
    return any(match(path, p) for p in patterns)
