import re
from functools import lru_cache

from rule_selector.errors import InvalidPatternError


def _class_end(pattern: str, start: int) -> int:
    """
    Find the closing bracket of a character class.

    Args:
        pattern: The glob pattern
        start: Index of the opening '['

    Returns:
        Index of the matching ']'

    Raises:
        InvalidPatternError: If the class is never closed.
    """
    i = start + 1
    if i < len(pattern) and pattern[i] in "!^":
        i += 1
    # A ']' right after the opening bracket is a literal member
    if i < len(pattern) and pattern[i] == "]":
        i += 1
    while i < len(pattern) and pattern[i] != "]":
        i += 1
    if i >= len(pattern):
        raise InvalidPatternError(pattern, "unterminated character class")
    return i


def _find_brace_group(pattern: str) -> tuple[int, int, list[int]] | None:
    """
    Locate the first top-level {...} group.

    Args:
        pattern: The glob pattern

    Returns:
        Tuple of (open index, close index, top-level comma indexes),
        or None if the pattern has no brace group.

    Raises:
        InvalidPatternError: If braces are unbalanced.
    """
    depth = 0
    open_at = 0
    commas: list[int] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "\\":
            i += 2
            continue
        if char == "[":
            i = _class_end(pattern, i) + 1
            continue
        if char == "{":
            if depth == 0:
                open_at = i
                commas = []
            depth += 1
        elif char == "}":
            if depth == 0:
                raise InvalidPatternError(pattern, "unmatched '}'")
            depth -= 1
            if depth == 0:
                return open_at, i, commas
        elif char == "," and depth == 1:
            commas.append(i)
        i += 1

    if depth:
        raise InvalidPatternError(pattern, "unmatched '{'")
    return None


def expand_braces(pattern: str) -> list[str]:
    """
    Expand {a,b} alternation into brace-free patterns.

    Nested groups are expanded too. Duplicates are dropped, keeping the
    first occurrence.

    Example:
        >>> expand_braces("src/**/*.{ts,tsx}")
        ['src/**/*.ts', 'src/**/*.tsx']
    """
    group = _find_brace_group(pattern)
    if group is None:
        return [pattern]

    open_at, close_at, commas = group
    prefix = pattern[:open_at]
    suffix = pattern[close_at + 1 :]
    bounds = [open_at, *commas, close_at]

    expanded: list[str] = []
    for left, right in zip(bounds, bounds[1:]):
        option = pattern[left + 1 : right]
        for candidate in expand_braces(prefix + option + suffix):
            if candidate not in expanded:
                expanded.append(candidate)
    return expanded


def _translate_class(pattern: str, body: str) -> str:
    """
    Translate the body of a [...] class into a regex class that never matches '/'.

    Args:
        pattern: The glob pattern, for error reporting
        body: Characters between the brackets

    Returns:
        Regex source for the class

    Raises:
        InvalidPatternError: If the class is empty.
    """
    negate = body[:1] in ("!", "^")
    if negate:
        body = body[1:]
    if not body:
        raise InvalidPatternError(pattern, "empty character class")
    body = body.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
    if negate:
        return f"[^/{body}]"
    return f"(?!/)[{body}]"


def translate(pattern: str) -> str:
    """
    Translate a brace-free glob pattern into regular expression source.

    Args:
        pattern: Glob pattern without {a,b} groups

    Returns:
        Regex source matching the whole path
    """
    parts: list[str] = []
    i = 0
    n = len(pattern)

    while i < n:
        char = pattern[i]
        if char == "*":
            j = i
            while j < n and pattern[j] == "*":
                j += 1
            whole_segment = (i == 0 or pattern[i - 1] == "/") and (j == n or pattern[j] == "/")
            if j - i >= 2 and whole_segment:  # noqa: PLR2004
                if j == n:
                    # Trailing ** matches everything remaining
                    parts.append(".*")
                    i = j
                else:
                    # **/ matches zero or more whole segments
                    parts.append("(?:[^/]*/)*")
                    i = j + 1
                continue
            parts.append("[^/]*")
            i = j
        elif char == "?":
            parts.append("[^/]")
            i += 1
        elif char == "[":
            end = _class_end(pattern, i)
            parts.append(_translate_class(pattern, pattern[i + 1 : end]))
            i = end + 1
        elif char == "\\":
            if i + 1 >= n:
                raise InvalidPatternError(pattern, "trailing escape character")
            parts.append(re.escape(pattern[i + 1]))
            i += 2
        else:
            parts.append(re.escape(char))
            i += 1

    return "".join(parts)


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """
    Compile a glob pattern into a regex matching whole paths.

    Args:
        pattern: The glob pattern (e.g., "src/**/*.{ts,tsx}")

    Returns:
        Compiled regex; use fullmatch() against a normalized path.

    Raises:
        InvalidPatternError: If the pattern is empty, not a string or malformed.
    """
    if not isinstance(pattern, str):
        raise InvalidPatternError(pattern, "pattern must be a string")
    if not pattern:
        raise InvalidPatternError(pattern, "pattern is empty")
    return _compile(pattern)


@lru_cache(maxsize=1024)
def _compile(pattern: str) -> re.Pattern[str]:
    try:
        alternatives = [translate(expanded) for expanded in expand_braces(pattern)]
    except InvalidPatternError as exc:
        # Report the pattern as written, not the expanded alternative
        if exc.pattern == pattern:
            raise
        raise InvalidPatternError(pattern, exc.reason) from exc

    source = "|".join(f"(?:{alternative})" for alternative in alternatives)
    try:
        return re.compile(source, re.DOTALL)
    except re.error as exc:
        raise InvalidPatternError(pattern, str(exc)) from exc


def match_path(path: str, pattern: str) -> bool:
    """Return True if the normalized path matches the glob pattern."""
    return compile_pattern(pattern).fullmatch(path) is not None
