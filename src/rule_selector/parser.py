import re
import warnings
from pathlib import Path

import yaml

from rule_selector.models import RuleDocument

_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)
# Cursor writes globs unquoted, so a leading "*" reads as a YAML alias
_BARE_GLOB_RE = re.compile(
    r"^([ \t]*(?:(?:globs|paths)[ \t]*:|-)[ \t]+)(\*[^\r\n]*?)[ \t]*$", re.MULTILINE
)


def _quote_bare_globs(text: str) -> str:
    """Single-quote glob values that start with '*' on paths, globs and list item lines."""

    def quote(match: re.Match[str]) -> str:
        value = match.group(2).replace("'", "''")
        return f"{match.group(1)}'{value}'"

    return _BARE_GLOB_RE.sub(quote, text)


def _load_yaml(text: str) -> object:
    """
    Load frontmatter YAML, retrying once with bare globs quoted.

    Raises:
        yaml.YAMLError: If the text is invalid even after quoting.
    """
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        quoted = _quote_bare_globs(text)
        if quoted == text:
            raise
    return yaml.safe_load(quoted)


def parse_frontmatter(content: str) -> tuple[str, dict | None]:
    """
    Parse YAML frontmatter from markdown content.

    Args:
        content: Raw markdown content

    Returns:
        Tuple of (content without frontmatter, frontmatter dict or None)
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return content, None

    try:
        frontmatter = _load_yaml(match.group(1))
    except yaml.YAMLError as exc:
        # Treat the whole file as regular content
        warnings.warn(f"Invalid YAML frontmatter ignored: {exc}", UserWarning, stacklevel=2)
        return content, None

    remaining = content[match.end() :]
    if frontmatter is None:
        return remaining, {}
    if not isinstance(frontmatter, dict):
        return remaining, None
    return remaining, frontmatter


def _split_globs(value: str) -> list[str]:
    """Split a comma separated globs string, leaving commas inside braces alone."""
    parts = []
    depth = 0
    current = []
    for char in value:
        if char == "{":
            depth += 1
        elif char == "}":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def _patterns_from(value: object, *, comma_separated: bool) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        items = _split_globs(value) if comma_separated else [value]
    elif isinstance(value, list | tuple):
        items = value
    else:
        items = [value]

    patterns = []
    for item in items:
        if item is None:
            continue
        pattern = str(item).strip()
        if pattern:
            patterns.append(pattern)
    return patterns


def _as_bool(value: object) -> bool:
    """Read a frontmatter flag; only true or the string "true" count as set."""
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def parse_rule(content: str, path: str) -> RuleDocument:
    """
    Build a rule document from markdown text.

    Claude-style ``paths`` and Cursor-style ``globs`` frontmatter keys are both
    read; ``paths`` patterns come first. ``alwaysApply`` (or ``always_apply``)
    makes the rule apply to every file.

    Args:
        content: Raw markdown content, with or without frontmatter
        path: Identity of the rule document

    Returns:
        The parsed RuleDocument
    """
    body, frontmatter = parse_frontmatter(content)
    frontmatter = frontmatter or {}

    patterns = _patterns_from(frontmatter.get("paths"), comma_separated=False)
    patterns += _patterns_from(frontmatter.get("globs"), comma_separated=True)

    always_apply = _as_bool(frontmatter.get("alwaysApply", frontmatter.get("always_apply")))
    description = frontmatter.get("description") or ""

    return RuleDocument(
        path=path,
        patterns=tuple(patterns),
        body=body,
        description=str(description),
        always_apply=always_apply,
    )


def parse_rule_file(file_path: Path, root: Path) -> RuleDocument:
    """
    Read and parse a rule file.

    The document identity is the file path relative to root, with '/'
    separators, or the absolute path when the file is outside root.
    """
    file_path = Path(file_path)
    try:
        identity = file_path.resolve().relative_to(Path(root).resolve()).as_posix()
    except ValueError:
        identity = file_path.resolve().as_posix()
    return parse_rule(file_path.read_text(encoding="utf-8"), identity)
