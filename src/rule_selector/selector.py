import os
import re
from collections.abc import Iterable, Iterator
from pathlib import Path

from rule_selector.errors import InvalidPathError
from rule_selector.globbing import compile_pattern
from rule_selector.models import RuleDocument


def normalize_path(path: str | Path | None) -> str:
    """
    Normalize a candidate path to the Unix-style form patterns are matched against.

    Args:
        path: File path being evaluated

    Returns:
        Path with '/' separators and without leading './' segments

    Raises:
        InvalidPathError: If the path is None or empty.
    """
    if path is None:
        raise InvalidPathError(path)
    normalized = os.fspath(path)
    if not normalized:
        raise InvalidPathError(path)

    normalized = normalized.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:].lstrip("/")
    return normalized or "."


def _unique(rules: Iterable[RuleDocument]) -> list[RuleDocument]:
    """Drop rules whose identity was already registered, keeping the first."""
    seen: set[str] = set()
    unique = []
    for rule in rules:
        if rule.path in seen:
            continue
        seen.add(rule.path)
        unique.append(rule)
    return unique


class RuleSelector:
    """Selects the rule documents relevant to a file path."""

    def __init__(self, rules: Iterable[RuleDocument]) -> None:
        """
        Freeze a rule table and compile its patterns.

        Args:
            rules: Rule documents in registration order. Documents sharing
                a path are registered once.

        Raises:
            InvalidPatternError: If any pattern cannot be compiled.
        """
        self._rules = tuple(_unique(rules))
        self._compiled: dict[str, tuple[re.Pattern[str], ...]] = {
            rule.path: tuple(compile_pattern(pattern) for pattern in rule.patterns)
            for rule in self._rules
        }

    @property
    def rules(self) -> tuple[RuleDocument, ...]:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[RuleDocument]:
        return iter(self._rules)

    def _matches(self, rule: RuleDocument, path: str) -> bool:
        if rule.unconditional:
            return True
        return any(regex.fullmatch(path) for regex in self._compiled[rule.path])

    def matches(self, rule: RuleDocument, path: str | Path) -> bool:
        """
        Check whether a registered rule applies to a path.

        Raises:
            KeyError: If the rule is not part of this table.
            InvalidPathError: If the path is empty.
        """
        if rule.path not in self._compiled:
            msg = f"Rule is not registered: {rule.path}"
            raise KeyError(msg)
        return self._matches(rule, normalize_path(path))

    def select(self, path: str | Path) -> list[RuleDocument]:
        """
        Return the rules whose patterns match the path, in table order.

        Rules without patterns, or flagged always_apply, match every path.
        An empty result is not an error.

        Raises:
            InvalidPathError: If the path is empty.
        """
        candidate = normalize_path(path)
        return [rule for rule in self._rules if self._matches(rule, candidate)]

    def select_for_files(self, paths: Iterable[str | Path] | None) -> list[RuleDocument]:
        """
        Return the rules relevant to any of several context files.

        Args:
            paths: Files in the conversation. If None or empty, every rule
                is selected.

        Returns:
            Matching rules in table order, each at most once.
        """
        candidates = [normalize_path(path) for path in paths or ()]
        if not candidates:
            return list(self._rules)
        return [
            rule
            for rule in self._rules
            if any(self._matches(rule, candidate) for candidate in candidates)
        ]


def select_rules(path: str | Path, rules: Iterable[RuleDocument]) -> list[RuleDocument]:
    """
    Select the rule documents whose glob patterns match a file path.

    Args:
        path: Non-empty file path (relative or absolute)
        rules: Rule table; output follows its order

    Returns:
        Matching rule documents in table order, without duplicates.

    Raises:
        InvalidPathError: If the path is empty or None.
        InvalidPatternError: If any pattern in the table is malformed.

    Example:
        >>> rules = [RuleDocument("code-style", ["src/**/*.{ts,tsx}"]),
        ...          RuleDocument("testing", ["**/*.test.ts"])]
        >>> [rule.path for rule in select_rules("src/app.test.ts", rules)]
        ['code-style', 'testing']
    """
    normalize_path(path)
    return RuleSelector(rules).select(path)
