class RuleSelectorError(Exception):
    """Base error for rule selection."""


class InvalidPatternError(RuleSelectorError, ValueError):
    """A glob pattern could not be compiled."""

    def __init__(self, pattern: object, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid glob pattern {pattern!r}: {reason}")


class InvalidPathError(RuleSelectorError, ValueError):
    """A candidate path was empty or missing."""

    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(f"Candidate path must be a non-empty string, got: {path!r}")
