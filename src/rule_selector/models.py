from dataclasses import dataclass


@dataclass(frozen=True)
class RuleDocument:
    """A rule file: its identity, the paths it applies to and its text."""

    path: str
    patterns: tuple[str, ...] = ()
    body: str = ""
    description: str = ""
    always_apply: bool = False

    def __post_init__(self) -> None:
        # Lists from frontmatter or callers are frozen so the document stays hashable
        if isinstance(self.patterns, str):
            object.__setattr__(self, "patterns", (self.patterns,))
        elif not isinstance(self.patterns, tuple):
            object.__setattr__(self, "patterns", tuple(self.patterns or ()))

    @property
    def unconditional(self) -> bool:
        """True when the rule applies to every file."""
        return self.always_apply or not self.patterns
