import warnings
from pathlib import Path

from rule_selector.models import RuleDocument
from rule_selector.parser import parse_rule_file
from rule_selector.selector import RuleSelector


class RuleLoaderContext:
    """Context class for loading rule files from a project directory."""

    def __init__(
        self,
        project_dir: str | Path,
        rules_dir: str | Path = ".claude/rules",
        extensions: tuple[str, ...] = (".md", ".mdc"),
        caching: bool = True,
    ) -> None:
        """
        Initialize the context with the project directory.

        Args:
            project_dir: Path to the project directory.
            rules_dir: Directory holding rule files, relative to project_dir
                (default: ".claude/rules").
            extensions: File suffixes treated as rule files (default: .md and .mdc).
            caching: Whether to reuse parsed rules until files change (default: True).

        Raises:
            NotADirectoryError: If project_dir is not a directory.
        """
        self.project_dir = Path(project_dir).resolve()
        if not self.project_dir.is_dir():
            msg = f"project_dir must be a directory, got: {self.project_dir}"
            raise NotADirectoryError(msg)
        self.rules_dir = self.project_dir / rules_dir
        self.extensions = tuple(ext.lower() for ext in extensions)
        self.caching = caching
        # Cache stores: ({file_path: mtime}, selector)
        self._cache: tuple[dict[Path, float], RuleSelector] | None = None

    def _discover(self) -> dict[Path, float]:
        """
        Find rule files recursively, sorted for consistent ordering.

        Returns:
            Dictionary of rule file paths to their modification times
        """
        if not self.rules_dir.is_dir():
            return {}

        found = {}
        for file_path in sorted(self.rules_dir.rglob("*")):
            if not file_path.is_file() or file_path.suffix.lower() not in self.extensions:
                continue
            relative = file_path.relative_to(self.rules_dir)
            if any(part.startswith(".") for part in relative.parts):
                continue
            found[file_path] = file_path.stat().st_mtime
        return found

    def selector(self) -> RuleSelector:
        """
        Return a selector over the current rule files.

        With caching enabled, files are parsed again only when a rule file
        is added, removed or modified.

        Raises:
            InvalidPatternError: If a rule file carries a malformed pattern.
        """
        mtimes = self._discover()
        if self.caching and self._cache is not None:
            cached_mtimes, cached_selector = self._cache
            if cached_mtimes == mtimes:
                return cached_selector

        rules = [parse_rule_file(file_path, self.project_dir) for file_path in mtimes]
        selector = RuleSelector(rules)
        if self.caching:
            self._cache = (mtimes, selector)
        return selector

    def load_rules(self) -> tuple[RuleDocument, ...]:
        """Load every rule document under the rules directory."""
        return self.selector().rules

    def invalidate_cache(self) -> None:
        """
        Clear cached rules.

        Note: With modification time-based caching, manual invalidation is rarely needed
        as the cache automatically invalidates when files change.
        """
        self._cache = None

    def _normalize_context_files(self, context_files: list[str | Path] | None) -> list[str]:
        """
        Normalize context files to Unix-style paths relative to project dir.

        Args:
            context_files: List of file paths or None

        Returns:
            List of normalized file path strings
        """
        if not context_files:
            return []

        normalized_files = []
        for cf in context_files:
            cf_path = Path(cf)
            if cf_path.is_absolute():
                try:
                    rel_path = cf_path.resolve().relative_to(self.project_dir)
                    normalized_files.append(rel_path.as_posix())
                except ValueError:
                    # File is outside project dir, use as-is
                    normalized_files.append(str(cf_path).replace("\\", "/"))
            else:
                normalized_files.append(str(cf).replace("\\", "/"))
        return normalized_files

    def select(self, context_files: list[str | Path] | None = None) -> list[RuleDocument]:
        """
        Select the rules relevant to the files in the conversation.

        Args:
            context_files: Optional list of source files for the conversation.
                If None or empty, all rules are selected.

        Returns:
            Matching rule documents in file order.
        """
        return self.selector().select_for_files(self._normalize_context_files(context_files))

    def load_context(self, context_files: list[str | Path] | None = None) -> str:
        """
        Load relevant rule files and return their combined content as a string.

        Args:
            context_files: Optional list of source files for the conversation.
                These filenames determine which rules are loaded based on their
                frontmatter patterns. If None, all rules are loaded.

        Returns:
            A string containing the combined bodies of the selected rules.
        """
        contents = []
        for rule in self.select(context_files):
            body = rule.body
            # Ensure content ends with newline for proper concatenation
            if body and not body.endswith("\n"):
                body += "\n"
            if body:
                contents.append(body)

        if not contents:
            warnings.warn(
                f"No rule files selected from {self.rules_dir}",
                UserWarning,
                stacklevel=2,
            )

        return "\n".join(contents)
