"""
Example demonstrating rule selection for the files in a conversation.

Rules live in .claude/rules/ and declare the files they cover in frontmatter.
Rules without patterns apply to every file.
"""

import shutil
import tempfile
from pathlib import Path

from rule_selector import RuleDocument, RuleLoaderContext, select_rules


def example_in_memory() -> None:
    """Select from a rule table built in code."""
    print("Example 1: In-memory rule table")
    print("-" * 50)

    rules = [
        RuleDocument("code-style", ["src/**/*.{ts,tsx}"]),
        RuleDocument("testing", ["**/*.test.ts"]),
        RuleDocument("git-workflow", []),
    ]
    for path in ("src/app.test.ts", "src/ui/Button.tsx", "README.md"):
        selected = [rule.path for rule in select_rules(path, rules)]
        print(f"{path:20} -> {selected}")
    print()


def example_project() -> None:
    """Load rule files from a project and render the relevant ones."""
    print("Example 2: Rules loaded from .claude/rules/")
    print("-" * 50)

    project_dir = Path(tempfile.mkdtemp(prefix="rules_example_"))
    try:
        rules_dir = project_dir / ".claude" / "rules"
        (rules_dir / "api").mkdir(parents=True)
        (rules_dir / "api" / "rest.md").write_text("""---
paths:
  - "src/api/**/*.py"
  - "tests/api/**/*.py"
---
# REST API Guidelines

- Use proper HTTP status codes
""")
        (rules_dir / "general.md").write_text("# General\n\n- Keep functions small\n")

        ctx = RuleLoaderContext(project_dir)
        print(ctx.load_context(context_files=["src/api/users.py"]))
        print("For src/utils/helper.py:")
        print(ctx.load_context(context_files=["src/utils/helper.py"]))
    finally:
        shutil.rmtree(project_dir)


if __name__ == "__main__":
    example_in_memory()
    example_project()
