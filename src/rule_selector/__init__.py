from rule_selector.errors import InvalidPathError, InvalidPatternError, RuleSelectorError
from rule_selector.globbing import compile_pattern, expand_braces, match_path
from rule_selector.loader import RuleLoaderContext
from rule_selector.models import RuleDocument
from rule_selector.parser import parse_frontmatter, parse_rule, parse_rule_file
from rule_selector.selector import RuleSelector, normalize_path, select_rules

__all__ = [
    "InvalidPathError",
    "InvalidPatternError",
    "RuleDocument",
    "RuleLoaderContext",
    "RuleSelector",
    "RuleSelectorError",
    "compile_pattern",
    "expand_braces",
    "match_path",
    "normalize_path",
    "parse_frontmatter",
    "parse_rule",
    "parse_rule_file",
    "select_rules",
]
