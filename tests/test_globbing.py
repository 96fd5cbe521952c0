import pytest

from rule_selector import InvalidPatternError, compile_pattern, expand_braces, match_path


def test_star_stays_within_segment() -> None:
    """Test that * does not cross directory separators."""
    assert match_path("app.ts", "*.ts")
    assert not match_path("src/app.ts", "*.ts")


def test_double_star_spans_segments() -> None:
    """Test that ** matches any number of directories."""
    assert match_path("src/a/b/c.ts", "src/**/*.ts")
    assert match_path("src/c.ts", "src/**/*.ts")
    assert not match_path("test/a.ts", "src/**/*.ts")


def test_leading_double_star() -> None:
    """Test that a leading **/ also matches top-level files."""
    assert match_path("app.test.ts", "**/*.test.ts")
    assert match_path("src/deep/app.test.ts", "**/*.test.ts")
    assert not match_path("src/app.ts", "**/*.test.ts")


def test_trailing_double_star() -> None:
    """Test that a trailing /** matches everything below a directory."""
    assert match_path("docs/guide.md", "docs/**")
    assert match_path("docs/api/v1/index.md", "docs/**")
    assert not match_path("docs", "docs/**")
    assert not match_path("src/docs/guide.md", "docs/**")


def test_bare_double_star_matches_everything() -> None:
    """Test that ** alone matches any path."""
    assert match_path("README.md", "**")
    assert match_path("a/b/c", "**")


def test_double_star_inside_segment_acts_like_star() -> None:
    """Test that ** embedded in a segment does not cross separators."""
    assert match_path("abc.py", "a**.py")
    assert not match_path("a/b.py", "a**.py")


def test_question_mark() -> None:
    """Test that ? matches exactly one character."""
    assert match_path("v1.txt", "v?.txt")
    assert not match_path("v10.txt", "v?.txt")
    assert not match_path("v/.txt", "v?.txt")


def test_character_classes() -> None:
    """Test positive and negated character classes."""
    assert match_path("file1.txt", "file[0-9].txt")
    assert not match_path("filea.txt", "file[0-9].txt")
    assert match_path("filea.txt", "file[!0-9].txt")
    assert match_path("filea.txt", "file[^0-9].txt")
    assert not match_path("file/.txt", "file[!0-9].txt")


def test_brace_alternation() -> None:
    """Test {a,b} alternation including extension lists."""
    assert match_path("src/app.ts", "src/**/*.{ts,tsx}")
    assert match_path("src/ui/button.tsx", "src/**/*.{ts,tsx}")
    assert not match_path("src/app.js", "src/**/*.{ts,tsx}")
    assert match_path("lib/index.js", "{src,lib}/*.js")


def test_expand_braces_nested() -> None:
    """Test that nested brace groups are expanded in order."""
    assert expand_braces("a.{js,{ts,tsx}}") == ["a.js", "a.ts", "a.tsx"]
    assert expand_braces("{a,b}/{c,d}") == ["a/c", "a/d", "b/c", "b/d"]


def test_expand_braces_deduplicates() -> None:
    """Test that repeated alternatives are only kept once."""
    assert expand_braces("{a,a,b}") == ["a", "b"]


def test_expand_braces_without_group() -> None:
    """Test that a pattern without braces is returned unchanged."""
    assert expand_braces("src/*.py") == ["src/*.py"]


def test_escaped_characters_are_literal() -> None:
    """Test that backslash escapes wildcard and brace characters."""
    assert match_path("what*.md", "what\\*.md")
    assert not match_path("whatever.md", "what\\*.md")
    assert match_path("{a}.md", "\\{a\\}.md")


def test_dots_are_literal() -> None:
    """Test that regex metacharacters in patterns match literally."""
    assert match_path("setup.cfg", "setup.cfg")
    assert not match_path("setupXcfg", "setup.cfg")


def test_matching_is_case_sensitive() -> None:
    """Test that pattern matching respects case."""
    assert not match_path("README.MD", "*.md")


@pytest.mark.parametrize(
    ("pattern", "reason"),
    [
        ("src/{a,b", "unmatched '{'"),
        ("src/a,b}", "unmatched '}'"),
        ("file[0-9.txt", "unterminated character class"),
        ("trailing\\", "trailing escape character"),
        ("", "pattern is empty"),
    ],
)
def test_malformed_patterns(pattern: str, reason: str) -> None:
    """Test that malformed patterns raise InvalidPatternError."""
    with pytest.raises(InvalidPatternError) as exc_info:
        compile_pattern(pattern)
    assert exc_info.value.pattern == pattern
    assert exc_info.value.reason == reason


def test_reversed_range_is_invalid() -> None:
    """Test that a class rejected by the regex engine is reported."""
    with pytest.raises(InvalidPatternError):
        compile_pattern("[z-a].txt")


def test_non_string_pattern_is_invalid() -> None:
    """Test that non-string patterns are rejected."""
    with pytest.raises(InvalidPatternError, match="must be a string"):
        compile_pattern(["*.py"])  # type: ignore[arg-type]


def test_invalid_pattern_error_is_value_error() -> None:
    """Test that InvalidPatternError can be caught as ValueError."""
    with pytest.raises(ValueError, match="Invalid glob pattern"):
        compile_pattern("{")


def test_compile_pattern_is_memoized() -> None:
    """Test that compiling the same pattern twice returns the same regex."""
    assert compile_pattern("src/**/*.py") is compile_pattern("src/**/*.py")


def test_error_reports_pattern_as_written() -> None:
    """Test that errors inside a brace alternative name the original pattern."""
    with pytest.raises(InvalidPatternError) as exc_info:
        compile_pattern("src/{a,b}\\")

    assert exc_info.value.pattern == "src/{a,b}\\"
    assert exc_info.value.reason == "trailing escape character"
