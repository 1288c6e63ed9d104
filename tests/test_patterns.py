"""Tests for glob pattern matching."""

from __future__ import annotations

import time

import pytest

from applyto.errors import PatternError
from applyto.patterns import (
    compile_apply_to,
    compile_pattern,
    matches,
    normalize_path,
    split_patterns,
)


class TestMatches:
    def test_double_star_matches_nested_path(self) -> None:
        assert matches("**/*.tsx", "src/components/Button.tsx")

    def test_double_star_matches_top_level_file(self) -> None:
        assert matches("**/*.tsx", "Button.tsx")

    def test_double_star_rejects_other_extension(self) -> None:
        assert not matches("**/*.tsx", "Button.ts")

    def test_single_star_stays_within_segment(self) -> None:
        assert matches("src/*.py", "src/app.py")
        assert not matches("src/*.py", "src/pkg/app.py")

    def test_double_star_in_middle(self) -> None:
        assert matches("src/**/test_*.py", "src/test_a.py")
        assert matches("src/**/test_*.py", "src/a/b/test_a.py")
        assert not matches("src/**/test_*.py", "lib/test_a.py")

    def test_trailing_double_star(self) -> None:
        assert matches("docs/**", "docs/guide/intro.md")
        assert not matches("docs/**", "src/docs.md")

    def test_lone_double_star_matches_everything(self) -> None:
        assert matches("**", "a/b/c.txt")
        assert matches("**", "README.md")

    def test_literal_pattern_matches_only_exact_path(self) -> None:
        assert matches("src/main.py", "src/main.py")
        assert not matches("src/main.py", "src/main.pyc")
        assert not matches("src/main.py", "other/src/main.py")

    def test_empty_pattern_never_matches(self) -> None:
        assert not matches("", "anything.txt")
        assert not matches("   ", "")

    def test_question_mark(self) -> None:
        assert matches("file?.md", "file1.md")
        assert not matches("file?.md", "file12.md")
        assert not matches("a?b", "a/b")

    def test_character_class(self) -> None:
        assert matches("v[0-9].txt", "v3.txt")
        assert not matches("v[0-9].txt", "vx.txt")

    def test_negated_character_class(self) -> None:
        assert matches("[!._]*.md", "guide.md")
        assert not matches("[!._]*.md", "_draft.md")

    def test_character_class_never_matches_slash(self) -> None:
        assert not matches("src[/]x.ts", "src/x.ts")
        assert not matches("a[+-0]b", "a/b")
        assert matches("a[+-0]b", "a-b")
        assert not matches("a[!x]b", "a/b")

    def test_brace_alternation(self) -> None:
        assert matches("**/*.{ts,tsx}", "src/a.ts")
        assert matches("**/*.{ts,tsx}", "src/a.tsx")
        assert not matches("**/*.{ts,tsx}", "src/a.js")

    def test_nested_braces(self) -> None:
        assert matches("src/{api,web/{pages,components}}/**", "src/web/pages/index.tsx")
        assert matches("src/{api,web/{pages,components}}/**", "src/api/routes.ts")
        assert not matches("src/{api,web/{pages,components}}/**", "src/web/lib/x.ts")

    def test_many_brace_groups_compile_quickly(self) -> None:
        pattern = "{a,b}" * 20
        start = time.perf_counter()
        compiled = compile_pattern(pattern)
        assert time.perf_counter() - start < 1.0
        assert compiled.matches("a" * 20)
        assert compiled.matches("ab" * 10)
        assert not compiled.matches("a" * 19)
        assert not compiled.matches("a" * 19 + "c")

    def test_double_star_slash_after_brace_in_segment(self) -> None:
        assert matches("{src,lib}/**/*.py", "lib/a/b.py")
        assert matches("{**/,}*.md", "docs/guide.md")

    def test_escaped_wildcard_is_literal(self) -> None:
        assert matches(r"notes/\*.md", "notes/*.md")
        assert not matches(r"notes/\*.md", "notes/todo.md")

    def test_dot_slash_prefixes_are_ignored(self) -> None:
        assert matches("./src/*.py", "./src/app.py")
        assert matches("/src/*.py", "src/app.py")

    def test_trailing_slash_scopes_directory(self) -> None:
        assert matches("scripts/", "scripts/build/run.sh")
        assert not matches("scripts/", "scripts")

    def test_windows_separators_in_path(self) -> None:
        assert matches("src/**/*.py", "src\\pkg\\mod.py")

    def test_case_sensitive_by_default(self) -> None:
        assert not matches("**/*.TSX", "src/Button.tsx")
        assert not matches("readme.md", "README.md")

    def test_case_insensitive_opt_in(self) -> None:
        assert matches("**/*.TSX", "src/Button.tsx", case_sensitive=False)
        assert matches("readme.md", "README.md", case_sensitive=False)

    def test_star_matches_dotfiles(self) -> None:
        assert matches("**/*.yml", ".github/workflows/ci.yml")


class TestMalformedPatterns:
    @pytest.mark.parametrize(
        "pattern",
        ["src/{a,b", "src/a,b}", "src/{a,{b,c}", "x/}{", "docs/[abc", "trailing\\", "{}"],
    )
    def test_malformed_pattern_raises(self, pattern: str) -> None:
        with pytest.raises(PatternError):
            compile_pattern(pattern)

    def test_pattern_error_names_pattern(self) -> None:
        with pytest.raises(PatternError) as excinfo:
            compile_pattern("src/{a,b")
        assert excinfo.value.pattern == "src/{a,b"
        assert "unbalanced" in str(excinfo.value)

    def test_matches_raises_for_malformed_pattern(self) -> None:
        with pytest.raises(PatternError):
            matches("src/[abc", "src/a")

    def test_compile_empty_pattern_raises(self) -> None:
        with pytest.raises(PatternError):
            compile_pattern("")


class TestSplitPatterns:
    def test_comma_separated(self) -> None:
        assert split_patterns("**/*.ts,**/*.tsx") == ["**/*.ts", "**/*.tsx"]

    def test_whitespace_and_empty_entries(self) -> None:
        assert split_patterns(" a/* , ,b/** ,") == ["a/*", "b/**"]

    def test_commas_inside_braces_do_not_split(self) -> None:
        assert split_patterns("**/*.{ts,tsx},docs/**") == ["**/*.{ts,tsx}", "docs/**"]

    def test_commas_inside_class_do_not_split(self) -> None:
        assert split_patterns("a[,;]b,c") == ["a[,;]b", "c"]

    def test_empty_value(self) -> None:
        assert split_patterns("") == []


class TestCompileApplyTo:
    def test_any_pattern_matches(self) -> None:
        patterns = compile_apply_to("**/*.ts,**/*.tsx")
        assert [p.source for p in patterns] == ["**/*.ts", "**/*.tsx"]
        assert any(p.matches("src/a.ts") for p in patterns)
        assert any(p.matches("src/a.tsx") for p in patterns)
        assert not any(p.matches("src/a.js") for p in patterns)

    def test_compiled_patterns_compare_by_source(self) -> None:
        assert compile_apply_to("**/*.py") == compile_apply_to("**/*.py")

    def test_empty_value_has_no_patterns(self) -> None:
        assert compile_apply_to("  ") == ()


class TestNormalizePath:
    def test_strips_dot_and_leading_slash(self) -> None:
        assert normalize_path("./src//app.py") == "src/app.py"
        assert normalize_path("/src/app.py") == "src/app.py"

    def test_converts_backslashes(self) -> None:
        assert normalize_path("src\\pkg\\mod.py") == "src/pkg/mod.py"
