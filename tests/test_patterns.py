"""무시 규칙 매칭 테스트"""

import pytest

from pr_analyzer.domain.review.patterns import (
    InvalidPatternError,
    compile_rule,
    compile_rules,
    is_excluded,
    split_patterns,
)


class TestSplitPatterns:
    """split_patterns 함수 테스트"""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("**/*.md,docs/**", ["**/*.md", "docs/**"]),
            ("**/*.md\ndocs/**\n", ["**/*.md", "docs/**"]),
            (" *.lock , dist/ ", ["*.lock", "dist/"]),
            ("# generated\nbuild/\n\n", ["build/"]),
            ("a\r\nb", ["a", "b"]),
            ("", []),
            (None, []),
        ],
    )
    def test_split(self, text, expected):
        """콤마와 줄바꿈 모두 구분자로 처리"""
        assert split_patterns(text) == expected


class TestCompileRule:
    """compile_rule 함수 테스트"""

    @pytest.mark.parametrize(
        "pattern,error",
        [
            ("!keep.md", "negated"),
            ("/", "empty pattern"),
            ("./", "empty pattern"),
            ("///", "empty pattern"),
        ],
    )
    def test_invalid_patterns(self, pattern, error):
        """지원하지 않는 패턴은 InvalidPatternError 발생"""
        with pytest.raises(InvalidPatternError, match=error):
            compile_rule(pattern)


class TestIsExcluded:
    """is_excluded 함수 테스트"""

    @pytest.mark.parametrize(
        "pattern,path",
        [
            ("**/*.md", "README.md"),
            ("**/*.md", "docs/guide/intro.md"),
            ("docs/**", "docs/a/b.txt"),
            ("docs/", "docs/index.html"),
            ("dist/", "dist/nested/deep/app.js"),
            ("src/*.ts", "src/app.ts"),
            ("src/?.ts", "src/a.ts"),
            ("src/[ab].ts", "src/b.ts"),
            ("src/[!ab].ts", "src/c.ts"),
            ("src/**/test_*.py", "src/test_x.py"),
            ("src/**/test_*.py", "src/pkg/sub/test_x.py"),
            ("/dist/*", "dist/bundle.js"),
            ("./dist/*", "dist/bundle.js"),
            ("package-lock.json", "package-lock.json"),
            ("**", "any/path/at/all"),
        ],
    )
    def test_matches(self, pattern, path):
        """규칙과 매칭되는 경로는 제외"""
        rules = compile_rules([pattern])
        assert is_excluded(path, rules) is True

    @pytest.mark.parametrize(
        "pattern,path",
        [
            ("*.md", "docs/intro.md"),
            ("src/*.ts", "src/nested/app.ts"),
            ("docs/", "docs2/index.html"),
            ("docs/**", "src/docs/a.txt"),
            ("**/*.md", "README.MD"),
            ("src/?.ts", "src/ab.ts"),
            ("src/[!ab].ts", "src/a.ts"),
            ("package-lock.json", "web/package-lock.json"),
        ],
    )
    def test_does_not_match(self, pattern, path):
        """대소문자와 경로 구분자를 구분"""
        rules = compile_rules([pattern])
        assert is_excluded(path, rules) is False

    def test_spec_example(self):
        """md 파일과 docs 하위는 제외, 소스 파일은 포함"""
        rules = compile_rules(["**/*.md", "docs/**"])

        assert is_excluded("README.md", rules) is True
        assert is_excluded("src/app.ts", rules) is False

    def test_empty_rules(self):
        """규칙이 없으면 아무것도 제외하지 않음"""
        assert is_excluded("src/app.ts", {}) is False


class TestCompileRules:
    """compile_rules 함수 테스트"""

    def test_union_of_sources(self):
        """입력 패턴과 무시 파일 패턴의 합집합"""
        rules = compile_rules(["**/*.md"], ["dist/"])

        assert is_excluded("README.md", rules) is True
        assert is_excluded("dist/app.js", rules) is True
        assert is_excluded("src/app.ts", rules) is False

    def test_duplicates_collapse(self):
        """중복 패턴은 하나로 합침"""
        rules = compile_rules(["**/*.md", "**/*.md"], ["**/*.md"])
        assert list(rules) == ["**/*.md"]

    def test_invalid_rule_dropped(self):
        """잘못된 패턴은 제외되고 나머지 규칙 결과는 그대로"""
        valid = compile_rules(["**/*.md"])
        mixed = compile_rules(["**/*.md", "src/[z-a].py", "!README.md", "/"])

        assert list(mixed) == ["**/*.md"]
        for path in ["README.md", "src/y.py", "src/app.ts"]:
            assert is_excluded(path, mixed) == is_excluded(path, valid)

    def test_invalid_range_dropped(self):
        """정규식으로 변환할 수 없는 범위도 제외"""
        rules = compile_rules(["src/[z-a].py"])
        assert rules == {}
