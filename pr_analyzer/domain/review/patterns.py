"""
무시 규칙(glob) 매칭

pathspec의 gitwildmatch 문법을 사용하되 모든 규칙을 레포지토리 루트 기준으로 고정한다.

- `*`, `?`, `[...]`는 경로 구분자(/)를 넘지 않음
- `**` 세그먼트는 0개 이상의 디렉토리와 매칭
- 끝이 `/`인 패턴은 해당 디렉토리 하위 전체와 매칭
- 대소문자 구분, 전체 경로 기준 매칭
"""

import re
from collections.abc import Iterable

import pathspec

from pr_analyzer.core.logging import get_logger

logger = get_logger(__name__)

IgnoreRules = dict[str, pathspec.PathSpec]

PATTERN_SEPARATOR = re.compile(r"[,\r\n]+")


class InvalidPatternError(ValueError):
    """glob 문법 오류"""


def split_patterns(text: str | None) -> list[str]:
    """콤마 또는 줄바꿈으로 구분된 패턴 문자열을 목록으로 변환

    빈 항목과 `#` 주석 줄은 제외
    """
    if not text:
        return []

    patterns = []
    for item in PATTERN_SEPARATOR.split(text):
        item = item.strip()
        if not item or item.startswith("#"):
            continue
        patterns.append(item)
    return patterns


def _anchor(pattern: str) -> str:
    """루트 기준 매칭이 되도록 앞에 `/`를 붙인 패턴 반환"""
    # 출처 간 우선순위가 없으므로 부정 패턴은 의미가 없음
    if pattern.startswith("!"):
        raise InvalidPatternError("negated patterns are not supported")

    body = pattern[2:] if pattern.startswith("./") else pattern
    body = body.lstrip("/")
    if not body.strip("/"):
        raise InvalidPatternError("empty pattern")
    return "/" + body


def compile_rule(pattern: str) -> pathspec.PathSpec:
    """패턴 하나를 컴파일

    Raises:
        InvalidPatternError: 지원하지 않는 패턴
        ValueError, re.error: pathspec이 거부한 문법 오류
    """
    return pathspec.PathSpec.from_lines("gitwildmatch", [_anchor(pattern)])


def compile_rules(*sources: Iterable[str]) -> IgnoreRules:
    """여러 출처의 패턴을 합쳐 컴파일

    출처 간 우선순위 없이 합집합으로 처리하고, 중복은 하나로 합침.
    문법 오류가 있는 패턴은 경고 후 제외.
    """
    rules: IgnoreRules = {}
    for source in sources:
        for pattern in source:
            if pattern in rules:
                continue
            try:
                rules[pattern] = compile_rule(pattern)
            except (ValueError, re.error) as e:
                logger.warning("잘못된 무시 패턴 제외 pattern=%s reason=%s", pattern, e)
    return rules


def is_excluded(path: str, rules: IgnoreRules) -> bool:
    """경로가 무시 규칙 중 하나라도 매칭되면 True"""
    return any(spec.match_file(path) for spec in rules.values())
