"""
이전 코멘트에서 이미 전체 내용이 분석된 파일 경로 복원

코멘트 끝의 분석 이력 섹션 안에 있는 전체 내용 마커만 인식한다. 에이전트 응답이나
다른 사람의 코멘트에 같은 형태의 문구가 있어도 분석 완료로 간주하지 않는다. diff 블록은
다른 형태의 마커를 쓰므로 diff 본문에 경로가 나와도 마찬가지다.
"""

import re
from collections.abc import Iterable

from pr_analyzer.core.logging import get_logger
from pr_analyzer.domain.review.prompts import LEDGER_ANCHOR
from pr_analyzer.domain.review.schemas import Comment

logger = get_logger(__name__)

CONTENT_HEADING = "### Content of "
CONTENT_MARKER_PATTERN = re.compile(r"^### Content of ([^\n]+)\n\n```", re.MULTILINE)


def content_marker(path: str) -> str:
    """전체 내용 블록의 시작 마커"""
    return f"{CONTENT_HEADING}{path}\n\n```"


def extract_paths(body: str) -> set[str]:
    """본문에서 마커로 표시된 경로 추출"""
    return {match.group(1).strip() for match in CONTENT_MARKER_PATTERN.finditer(body)}


def extract_ledger_section(body: str) -> str:
    """코멘트 끝의 분석 이력 섹션 반환, 없으면 빈 문자열"""
    start = body.rfind(LEDGER_ANCHOR)
    if start == -1:
        return ""
    return body[start + len(LEDGER_ANCHOR) :]


def build_ledger(
    comments: Iterable[Comment],
    author: str | None = None,
) -> frozenset[str]:
    """코멘트 스냅샷으로부터 분석 완료 경로 집합 생성

    Args:
        comments: PR의 기존 코멘트 목록
        author: 지정 시 해당 작성자의 코멘트만 확인

    Returns:
        전체 내용이 이미 분석된 경로 집합
    """
    paths: set[str] = set()
    for comment in comments:
        if author and comment.author != author:
            continue
        paths |= extract_paths(extract_ledger_section(comment.body))

    logger.debug("분석 이력 복원 paths=%s", sorted(paths))
    return frozenset(paths)
