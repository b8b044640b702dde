import httpx

from pr_analyzer.core.logging import get_logger
from pr_analyzer.domain.review.changeset import build_change_set
from pr_analyzer.domain.review.ledger import build_ledger
from pr_analyzer.domain.review.patterns import IgnoreRules, compile_rules, split_patterns
from pr_analyzer.domain.review.schemas import ChangedFile, ChangeSet, Comment, PullRequestEvent
from pr_analyzer.infra.github.client import (
    get_file_content,
    list_issue_comments,
    list_pull_files,
)

logger = get_logger(__name__)


async def collect_comments(repository: str, pr_number: int, token: str | None) -> list[Comment]:
    """PR의 기존 코멘트 스냅샷 조회"""
    data = await list_issue_comments(repository, pr_number, token)
    return [Comment.from_github(item) for item in data]


async def collect_changed_files(
    repository: str, pr_number: int, token: str | None
) -> list[ChangedFile]:
    """PR 변경 파일 목록 조회"""
    data = await list_pull_files(repository, pr_number, token)
    return [ChangedFile.from_github(item) for item in data]


async def load_ignore_rules(
    repository: str,
    ref: str | None,
    token: str | None,
    input_patterns: str,
    ignore_file: str | None,
) -> IgnoreRules:
    """입력 패턴과 레포지토리 무시 파일을 합쳐 무시 규칙 생성

    무시 파일 조회 실패는 경고 후 입력 패턴만 사용
    """
    file_patterns: list[str] = []
    if ignore_file:
        try:
            text = await get_file_content(repository, ignore_file, ref, token)
            file_patterns = split_patterns(text)
        except httpx.HTTPError as e:
            logger.warning("무시 파일 조회 실패 path=%s error=%s", ignore_file, type(e).__name__)

    rules = compile_rules(split_patterns(input_patterns), file_patterns)
    logger.info("무시 규칙 로드 rules=%d from_file=%d", len(rules), len(file_patterns))
    return rules


async def collect_change_set(
    repository: str,
    event: PullRequestEvent,
    comments: list[Comment],
    token: str | None,
    input_patterns: str = "",
    ignore_file: str | None = None,
    ledger_author: str | None = None,
) -> ChangeSet:
    """PR 변경 파일에서 이번 실행의 분석 대상 변경 집합 생성

    Args:
        repository: owner/repo
        event: 분류된 PR 이벤트
        comments: 기존 코멘트 스냅샷
        token: GitHub 토큰
        input_patterns: 설정된 무시 패턴 문자열
        ignore_file: 레포지토리 무시 파일 경로
        ledger_author: 분석 이력으로 인정할 코멘트 작성자

    Returns:
        변경 집합
    """
    changed_files = await collect_changed_files(repository, event.pr_number, token)
    rules = await load_ignore_rules(repository, event.head_sha, token, input_patterns, ignore_file)
    ledger = build_ledger(comments, author=ledger_author or None)

    logger.info(
        "분석 준비 완료 changed_files=%d already_analyzed=%d", len(changed_files), len(ledger)
    )

    async def fetch(path: str) -> str | None:
        return await get_file_content(repository, path, event.head_sha, token)

    return await build_change_set(changed_files, rules, ledger, fetch)
