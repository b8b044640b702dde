import asyncio
import re
from collections.abc import Awaitable, Callable, Collection, Sequence

from pr_analyzer.core.logging import get_logger
from pr_analyzer.domain.review.ledger import content_marker
from pr_analyzer.domain.review.patterns import IgnoreRules, is_excluded
from pr_analyzer.domain.review.schemas import (
    ChangedFile,
    ChangeKind,
    ChangeSet,
    FileSummary,
)

logger = get_logger(__name__)

ContentFetcher = Callable[[str], Awaitable[str | None]]

ANALYZABLE_KINDS = frozenset({ChangeKind.ADDED, ChangeKind.MODIFIED, ChangeKind.RENAMED})

NO_PATCH_PLACEHOLDER = "(no textual diff available: binary file or patch too large)"

BACKTICK_RUN = re.compile(r"`{3,}")


def _fence(text: str) -> str:
    """본문 안의 백틱 펜스보다 긴 펜스 반환"""
    longest = max((len(run) for run in BACKTICK_RUN.findall(text)), default=2)
    return "`" * max(3, longest + 1)


def format_code_block(path: str, content: str) -> str:
    """전체 내용 블록 생성, 분석 이력 마커와 같은 형태"""
    fence = _fence(content)
    marker = content_marker(path)
    return f"{marker}{fence[3:]}\n{content}\n{fence}\n"


def format_diff_block(file: ChangedFile) -> str:
    """diff 블록 생성, 전체 내용 마커와 구분되는 형태"""
    patch = file.diff_text or NO_PATCH_PLACEHOLDER
    fence = _fence(patch)
    return f"File: {file.path} (Status: {file.status})\n{fence}diff\n{patch}\n{fence}\n"


async def fetch_contents(
    paths: Sequence[str],
    fetch_content: ContentFetcher,
) -> dict[str, str | None]:
    """여러 파일 내용을 동시에 조회

    한 파일의 실패가 다른 조회를 취소하지 않으며, 실패한 파일은 None
    """

    async def _fetch(path: str) -> tuple[str, str | None]:
        try:
            return path, await fetch_content(path)
        except Exception as e:
            logger.warning("파일 내용 조회 실패, diff만 포함 path=%s error=%s", path, e)
            return path, None

    results = await asyncio.gather(*[_fetch(path) for path in paths])
    return dict(results)


async def build_change_set(
    changed_files: Sequence[ChangedFile],
    rules: IgnoreRules,
    ledger: Collection[str],
    fetch_content: ContentFetcher,
) -> ChangeSet:
    """분석 대상 파일을 골라 전체 내용 블록과 diff 블록 생성

    Args:
        changed_files: PR 변경 파일 목록
        rules: 무시 규칙
        ledger: 이미 전체 내용이 분석된 경로
        fetch_content: 경로로 파일 내용을 조회하는 코루틴 함수

    Returns:
        code_blocks, diff_blocks, 파일별 요약을 담은 변경 집합
    """
    in_scope: list[ChangedFile] = []
    outcomes: dict[str, str] = {}

    for file in changed_files:
        if file.change_kind not in ANALYZABLE_KINDS:
            outcomes[file.path] = "skipped"
            logger.info("분석 대상 아님 path=%s status=%s", file.path, file.status)
        elif is_excluded(file.path, rules):
            outcomes[file.path] = "ignored"
            logger.info("무시된 파일 path=%s status=%s", file.path, file.status)
        else:
            in_scope.append(file)

    to_fetch = [file.path for file in in_scope if file.path not in ledger]
    contents = await fetch_contents(to_fetch, fetch_content) if to_fetch else {}

    change_set = ChangeSet()
    for file in in_scope:
        content = contents.get(file.path)
        if content is not None:
            change_set.code_blocks.append(format_code_block(file.path, content))
            change_set.content_paths.append(file.path)
            outcomes[file.path] = "content+diff"
            logger.info("전체 내용 포함 path=%s status=%s", file.path, file.status)
        else:
            outcomes[file.path] = "diff only"
            if file.path in ledger:
                logger.info("이전 코멘트에서 분석된 파일, diff만 포함 path=%s", file.path)

        change_set.diff_blocks.append(format_diff_block(file))
        change_set.files.append(file.model_copy(update={"full_content": content}))

    for file in changed_files:
        content = contents.get(file.path)
        change_set.summaries.append(
            FileSummary(
                path=file.path,
                change_kind=file.change_kind,
                outcome=outcomes[file.path],
                content_lines=len(content.splitlines()) if content is not None else None,
            )
        )

    logger.info(
        "변경 집합 생성 완료 files=%d code_blocks=%d diff_blocks=%d",
        len(changed_files),
        len(change_set.code_blocks),
        len(change_set.diff_blocks),
    )
    return change_set


def drop_truncated_content(change_set: ChangeSet, included: int) -> ChangeSet:
    """프롬프트 잘림으로 온전히 전달되지 않은 전체 내용 블록 제외

    제외된 파일은 분석 이력에 남지 않으므로 다음 실행에서 전체 내용을 다시 보낸다.

    Args:
        change_set: 프롬프트 조합에 사용한 변경 집합
        included: 앞에서부터 온전히 포함된 전체 내용 블록 수

    Returns:
        실제로 전달된 블록만 남긴 변경 집합
    """
    if included >= len(change_set.code_blocks):
        return change_set

    truncated = set(change_set.content_paths[included:])
    logger.warning("프롬프트 잘림으로 전체 내용 누락 paths=%s", sorted(truncated))

    summaries = [
        summary.model_copy(update={"outcome": "truncated", "content_lines": None})
        if summary.path in truncated
        else summary
        for summary in change_set.summaries
    ]
    return change_set.model_copy(
        update={
            "code_blocks": change_set.code_blocks[:included],
            "content_paths": change_set.content_paths[:included],
            "summaries": summaries,
        }
    )
