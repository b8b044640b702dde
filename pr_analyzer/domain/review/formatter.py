from collections.abc import Sequence

from pr_analyzer.domain.review.ledger import content_marker
from pr_analyzer.domain.review.prompts import (
    COMMENT_HEADER,
    LEDGER_ANCHOR,
    LEDGER_SECTION_CLOSE,
    LEDGER_SECTION_OPEN,
    SUMMARY_TABLE_HEADER,
)
from pr_analyzer.domain.review.schemas import FileSummary


def _escape_cell(value: str) -> str:
    return value.replace("|", "\\|")


def format_summary_table(summaries: Sequence[FileSummary]) -> str:
    """파일별 분석 상태 표"""
    rows = [SUMMARY_TABLE_HEADER]
    for summary in summaries:
        rows.append(
            f"| `{_escape_cell(summary.path)}` | {summary.change_kind.value} | {summary.outcome} |"
        )
    return "\n".join(rows)


def format_ledger_section(summaries: Sequence[FileSummary]) -> str:
    """전체 내용이 분석된 파일의 마커 목록, 다음 실행의 분석 이력이 됨"""
    entries = [
        f"{content_marker(summary.path)}\n{summary.content_lines} lines analyzed\n```\n"
        for summary in summaries
        if summary.outcome == "content+diff"
    ]
    if not entries:
        return ""
    return LEDGER_SECTION_OPEN + "\n" + "\n".join(entries) + "\n" + LEDGER_SECTION_CLOSE


def format_comment(
    response_text: str,
    pr_number: int,
    files_analyzed: int,
    diffs_analyzed: int,
    summaries: Sequence[FileSummary] = (),
) -> str:
    """에이전트 응답과 분석 요약으로 코멘트 본문 생성

    Args:
        response_text: 에이전트 응답, 그대로 포함
        pr_number: PR 번호
        files_analyzed: 전체 내용을 보낸 파일 수
        diffs_analyzed: diff를 보낸 파일 수
        summaries: 파일별 분석 상태

    Returns:
        Markdown 코멘트 본문, 분석 이력 섹션은 항상 맨 끝
    """
    parts = [
        COMMENT_HEADER.format(
            pr_number=pr_number,
            files_analyzed=files_analyzed,
            diffs_analyzed=diffs_analyzed,
        )
    ]
    if summaries:
        parts.append(format_summary_table(summaries) + "\n")
    parts.append(response_text.replace(LEDGER_ANCHOR, ""))

    ledger = format_ledger_section(summaries)
    if ledger:
        parts.append(ledger)

    return "\n".join(parts)
