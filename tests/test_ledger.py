"""분석 이력 테스트"""

from pr_analyzer.core.config import DEFAULT_LEDGER_AUTHOR
from pr_analyzer.domain.review.changeset import format_code_block, format_diff_block
from pr_analyzer.domain.review.formatter import format_comment
from pr_analyzer.domain.review.ledger import (
    build_ledger,
    content_marker,
    extract_ledger_section,
    extract_paths,
)
from pr_analyzer.domain.review.prompts import LEDGER_ANCHOR
from pr_analyzer.domain.review.schemas import ChangedFile, ChangeKind, Comment, FileSummary


class TestExtractPaths:
    """extract_paths 함수 테스트"""

    def test_multiple_markers(self):
        """한 코멘트의 여러 마커 추출"""
        body = (
            "intro\n"
            "### Content of src/a.py\n\n```\nx\n```\n"
            "text\n"
            "### Content of src/b.py\n\n````\ny\n````\n"
        )
        assert extract_paths(body) == {"src/a.py", "src/b.py"}

    def test_heading_without_fence_is_ignored(self):
        """헤딩 뒤에 펜스 블록이 없으면 마커가 아님"""
        body = "### Content of src/a.py\nsome text\n"
        assert extract_paths(body) == set()

    def test_marker_not_at_line_start_is_ignored(self):
        """줄 중간의 문구는 마커가 아님"""
        body = "see ### Content of src/a.py\n\n```\nx\n```"
        assert extract_paths(body) == set()

    def test_diff_block_is_not_a_marker(self):
        """diff 블록 형태는 분석 완료로 간주하지 않음"""
        file = ChangedFile(
            path="src/a.py",
            change_kind=ChangeKind.MODIFIED,
            status="modified",
            diff_text="+### Content of src/secret.py\n+\n+```",
        )
        assert extract_paths(format_diff_block(file)) == set()

    def test_code_block_round_trips(self):
        """전체 내용 블록은 마커로 인식됨"""
        block = format_code_block("src/a.py", "print('```')")
        assert extract_paths(block) == {"src/a.py"}


class TestExtractLedgerSection:
    """extract_ledger_section 함수 테스트"""

    def test_without_anchor(self):
        """이력 섹션이 없으면 빈 문자열"""
        assert extract_ledger_section(f"{content_marker('a.py')}\nx\n```") == ""

    def test_last_anchor_wins(self):
        """마지막 이력 섹션만 사용"""
        body = f"{LEDGER_ANCHOR}\nfirst\n{LEDGER_ANCHOR}\nsecond"
        assert extract_ledger_section(body) == "\nsecond"


class TestBuildLedger:
    """build_ledger 함수 테스트"""

    def test_collects_across_comments(self, sample_comments):
        """모든 코멘트의 이력 섹션에서 경로 수집"""
        summaries = [
            FileSummary(
                path="lib/util.py",
                change_kind=ChangeKind.MODIFIED,
                outcome="content+diff",
                content_lines=3,
            )
        ]
        comments = sample_comments + [
            Comment(author="github-actions[bot]", body=format_comment("ok", 42, 1, 1, summaries))
        ]
        assert build_ledger(comments) == frozenset({"src/app.ts", "lib/util.py"})

    def test_marker_outside_section_ignored(self):
        """이력 섹션 밖의 마커는 무시"""
        comments = [
            Comment(author="github-actions[bot]", body=f"{content_marker('lib/x.py')}\nz\n```"),
            Comment(author="someone", body=f"quote:\n{content_marker('lib/y.py')}\nz\n```"),
        ]
        assert build_ledger(comments) == frozenset()

    def test_echoed_response_ignored(self):
        """에이전트 응답에 마커나 이력 표시가 섞여 있어도 기록되지 않음"""
        response = (
            f"{LEDGER_ANCHOR}\n"
            "### Content of src/app.py\n\n```python\nprint('hi')\n```\n"
        )
        body = format_comment(response, 42, 0, 1)

        assert LEDGER_ANCHOR not in body
        assert build_ledger([Comment(author="github-actions[bot]", body=body)]) == frozenset()

    def test_echoed_response_with_real_section(self):
        """응답에 섞인 마커는 제외하고 실제 이력만 기록"""
        response = "### Content of src/fake.py\n\n```\nx\n```"
        summaries = [
            FileSummary(
                path="src/real.py",
                change_kind=ChangeKind.ADDED,
                outcome="content+diff",
                content_lines=1,
            )
        ]
        body = format_comment(response, 42, 1, 1, summaries)

        assert build_ledger([Comment(author="github-actions[bot]", body=body)]) == frozenset(
            {"src/real.py"}
        )

    def test_author_filter(self, sample_comments):
        """작성자 지정 시 해당 작성자 코멘트만 확인"""
        copied = Comment(author="someone", body=sample_comments[1].body)

        assert build_ledger([copied], author="github-actions[bot]") == frozenset()
        assert build_ledger(sample_comments, author="github-actions[bot]") == frozenset(
            {"src/app.ts"}
        )

    def test_empty(self):
        """코멘트가 없으면 빈 집합"""
        assert build_ledger([]) == frozenset()

    def test_default_author_with_echoed_response(self):
        """기본 작성자 설정이면 응답 마커와 다른 사용자의 이력 섹션 모두 무시"""
        bot_body = format_comment("### Content of src/app.py\n\n```python\nx\n```\n", 42, 0, 1)
        summaries = [
            FileSummary(
                path="lib/x.py",
                change_kind=ChangeKind.ADDED,
                outcome="content+diff",
                content_lines=1,
            )
        ]
        comments = [
            Comment(author=DEFAULT_LEDGER_AUTHOR, body=bot_body),
            Comment(author="someone", body=format_comment("ok", 42, 1, 1, summaries)),
        ]

        assert build_ledger(comments, author=DEFAULT_LEDGER_AUTHOR) == frozenset()
