"""테스트 공통 fixture"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from pr_analyzer.domain.review.schemas import (
    ChangedFile,
    ChangeKind,
    ChangeSet,
    Comment,
    EventKind,
    FileSummary,
    PullRequestEvent,
    ReviewState,
    SessionIdentity,
)


@pytest.fixture
def sample_payload() -> dict:
    """테스트용 pull_request 이벤트 페이로드"""
    return {
        "action": "synchronize",
        "number": 42,
        "pull_request": {
            "id": 987654321,
            "number": 42,
            "title": "Add feature",
            "merged": False,
            "head": {"sha": "abc123", "ref": "feature/x"},
        },
    }


@pytest.fixture
def sample_event() -> PullRequestEvent:
    """테스트용 활성 PR 이벤트"""
    return PullRequestEvent(
        kind=EventKind.SYNCHRONIZED,
        action="synchronize",
        pr_id=987654321,
        pr_number=42,
        head_sha="abc123",
    )


@pytest.fixture
def sample_session() -> SessionIdentity:
    """테스트용 세션 식별자"""
    return SessionIdentity(session_key="pr-42-987654321", memory_key=None)


@pytest.fixture
def sample_changed_files() -> list[ChangedFile]:
    """테스트용 변경 파일 목록"""
    return [
        ChangedFile(
            path="README.md",
            change_kind=ChangeKind.MODIFIED,
            status="modified",
            diff_text="@@ -1 +1 @@\n-old\n+new",
        ),
        ChangedFile(
            path="src/app.ts",
            change_kind=ChangeKind.ADDED,
            status="added",
            diff_text="@@ -0,0 +1,2 @@\n+const a = 1;\n+export default a;",
        ),
        ChangedFile(
            path="src/old.ts",
            change_kind=ChangeKind.OTHER,
            status="removed",
            diff_text="@@ -1 +0,0 @@\n-gone",
        ),
    ]


@pytest.fixture
def sample_comments() -> list[Comment]:
    """테스트용 기존 코멘트"""
    return [
        Comment(author="someone", body="LGTM"),
        Comment(
            author="github-actions[bot]",
            body=(
                "## Analysis\n\n<!-- pr-analyzer:ledger -->\n<details>\n"
                "<summary>Analysis ledger</summary>\n\n"
                "### Content of src/app.ts\n\n```\n2 lines analyzed\n```\n\n</details>"
            ),
        ),
    ]


@pytest.fixture
def sample_change_set() -> ChangeSet:
    """테스트용 변경 집합"""
    return ChangeSet(
        code_blocks=["### Content of src/app.ts\n\n```\nconst a = 1;\n```\n"],
        content_paths=["src/app.ts"],
        diff_blocks=["File: src/app.ts (Status: added)\n```diff\n+const a = 1;\n```\n"],
        summaries=[
            FileSummary(
                path="src/app.ts",
                change_kind=ChangeKind.ADDED,
                outcome="content+diff",
                content_lines=1,
            )
        ],
    )


@pytest.fixture
def sample_review_state(sample_payload, sample_event, sample_session) -> ReviewState:
    """테스트용 워크플로우 상태"""
    return ReviewState(
        event_name="pull_request",
        payload=sample_payload,
        event=sample_event,
        session=sample_session,
    )


@pytest.fixture
def mock_agent_client():
    """에이전트 클라이언트 mock"""
    with patch("pr_analyzer.domain.review.workflow.get_agent_client") as mock_get:
        client = MagicMock()
        client.invoke_agent = AsyncMock(return_value="Looks good.")
        client.end_session = AsyncMock(return_value=None)
        mock_get.return_value = client
        yield client


@pytest.fixture
def mock_workflow_settings():
    """워크플로우 설정 mock"""
    with patch("pr_analyzer.domain.review.workflow.settings") as mock:
        mock.agent_id = "AGENT123"
        mock.agent_alias_id = "ALIAS123"
        mock.memory_id = ""
        mock.github_repository = "owner/repo"
        mock.github_token = "test-token"
        mock.ignore_patterns = "**/*.md"
        mock.ignore_file = ".pranalyzerignore"
        mock.ledger_author = ""
        mock.action_prompt = "Review this."
        mock.max_prompt_length = 25000
        yield mock


@pytest.fixture
def create_http_error():
    """HTTPStatusError 생성 helper"""

    def _create(status_code: int, message: str = "Error"):
        return httpx.HTTPStatusError(
            message,
            request=httpx.Request("GET", "https://test.com"),
            response=httpx.Response(status_code),
        )

    return _create
