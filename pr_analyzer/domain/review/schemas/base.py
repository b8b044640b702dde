from enum import Enum
from typing import Literal, TypedDict

from pydantic import BaseModel, Field

from pr_analyzer.domain.review.schemas.github import ChangedFile, ChangeKind, Comment


class EventKind(str, Enum):
    """PR 이벤트 종류"""

    OPENED = "opened"
    SYNCHRONIZED = "synchronize"
    REOPENED = "reopened"
    READY_FOR_REVIEW = "ready_for_review"
    CLOSED = "closed"
    MERGED = "merged"
    IGNORED = "ignored"


Lifecycle = Literal["active", "terminating", "ignored"]


class PullRequestEvent(BaseModel):
    """트리거 이벤트에서 추출한 PR 식별 정보"""

    kind: EventKind
    action: str
    pr_id: int
    pr_number: int
    head_sha: str | None = None

    @property
    def lifecycle(self) -> Lifecycle:
        if self.kind in (EventKind.CLOSED, EventKind.MERGED):
            return "terminating"
        if self.kind == EventKind.IGNORED:
            return "ignored"
        return "active"


class SessionIdentity(BaseModel):
    """에이전트 대화 세션 식별자"""

    session_key: str
    memory_key: str | None = None


FileOutcome = Literal["content+diff", "diff only", "truncated", "ignored", "skipped"]


class FileSummary(BaseModel):
    """파일별 분석 상태"""

    path: str
    change_kind: ChangeKind
    outcome: FileOutcome
    content_lines: int | None = None


class ChangeSet(BaseModel):
    """분석 대상 변경 집합"""

    code_blocks: list[str] = Field(default_factory=list)
    content_paths: list[str] = Field(default_factory=list)
    diff_blocks: list[str] = Field(default_factory=list)
    files: list[ChangedFile] = Field(default_factory=list)
    summaries: list[FileSummary] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.code_blocks and not self.diff_blocks


class AssembledPrompt(BaseModel):
    """조합된 프롬프트"""

    text: str
    # 잘리지 않고 온전히 포함된 전체 내용 블록 수 (앞에서부터)
    code_blocks_included: int


class ReviewState(TypedDict, total=False):
    """LangGraph 워크플로우 상태"""

    event_name: str
    payload: dict
    event: PullRequestEvent
    session: SessionIdentity
    comments: list[Comment]
    change_set: ChangeSet
    prompt: str
    response_text: str
    comment_body: str
    comment_url: str
    session_ended: bool
    error_code: str
    error_message: str
