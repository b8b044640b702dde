from pr_analyzer.domain.review.schemas.base import (
    AssembledPrompt,
    ChangeSet,
    EventKind,
    FileOutcome,
    FileSummary,
    Lifecycle,
    PullRequestEvent,
    ReviewState,
    SessionIdentity,
)
from pr_analyzer.domain.review.schemas.github import (
    ChangedFile,
    ChangeKind,
    Comment,
)

__all__ = [
    "AssembledPrompt",
    "ChangeKind",
    "ChangedFile",
    "Comment",
    "EventKind",
    "Lifecycle",
    "PullRequestEvent",
    "SessionIdentity",
    "FileOutcome",
    "FileSummary",
    "ChangeSet",
    "ReviewState",
]
