from enum import Enum

from pydantic import BaseModel


class ChangeKind(str, Enum):
    """PR 파일 변경 유형"""

    ADDED = "added"
    MODIFIED = "modified"
    RENAMED = "renamed"
    OTHER = "other"

    @classmethod
    def from_status(cls, status: str | None) -> "ChangeKind":
        """GitHub status 값을 변경 유형으로 변환, 그 외는 OTHER"""
        try:
            return cls((status or "").lower())
        except ValueError:
            return cls.OTHER


class ChangedFile(BaseModel):
    """PR에서 변경된 파일"""

    path: str
    change_kind: ChangeKind
    status: str
    diff_text: str | None = None
    full_content: str | None = None

    @classmethod
    def from_github(cls, data: dict) -> "ChangedFile":
        status = data.get("status", "")
        return cls(
            path=data["filename"],
            change_kind=ChangeKind.from_status(status),
            status=status,
            diff_text=data.get("patch"),
        )


class Comment(BaseModel):
    """PR 코멘트"""

    author: str
    body: str

    @classmethod
    def from_github(cls, data: dict) -> "Comment":
        user = data.get("user") or {}
        return cls(author=user.get("login", ""), body=data.get("body") or "")
