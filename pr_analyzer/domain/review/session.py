"""
트리거 이벤트 분류와 에이전트 세션 식별자 생성

세션 키는 PR의 불변 식별자(내부 id와 PR 번호)로만 만든다. 제목, 브랜치,
워크플로우 run_id는 사용하지 않으므로 같은 PR의 반복 실행은 같은 대화를 이어간다.
"""

import re

from pr_analyzer.core.exceptions import InvalidEventError
from pr_analyzer.core.logging import get_logger
from pr_analyzer.domain.review.schemas import EventKind, PullRequestEvent, SessionIdentity

logger = get_logger(__name__)

PULL_REQUEST_EVENTS = frozenset({"pull_request", "pull_request_target"})

ACTIVE_ACTIONS = {
    "opened": EventKind.OPENED,
    "synchronize": EventKind.SYNCHRONIZED,
    "reopened": EventKind.REOPENED,
    "ready_for_review": EventKind.READY_FOR_REVIEW,
}

# Bedrock sessionId/memoryId 허용 문자와 길이
KEY_INVALID_CHARS = re.compile(r"[^0-9A-Za-z._:-]")
KEY_MIN_LENGTH = 2
KEY_MAX_LENGTH = 100


def resolve_event(event_name: str | None, payload: dict) -> PullRequestEvent:
    """웹훅 페이로드를 PR 이벤트로 분류

    Args:
        event_name: GITHUB_EVENT_NAME, 비어 있으면 검사하지 않음
        payload: 이벤트 페이로드

    Returns:
        종류와 불변 식별자를 담은 PR 이벤트

    Raises:
        InvalidEventError: PR 이벤트가 아니거나 식별자가 없는 경우
    """
    if event_name and event_name not in PULL_REQUEST_EVENTS:
        raise InvalidEventError(f"event {event_name!r} is not a pull request event")

    pull_request = payload.get("pull_request")
    if not isinstance(pull_request, dict):
        raise InvalidEventError("payload has no pull_request object")

    action = payload.get("action") or ""
    if action == "closed":
        kind = EventKind.MERGED if pull_request.get("merged") else EventKind.CLOSED
    else:
        kind = ACTIVE_ACTIONS.get(action, EventKind.IGNORED)

    try:
        pr_id = int(pull_request["id"])
        pr_number = int(pull_request.get("number") or payload["number"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidEventError(f"pull request identity missing: {e}") from e

    head = pull_request.get("head") or {}
    event = PullRequestEvent(
        kind=kind,
        action=action,
        pr_id=pr_id,
        pr_number=pr_number,
        head_sha=head.get("sha"),
    )
    logger.info("이벤트 분류 action=%s kind=%s lifecycle=%s", action, kind.value, event.lifecycle)
    return event


def _sanitize_key(value: str) -> str:
    return KEY_INVALID_CHARS.sub("-", value.strip())[:KEY_MAX_LENGTH]


def derive_session_identity(
    event: PullRequestEvent,
    memory_id: str | None = None,
) -> SessionIdentity:
    """PR 불변 식별자로 세션 키와 메모리 키 생성

    Args:
        event: 분류된 PR 이벤트
        memory_id: 설정된 장기 메모리 키

    Returns:
        session_key는 PR마다 고정, memory_key는 설정 시에만 존재
    """
    session_key = f"pr-{event.pr_number}-{event.pr_id}"

    memory_key = None
    if memory_id and memory_id.strip():
        memory_key = _sanitize_key(memory_id)
        if len(memory_key) < KEY_MIN_LENGTH:
            logger.warning("메모리 키가 너무 짧아 무시 memory_id=%s", memory_id)
            memory_key = None

    return SessionIdentity(session_key=session_key, memory_key=memory_key)
