from typing import Literal

import httpx
from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from pr_analyzer.core.config import settings
from pr_analyzer.core.context import set_pr_number
from pr_analyzer.core.exceptions import AgentError, ErrorCode, GitHubAPIError, InvalidEventError
from pr_analyzer.core.logging import get_logger
from pr_analyzer.domain.review.assembler import assemble_prompt
from pr_analyzer.domain.review.changeset import drop_truncated_content
from pr_analyzer.domain.review.formatter import format_comment
from pr_analyzer.domain.review.schemas import ReviewState
from pr_analyzer.domain.review.service import collect_change_set, collect_comments
from pr_analyzer.domain.review.session import derive_session_identity, resolve_event
from pr_analyzer.infra.agent import get_agent_client
from pr_analyzer.infra.github.client import create_issue_comment
from pr_analyzer.infra.tracing import get_langfuse_handler

logger = get_logger(__name__)


def _github_error(state: ReviewState, node: str, e: httpx.HTTPError) -> ReviewState:
    if isinstance(e, httpx.HTTPStatusError):
        status_code = e.response.status_code
        logger.error("%s GitHub API 오류 status=%d", node, status_code)
        error = GitHubAPIError(f"HTTP {status_code}")
    else:
        logger.error("%s GitHub 요청 실패 error=%s", node, type(e).__name__)
        error = GitHubAPIError(type(e).__name__)
    return {**state, "error_code": error.error_code, "error_message": str(error)}


async def resolve_event_node(state: ReviewState) -> ReviewState:
    """이벤트 분류 노드: PR 식별 정보와 세션 키 결정"""
    try:
        event = resolve_event(state.get("event_name"), state.get("payload") or {})
    except InvalidEventError as e:
        logger.error("resolve_event_node 이벤트 오류 error=%s", e)
        return {**state, "error_code": e.error_code, "error_message": str(e)}

    set_pr_number(event.pr_number)
    session = derive_session_identity(event, settings.memory_id)

    logger.info(
        "resolve_event_node 완료 kind=%s session_key=%s memory=%s",
        event.kind.value,
        session.session_key,
        session.memory_key is not None,
    )
    return {**state, "event": event, "session": session}


async def end_session_node(state: ReviewState) -> ReviewState:
    """세션 종료 노드: PR이 닫히면 분석 없이 에이전트 세션만 종료"""
    session = state["session"]
    logger.info("end_session_node 시작 session_key=%s", session.session_key)

    try:
        await get_agent_client().end_session(
            settings.agent_id,
            settings.agent_alias_id,
            session.session_key,
            session.memory_key,
        )
    except AgentError as e:
        return {**state, "error_code": e.error_code, "error_message": str(e)}

    return {**state, "session_ended": True}


async def collect_changes_node(state: ReviewState) -> ReviewState:
    """변경 수집 노드: 코멘트 이력과 변경 파일로 분석 대상 결정"""
    event = state["event"]
    logger.info("collect_changes_node 시작 pr=%d head=%s", event.pr_number, event.head_sha)

    try:
        comments = await collect_comments(
            settings.github_repository, event.pr_number, settings.github_token
        )
        change_set = await collect_change_set(
            settings.github_repository,
            event,
            comments,
            settings.github_token,
            input_patterns=settings.ignore_patterns,
            ignore_file=settings.ignore_file,
            ledger_author=settings.ledger_author,
        )

    except httpx.HTTPError as e:
        return _github_error(state, "collect_changes_node", e)

    except ValueError as e:
        logger.error("collect_changes_node 값 오류 error=%s", e)
        return {
            **state,
            "error_code": ErrorCode.CONFIGURATION_ERROR,
            "error_message": f"Invalid configuration: {e}",
        }

    except (KeyError, TypeError) as e:
        logger.error("collect_changes_node 데이터 오류 error=%s", e, exc_info=True)
        return {
            **state,
            "error_code": ErrorCode.DATA_PARSE_ERROR,
            "error_message": f"Unexpected GitHub response: {e}",
        }

    return {**state, "comments": comments, "change_set": change_set}


async def assemble_prompt_node(state: ReviewState) -> ReviewState:
    """프롬프트 조합 노드"""
    change_set = state["change_set"]
    assembled = assemble_prompt(
        change_set.code_blocks,
        change_set.diff_blocks,
        settings.action_prompt,
        settings.max_prompt_length,
    )
    change_set = drop_truncated_content(change_set, assembled.code_blocks_included)

    logger.info(
        "assemble_prompt_node 완료 length=%d code_blocks=%d",
        len(assembled.text),
        assembled.code_blocks_included,
    )
    logger.debug("생성된 프롬프트\n%s", assembled.text)
    return {**state, "prompt": assembled.text, "change_set": change_set}


async def invoke_agent_node(state: ReviewState) -> ReviewState:
    """에이전트 호출 노드: 재시도 없이 한 번만 호출"""
    session = state["session"]
    logger.info("invoke_agent_node 시작 session_key=%s", session.session_key)

    try:
        response_text = await get_agent_client().invoke_agent(
            settings.agent_id,
            settings.agent_alias_id,
            session.session_key,
            state["prompt"],
            session.memory_key,
        )
    except AgentError as e:
        return {**state, "error_code": e.error_code, "error_message": str(e)}

    logger.debug("에이전트 응답\n%s", response_text)
    return {**state, "response_text": response_text}


async def post_comment_node(state: ReviewState) -> ReviewState:
    """코멘트 작성 노드"""
    event = state["event"]
    change_set = state["change_set"]

    body = format_comment(
        state["response_text"],
        event.pr_number,
        len(change_set.code_blocks),
        len(change_set.diff_blocks),
        change_set.summaries,
    )

    try:
        comment = await create_issue_comment(
            settings.github_repository, event.pr_number, body, settings.github_token
        )
    except httpx.HTTPError as e:
        return _github_error({**state, "comment_body": body}, "post_comment_node", e)

    logger.info("post_comment_node 완료 pr=%d", event.pr_number)
    return {**state, "comment_body": body, "comment_url": comment.get("html_url", "")}


def route_event(state: ReviewState) -> Literal["collect_changes", "end_session", "end"]:
    """이벤트 분기: 활성 이벤트는 분석, 닫힘 이벤트는 세션 종료, 나머지는 종료"""
    if state.get("error_code"):
        logger.info("route_event: 에러 발생, 종료")
        return "end"

    lifecycle = state["event"].lifecycle
    if lifecycle == "terminating":
        return "end_session"
    if lifecycle == "ignored":
        logger.info("route_event: 분석 대상 이벤트 아님 action=%s", state["event"].action)
        return "end"
    return "collect_changes"


def should_assemble(state: ReviewState) -> Literal["assemble", "end"]:
    """변경 집합이 비어 있으면 에이전트를 호출하지 않고 종료"""
    if state.get("error_code"):
        logger.info("should_assemble: 에러 발생, 종료")
        return "end"

    if state["change_set"].is_empty:
        logger.warning("should_assemble: 분석할 파일 없음, 종료")
        return "end"
    return "assemble"


def should_continue(state: ReviewState) -> Literal["continue", "end"]:
    """에러 상태 확인: 에러 있으면 종료, 없으면 다음 노드로"""
    if state.get("error_code"):
        logger.info("should_continue: 에러 발생, 종료")
        return "end"
    return "continue"


def create_review_workflow() -> CompiledStateGraph:
    """PR 분석 워크플로우 생성"""
    workflow = StateGraph(ReviewState)

    workflow.add_node("resolve_event", resolve_event_node)
    workflow.add_node("end_session", end_session_node)
    workflow.add_node("collect_changes", collect_changes_node)
    workflow.add_node("assemble_prompt", assemble_prompt_node)
    workflow.add_node("invoke_agent", invoke_agent_node)
    workflow.add_node("post_comment", post_comment_node)

    workflow.set_entry_point("resolve_event")

    workflow.add_conditional_edges(
        "resolve_event",
        route_event,
        {
            "collect_changes": "collect_changes",
            "end_session": "end_session",
            "end": END,
        },
    )

    workflow.add_edge("end_session", END)

    workflow.add_conditional_edges(
        "collect_changes",
        should_assemble,
        {
            "assemble": "assemble_prompt",
            "end": END,
        },
    )

    workflow.add_edge("assemble_prompt", "invoke_agent")

    workflow.add_conditional_edges(
        "invoke_agent",
        should_continue,
        {
            "continue": "post_comment",
            "end": END,
        },
    )

    workflow.add_edge("post_comment", END)

    return workflow.compile()


async def run_review(event_name: str | None, payload: dict) -> ReviewState:
    """PR 분석 워크플로우 실행 후 최종 상태 반환

    Args:
        event_name: GITHUB_EVENT_NAME
        payload: 이벤트 페이로드

    Returns:
        최종 워크플로우 상태
    """
    workflow = create_review_workflow()

    langfuse_handler = get_langfuse_handler()
    config: RunnableConfig = {
        "callbacks": [langfuse_handler] if langfuse_handler else [],
        "metadata": {
            "langfuse_tags": ["pr-analyzer", event_name or "unknown"],
        },
    }

    initial_state = ReviewState(event_name=event_name or "", payload=payload)
    return await workflow.ainvoke(initial_state, config=config)
