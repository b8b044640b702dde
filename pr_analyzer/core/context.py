"""
실행 컨텍스트 관리 모듈

contextvars를 사용하여 비동기 환경에서도 안전하게 pr_number와 run_id를 관리
"""

from contextvars import ContextVar

pr_number_var: ContextVar[int | None] = ContextVar("pr_number", default=None)
run_id_var: ContextVar[str | None] = ContextVar("run_id", default=None)


def get_pr_number() -> int | None:
    """현재 컨텍스트의 PR 번호 반환"""
    return pr_number_var.get()


def set_pr_number(pr_number: int | None) -> None:
    """PR 번호 설정"""
    pr_number_var.set(pr_number)


def get_run_id() -> str | None:
    """현재 컨텍스트의 워크플로우 run_id 반환"""
    return run_id_var.get()


def set_run_id(run_id: str | None) -> None:
    """
    run_id 설정

    로그 상관관계 용도로만 사용하며 세션 키로 쓰지 않음
    """
    run_id_var.set(run_id or None)


def clear_context() -> None:
    """모든 컨텍스트 변수 초기화"""
    pr_number_var.set(None)
    run_id_var.set(None)
