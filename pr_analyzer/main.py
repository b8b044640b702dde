import asyncio
import sys

from pr_analyzer.core.config import settings
from pr_analyzer.core.context import clear_context, set_run_id
from pr_analyzer.core.exceptions import ConfigurationError, CustomException, InvalidEventError
from pr_analyzer.core.logging import get_logger, setup_logging
from pr_analyzer.domain.review.workflow import run_review
from pr_analyzer.infra.github.client import close_client as close_github_client
from pr_analyzer.infra.github.client import load_event

logger = get_logger(__name__)


def _report_failure(message: str) -> None:
    """GitHub Actions 에러 주석 출력"""
    escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    print(f"::error::{escaped}", flush=True)


def _load_payload() -> dict:
    try:
        return load_event(settings.github_event_path)
    except (OSError, ValueError) as e:
        raise InvalidEventError(f"cannot read {settings.github_event_path}: {e}") from e


async def run() -> int:
    """한 번의 트리거 이벤트를 끝까지 처리하고 종료 코드 반환"""
    set_run_id(settings.github_run_id)

    try:
        missing = settings.validate_required()
        if missing:
            raise ConfigurationError(", ".join(missing))

        payload = _load_payload()
        logger.info(
            "PR 분석 시작 repo=%s event=%s",
            settings.github_repository,
            settings.github_event_name,
        )

        state = await run_review(settings.github_event_name, payload)

        if state.get("error_code"):
            message = state.get("error_message") or str(state["error_code"])
            logger.error("PR 분석 실패 error_code=%s message=%s", state["error_code"], message)
            _report_failure(message)
            return 1

        if state.get("session_ended"):
            logger.info("PR 종료 처리 완료, 에이전트 세션 종료")
        elif state.get("comment_body"):
            logger.info("PR 분석 완료 comment=%s", state.get("comment_url", ""))
        else:
            logger.info("PR 분석 건너뜀, 코멘트 없음")
        return 0

    except CustomException as e:
        logger.error("PR 분석 실패 error_code=%s message=%s", e.error_code, e)
        _report_failure(str(e))
        return 1

    except Exception as e:
        logger.error("예상치 못한 오류 error=%s", e, exc_info=True)
        _report_failure(f"Unexpected error: {e}")
        return 1

    finally:
        await close_github_client()
        clear_context()


def main() -> None:
    setup_logging()
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
