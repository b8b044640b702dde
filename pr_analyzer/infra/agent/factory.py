from pr_analyzer.core.config import settings
from pr_analyzer.core.logging import get_logger
from pr_analyzer.infra.agent.base import BaseAgentClient
from pr_analyzer.infra.agent.bedrock_client import BedrockAgentClient

logger = get_logger(__name__)

_agent_client: BaseAgentClient | None = None


def get_agent_client() -> BaseAgentClient:
    """분석 에이전트 클라이언트 반환"""
    global _agent_client

    if _agent_client is not None:
        return _agent_client

    _agent_client = BedrockAgentClient()
    logger.info("Bedrock 에이전트 클라이언트 초기화 region=%s", settings.aws_region or "default")

    return _agent_client


def reset_client() -> None:
    """클라이언트 캐시 초기화 - 테스트용"""
    global _agent_client
    _agent_client = None
