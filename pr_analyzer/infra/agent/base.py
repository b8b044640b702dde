from abc import ABC, abstractmethod


class BaseAgentClient(ABC):
    """대화형 분석 에이전트 클라이언트 추상 클래스"""

    @abstractmethod
    async def invoke_agent(
        self,
        agent_id: str,
        agent_alias_id: str,
        session_id: str,
        prompt: str,
        memory_id: str | None = None,
    ) -> str:
        """프롬프트를 세션에 전송하고 응답 텍스트 반환"""
        pass

    @abstractmethod
    async def end_session(
        self,
        agent_id: str,
        agent_alias_id: str,
        session_id: str,
        memory_id: str | None = None,
    ) -> None:
        """새 프롬프트 없이 세션 종료 신호 전송"""
        pass
