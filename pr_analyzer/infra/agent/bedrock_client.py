import asyncio

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from pr_analyzer.core.config import settings
from pr_analyzer.core.exceptions import AgentError
from pr_analyzer.core.logging import get_logger
from pr_analyzer.infra.agent.base import BaseAgentClient

logger = get_logger(__name__)

KNOWLEDGE_BASE_ENABLED = "ENABLED"
SEARCH_TYPE = "SEMANTIC"


class BedrockAgentClient(BaseAgentClient):
    """AWS Bedrock Agents 클라이언트"""

    def __init__(self, runtime_client=None, agent_client=None):
        config = Config(read_timeout=settings.agent_timeout, retries={"mode": "standard"})
        region = settings.aws_region or None

        self._runtime = runtime_client or boto3.client(
            "bedrock-agent-runtime", region_name=region, config=config
        )
        self._agent = agent_client or boto3.client(
            "bedrock-agent", region_name=region, config=config
        )

    def _get_agent_version(self, agent_id: str, agent_alias_id: str) -> str:
        """별칭이 라우팅하는 에이전트 버전 조회"""
        response = self._agent.get_agent_alias(agentId=agent_id, agentAliasId=agent_alias_id)

        routing = response.get("agentAlias", {}).get("routingConfiguration") or [{}]
        agent_version = routing[0].get("agentVersion")
        if not agent_version:
            raise AgentError(f"Agent version not found for alias {agent_alias_id}")

        logger.info("에이전트 버전 조회 완료 alias=%s version=%s", agent_alias_id, agent_version)
        return agent_version

    def _get_knowledge_bases(self, agent_id: str, agent_alias_id: str) -> list[str]:
        """에이전트에 연결된 활성 지식 베이스 ID 목록 조회"""
        agent_version = self._get_agent_version(agent_id, agent_alias_id)

        response = self._agent.list_agent_knowledge_bases(
            agentId=agent_id, agentVersion=agent_version
        )
        summaries = response.get("agentKnowledgeBaseSummaries", [])
        enabled = [
            kb["knowledgeBaseId"]
            for kb in summaries
            if kb.get("knowledgeBaseState") == KNOWLEDGE_BASE_ENABLED
        ]

        logger.info("지식 베이스 조회 완료 alias=%s enabled=%d", agent_alias_id, len(enabled))
        return enabled

    def _build_session_state(self, knowledge_bases: list[str]) -> dict | None:
        if not knowledge_bases:
            return None
        return {
            "knowledgeBaseConfigurations": [
                {
                    "knowledgeBaseId": kb_id,
                    "retrievalConfiguration": {
                        "vectorSearchConfiguration": {
                            "numberOfResults": settings.knowledge_base_results,
                            "overrideSearchType": SEARCH_TYPE,
                        }
                    },
                }
                for kb_id in knowledge_bases
            ]
        }

    @staticmethod
    def _read_completion(response: dict) -> str:
        """completion 이벤트 스트림의 청크를 이어 붙임"""
        stream = response.get("completion")
        if stream is None:
            raise AgentError("Completion is undefined in the response")

        parts = []
        for event in stream:
            chunk = event.get("chunk")
            if chunk and chunk.get("bytes"):
                parts.append(chunk["bytes"].decode("utf-8"))
        return "".join(parts)

    def _invoke_sync(
        self,
        agent_id: str,
        agent_alias_id: str,
        session_id: str,
        prompt: str,
        memory_id: str | None,
    ) -> str:
        knowledge_bases = self._get_knowledge_bases(agent_id, agent_alias_id)

        params = {
            "agentId": agent_id,
            "agentAliasId": agent_alias_id,
            "sessionId": session_id,
            "inputText": prompt,
        }
        if memory_id:
            params["memoryId"] = memory_id
        session_state = self._build_session_state(knowledge_bases)
        if session_state:
            params["sessionState"] = session_state

        logger.debug(
            "에이전트 호출 session_id=%s prompt_length=%d knowledge_bases=%d",
            session_id,
            len(prompt),
            len(knowledge_bases),
        )
        response = self._runtime.invoke_agent(**params)
        completion = self._read_completion(response)

        if not completion.strip():
            raise AgentError("Agent returned an empty completion")
        return completion

    def _end_session_sync(
        self,
        agent_id: str,
        agent_alias_id: str,
        session_id: str,
        memory_id: str | None,
    ) -> None:
        params = {
            "agentId": agent_id,
            "agentAliasId": agent_alias_id,
            "sessionId": session_id,
            "endSession": True,
        }
        if memory_id:
            params["memoryId"] = memory_id

        response = self._runtime.invoke_agent(**params)
        # 스트림을 끝까지 읽어야 요청이 완료됨
        self._read_completion(response)

    async def invoke_agent(
        self,
        agent_id: str,
        agent_alias_id: str,
        session_id: str,
        prompt: str,
        memory_id: str | None = None,
    ) -> str:
        """Bedrock 에이전트 호출 후 응답 텍스트 반환

        Raises:
            AgentError: 호출 실패 또는 빈 응답
        """
        try:
            completion = await asyncio.to_thread(
                self._invoke_sync, agent_id, agent_alias_id, session_id, prompt, memory_id
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("에이전트 호출 실패 agent_id=%s error=%s", agent_id, e)
            raise AgentError(str(e)) from e

        logger.info("에이전트 응답 수신 session_id=%s length=%d", session_id, len(completion))
        return completion

    async def end_session(
        self,
        agent_id: str,
        agent_alias_id: str,
        session_id: str,
        memory_id: str | None = None,
    ) -> None:
        """Bedrock 에이전트 세션 종료

        Raises:
            AgentError: 호출 실패
        """
        try:
            await asyncio.to_thread(
                self._end_session_sync, agent_id, agent_alias_id, session_id, memory_id
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("세션 종료 실패 agent_id=%s error=%s", agent_id, e)
            raise AgentError(str(e)) from e

        logger.info("에이전트 세션 종료 session_id=%s", session_id)
