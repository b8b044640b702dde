from pr_analyzer.infra.agent.base import BaseAgentClient
from pr_analyzer.infra.agent.bedrock_client import BedrockAgentClient
from pr_analyzer.infra.agent.factory import get_agent_client, reset_client

__all__ = [
    "BaseAgentClient",
    "BedrockAgentClient",
    "get_agent_client",
    "reset_client",
]
