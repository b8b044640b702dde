from enum import Enum


class ErrorCode(str, Enum):
    """에러 코드 열거형"""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INVALID_EVENT = "INVALID_EVENT"
    GITHUB_API_ERROR = "GITHUB_API_ERROR"
    AGENT_ERROR = "AGENT_ERROR"
    DATA_PARSE_ERROR = "DATA_PARSE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CustomException(Exception):
    def __init__(
        self,
        error_code: ErrorCode | str,
        message: str,
        detail: str | None = None,
    ):
        self.error_code = error_code
        self.message = message
        self.detail = detail
        super().__init__(message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class ConfigurationError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            error_code=ErrorCode.CONFIGURATION_ERROR,
            message="Missing required configuration",
            detail=detail,
        )


class InvalidEventError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            error_code=ErrorCode.INVALID_EVENT,
            message="Unsupported or unreadable pull request event",
            detail=detail,
        )


class GitHubAPIError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            error_code=ErrorCode.GITHUB_API_ERROR,
            message="GitHub API request failed",
            detail=detail,
        )


class AgentError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            error_code=ErrorCode.AGENT_ERROR,
            message="Failed to invoke Bedrock agent",
            detail=detail,
        )
