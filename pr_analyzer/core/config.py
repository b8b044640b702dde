from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ACTION_PROMPT = (
    "Review the changes in this pull request. Point out bugs, security issues and "
    "missing tests, and suggest concrete improvements."
)

DEFAULT_LEDGER_AUTHOR = "github-actions[bot]"


def _input(name: str) -> AliasChoices:
    """GitHub Action 입력(INPUT_*)과 로컬 실행용 이름을 모두 허용"""
    return AliasChoices(f"INPUT_{name}", name)


class Settings(BaseSettings):
    """애플리케이션 설정"""

    environment: str = "development"

    # Bedrock Agent 설정
    agent_id: str = Field(default="", validation_alias=_input("AGENT_ID"))
    agent_alias_id: str = Field(default="", validation_alias=_input("AGENT_ALIAS_ID"))
    memory_id: str = Field(default="", validation_alias=_input("MEMORY_ID"))
    knowledge_base_results: int = Field(
        default=5, ge=1, le=100, validation_alias=_input("KNOWLEDGE_BASE_RESULTS")
    )
    aws_region: str = Field(default="", validation_alias=AliasChoices("AWS_REGION"))
    agent_timeout: float = 300.0

    # 분석 설정
    action_prompt: str = Field(
        default=DEFAULT_ACTION_PROMPT, validation_alias=_input("ACTION_PROMPT")
    )
    ignore_patterns: str = Field(default="", validation_alias=_input("IGNORE_PATTERNS"))
    ignore_file: str = Field(
        default=".pranalyzerignore", validation_alias=_input("IGNORE_FILE")
    )
    max_prompt_length: int = Field(
        default=25000, ge=1000, validation_alias=_input("MAX_PROMPT_LENGTH")
    )
    # GITHUB_TOKEN으로 작성한 코멘트의 작성자, 비우면 모든 작성자의 코멘트 확인
    ledger_author: str = Field(
        default=DEFAULT_LEDGER_AUTHOR, validation_alias=_input("LEDGER_AUTHOR")
    )
    debug: bool = Field(default=False, validation_alias=_input("DEBUG"))

    # GitHub 실행 환경
    github_token: str = Field(default="", validation_alias=AliasChoices("GITHUB_TOKEN"))
    github_repository: str = Field(
        default="", validation_alias=AliasChoices("GITHUB_REPOSITORY")
    )
    github_event_name: str = Field(
        default="", validation_alias=AliasChoices("GITHUB_EVENT_NAME")
    )
    github_event_path: str = Field(
        default="", validation_alias=AliasChoices("GITHUB_EVENT_PATH")
    )
    github_run_id: str = Field(default="", validation_alias=AliasChoices("GITHUB_RUN_ID"))
    github_api_url: str = Field(
        default="https://api.github.com", validation_alias=AliasChoices("GITHUB_API_URL")
    )

    # Timeout 설정
    github_timeout: float = 60.0

    # 동시 요청 제한
    github_max_concurrent_requests: int = 5

    # 로깅 설정
    log_level: str = "INFO"

    # Langfuse 설정
    langfuse_public_key: str = ""
    langfuse_secret_key: str = ""
    langfuse_base_url: str = "https://cloud.langfuse.com"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("debug", mode="before")
    @classmethod
    def empty_debug_is_false(cls, value):
        """입력이 비어 있으면 False로 처리"""
        if isinstance(value, str) and not value.strip():
            return False
        return value

    @field_validator("knowledge_base_results", "max_prompt_length", mode="before")
    @classmethod
    def empty_int_is_default(cls, value, info):
        """빈 입력은 기본값으로 처리"""
        if isinstance(value, str) and not value.strip():
            return cls.model_fields[info.field_name].default
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level

    def validate_required(self) -> list[str]:
        """실행에 필요한 설정 검증 후 누락된 항목 반환"""
        errors = []
        if not self.agent_id:
            errors.append("INPUT_AGENT_ID")
        if not self.agent_alias_id:
            errors.append("INPUT_AGENT_ALIAS_ID")
        if not self.github_token:
            errors.append("GITHUB_TOKEN")
        if not self.github_repository:
            errors.append("GITHUB_REPOSITORY")
        if not self.github_event_path:
            errors.append("GITHUB_EVENT_PATH")
        return errors


settings = Settings()
