from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")

    progress_every: int = Field(
        default=10,
        ge=1,
        validation_alias="PROGRESS_EVERY",
        description="Emit a generating progress event after every N commits",
    )
    default_branch: str = Field(
        default="main",
        validation_alias="DEFAULT_BRANCH",
        description="Branch used when the working copy has no resolvable current branch",
    )
    remote_url_template: str = Field(
        default="https://github.com/{username}/{repo}.git",
        validation_alias="REMOTE_URL_TEMPLATE",
    )
    tracked_file: str = Field(default="README.md", validation_alias="TRACKED_FILE")
    clone_depth: int = Field(default=1, ge=1, validation_alias="CLONE_DEPTH")
    commit_email_domain: str = Field(
        default="users.noreply.github.com",
        validation_alias="COMMIT_EMAIL_DOMAIN",
    )
    work_root: str | None = Field(
        default=None,
        validation_alias="WORK_ROOT",
        description="Parent directory for temporary working copies (system temp dir if unset)",
    )
    status_file: str | None = Field(
        default=None,
        validation_alias="STATUS_FILE",
        description="Optional JSON file mirroring the latest job status",
    )
    status_max_runs: int = Field(default=32, ge=1, validation_alias="STATUS_MAX_RUNS")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("remote_url_template")
    @classmethod
    def validate_remote_url_template(cls, value: str) -> str:
        """Validate that the remote template names both placeholders."""
        if "{username}" not in value or "{repo}" not in value:
            raise ValueError("REMOTE_URL_TEMPLATE must contain {username} and {repo} placeholders")
        return value


settings = Settings()
