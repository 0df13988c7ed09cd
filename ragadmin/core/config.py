from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path
from functools import lru_cache
import warnings


DEFAULT_API_URL = "https://api-ai-rag-o62iq.ondigitalocean.app"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RAGADMIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    environment: str = "production"
    log_level: str = "WARNING"

    # Backend
    api_url: str = DEFAULT_API_URL
    request_timeout: float = 30.0

    # Session persistence (auth_token / user)
    storage_path: Path = Path("~/.ragadmin/session.json")

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    def validate_production_settings(self) -> list[str]:
        """Validate settings for production use. Returns list of warnings."""
        issues = []

        if self.environment == "production":
            if self.api_url.startswith("http://"):
                issues.append(
                    "SECURITY: api_url uses plain http in production, bearer tokens "
                    "would travel unencrypted"
                )
            if self.log_level == "DEBUG":
                issues.append("WARNING: DEBUG logging enabled in production")

        return issues


@lru_cache()
def get_settings() -> Settings:
    instance = Settings()

    issues = instance.validate_production_settings()
    for issue in issues:
        warnings.warn(issue, RuntimeWarning)

    return instance
