"""
Configuration management using Pydantic settings.
"""
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    # API Configuration
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "CogniQuest"
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    PORT: int = 3001

    # Database Configuration
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_NAME: str = "cogniquest"
    DATABASE_URL: str = ""
    DB_POOL_SIZE: int = 10

    # Lesson documents can be large
    MAX_BODY_SIZE: int = 10 * 1024 * 1024  # 10MB

    # Owner of lessons saved without an explicit user
    DEFAULT_USER_ID: int = 1
    DEFAULT_USERNAME: str = "Captain"

    # LLMs Configuration (any OpenAI-compatible endpoint)
    DEEPSEEK_API_KEY: str = ""
    LLM_BASE_URL: str = "https://api.deepseek.com/v1"
    LLM_MODEL: str = "deepseek-chat"
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 3000

    # LangSmith Tracing Configuration
    LANGSMITH_TRACING: bool = False
    LANGSMITH_ENDPOINT: str = ""
    LANGSMITH_API_KEY: str = ""
    LANGSMITH_PROJECT: str = ""

    # CORS Configuration
    BACKEND_CORS_ORIGINS: str = "*"

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def cors_origins(self) -> List[str]:
        """Comma separated BACKEND_CORS_ORIGINS as a list ("*" allows all)."""
        v = self.BACKEND_CORS_ORIGINS.strip()
        if not v or v == "*":
            return ["*"]
        return [i.strip() for i in v.split(",") if i.strip()]

    @property
    def database_url(self) -> str:
        """DATABASE_URL if set, otherwise a PostgreSQL URL built from the DB_* parts."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def llm_configured(self) -> bool:
        key = self.DEEPSEEK_API_KEY
        return bool(key) and "placeholder" not in key

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


settings = Settings()
