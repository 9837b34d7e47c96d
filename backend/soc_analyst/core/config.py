from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "soc-analyst-backend"
    ENVIRONMENT: str = "local"
    LOG_LEVEL: str = "INFO"

    # Database
    POSTGRES_HOST: str = "db"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "soc_analyst"
    POSTGRES_USER: str = "soc_user"
    POSTGRES_PASSWORD: str = "soc_password"

    # Full SQLAlchemy URL; when set it wins over the POSTGRES_* parts
    # (e.g. sqlite:///./soc_analyst.sqlite for local runs)
    SQLALCHEMY_DATABASE_URI: str | None = None

    # OpenAI-compatible chat completions endpoint
    AI_INTEGRATIONS_OPENAI_BASE_URL: str | None = None
    AI_INTEGRATIONS_OPENAI_API_KEY: str | None = None
    AI_MODEL: str = "gpt-5"
    AI_REQUEST_TIMEOUT_SECONDS: float = 120.0

    # Completion budgets per conversation mode
    ANALYSIS_MAX_COMPLETION_TOKENS: int = 4096
    QUICK_MAX_COMPLETION_TOKENS: int = 2048

    # Upper bound on stored / returned assistant text
    AI_RESPONSE_MAX_LENGTH: int = 8000

    # Construct SQLAlchemy URL
    @property
    def DATABASE_URL(self) -> str:
        if self.SQLALCHEMY_DATABASE_URI:
            return self.SQLALCHEMY_DATABASE_URI
        return (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:"
            f"{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:"
            f"{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
