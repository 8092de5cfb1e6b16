from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OPENAI_API_KEY: str | None = None

    OPENAI_MODEL_STRUCTURE: str = "gpt-4o-mini"
    OPENAI_MODEL_ANALYZE: str = "gpt-4o-mini"

    OPENAI_TEMPERATURE_STRUCTURE: float = 0.0
    OPENAI_TEMPERATURE_ANALYZE: float = 0.4
    OPENAI_MAX_TOKENS: int = 1800

    ANALYSIS_TIMEOUT_SECONDS: float = 90.0
    RESET_DELAY_SECONDS: float = 1.0
    MAX_IMAGE_BYTES: int = 10 * 1024 * 1024

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"


settings = Settings()
