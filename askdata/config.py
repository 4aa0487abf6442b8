"""Configuration management for the askdata query service"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Service Configuration
    SERVICE_HOST: str = "0.0.0.0"
    SERVICE_PORT: int = 8000
    SERVICE_NAME: str = "Askdata Query Service"

    # PostgreSQL Configuration
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "askdata_reader"
    DB_PASSWORD: str = ""
    DB_NAME: str = "askdata"
    DB_STATEMENT_TIMEOUT_MS: int = 30000

    # Ollama Configuration
    OLLAMA_HOST: str = "http://localhost:11434"
    OLLAMA_SQL_MODEL: str = "llama3.1:70b"
    OLLAMA_CHART_MODEL: str = "llama3.1:8b"
    OLLAMA_TIMEOUT: int = 120
    OLLAMA_TEMPERATURE: float = 0.1

    # Pipeline Configuration
    DEFAULT_TABLE: str = "placements"
    CHART_PROMPT_MAX_ROWS: int = 100  # rows shown to the model for chart synthesis
    CHART_MAX_CATEGORICAL_ROWS: int = 20  # bar/pie legibility cap
    SQL_GUARD_SINGLE_STATEMENT: bool = False

    # Logging Configuration
    LOG_LEVEL: str = "INFO"

    @property
    def DATABASE_URL(self) -> str:
        """Construct database URL"""
        return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
