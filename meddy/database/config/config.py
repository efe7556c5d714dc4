from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables
    or a `.env` file. Provides strongly typed access to environment values.
    """

    API_KEY: str = ""
    """OpenAI API key used by the chat models."""

    MISTRAL_API_KEY: str = ""
    """API key for Mistral's OpenAI-compatible endpoint."""

    MISTRAL_BASE_URL: str = "https://api.mistral.ai/v1"
    """Base URL of Mistral's OpenAI-compatible API."""

    HUGGINGFACE_API_KEY: str = ""
    """Token for the HuggingFace inference API (MedLLaMA diagnosis model)."""

    MEDLLAMA_URL: str = "https://api-inference.huggingface.co/models/ProbeMedicalYonseiMAILab/medllama3-v20"
    """Inference endpoint of the MedLLaMA diagnosis model."""

    WEATHER_URL: str = "https://api.open-meteo.com/v1/forecast"
    """Open-Meteo forecast endpoint used by the weather tool."""

    FRONTEND_URL: str = "http://localhost:3000"
    """Base URL of the frontend client application."""

    DB_USERNAME: str = "postgres"
    """Database username credential."""

    DB_PASSWORD: str = "postgres"
    """Database password credential."""

    DB_HOST: str = "localhost:5432"
    """Hostname (and optional port) of the database server."""

    DB_DATABASE_NAME: str = "meddy"
    """Name of the application’s database."""

    DB_DRIVER_NAME: str = "postgresql+psycopg2"
    """Database driver (e.g., `postgresql+psycopg2`, `sqlite`)."""

    DATABASE_URL: str | None = None
    """Full SQLAlchemy URL; overrides the `DB_*` parts when set."""

    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    """Duration (in minutes) before access tokens expire."""

    SECRET_KEY: str = "change-me"
    """Secret key used for signing session tokens."""

    ALGORITHM: str = "HS256"
    """Cryptographic algorithm used for JWT signing (e.g., `HS256`)."""

    COOKIE_SECURE: bool = False
    """Whether the session cookie is flagged `Secure` (True in production)."""

    INIT_MODE: str = "dev"
    """Initialization mode (`dev`, `prod`, `test`). Tables are created at start-up outside `prod`."""

    APP_DEBUG: bool = True
    """Verbose (DEBUG) console logging."""

    LOG_DIR: str = "logs"
    """Directory holding the rotating log files."""

    LOG_TO_FILE: bool = True
    """Write `app.log` / `errors.log` in addition to the console."""

    LOG_MAX_BYTES: int = 10 * 1024 * 1024
    """Size at which a log file is rotated."""

    LOG_BACKUP_COUNT: int = 5
    """Rotated files kept per log."""

    MAX_STEPS: int = 5
    """Maximum number of model steps (tool round-trips) in one chat turn."""

    TITLE_MODEL: str = "gpt-4o-mini"
    """API identifier of the model that titles new chats."""

    class Config:
        """
        Configuration for Pydantic settings. Loads values from `.env` file by default.
        """
        env_file = ".env"

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL built from `DATABASE_URL` or the individual `DB_*` values."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"{self.DB_DRIVER_NAME}://{self.DB_USERNAME}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}/{self.DB_DATABASE_NAME}"
        )


# Singleton instance of Settings, ready to be imported across the app
settings = Settings()
"""Defines a Settings object that contains the contents of the .env file"""
