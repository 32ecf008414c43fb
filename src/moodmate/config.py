from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str  # mongodb://host:port/dbname
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 9000
    debug: bool = False
    cors_origins: list[str] = []
    ml_api_url: str = "http://127.0.0.1:8000"  # Base URL of the mood-prediction service
    ml_api_timeout: float = 30.0  # Seconds
    session_ttl_days: int | None = None  # None keeps sessions until logout
    password_min_length: int = 6
    password_max_length: int = 100

    model_config = {
        "env_file": [".env"],
        "env_prefix": "MOODMATE_",
        "extra": "ignore",
    }
