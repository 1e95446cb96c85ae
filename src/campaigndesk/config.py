from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str  # MongoDB URL including the database name, e.g. mongodb://localhost/campaigndesk
    host: str
    port: int
    debug: bool
    cors_origins: list[str] = []

    model_config = {
        "env_file": [".env"],
        "env_prefix": "CAMPAIGNDESK_",
        "extra": "ignore",
    }
