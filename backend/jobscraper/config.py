from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "jobscraper"

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Apify (LinkedIn jobs actor)
    apify_api_token: str = ""
    apify_actor_id: str = "BHzefUZlZRKWxkTck"
    apify_base_url: str = "https://api.apify.com/v2"
    apify_timeout_seconds: float = 120.0
    apify_wait_for_finish_seconds: int = 60  # Apify caps a single wait at 60s

    # Search history
    history_default_limit: int = 20
    stale_pending_minutes: int = 30  # pending requests older than this are failed at startup

    # Client
    api_url: str = "http://localhost:3000/api"
    client_state_path: str = "./.jobscraper/client-state.json"
    client_guard_stale_minutes: int = 5

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
