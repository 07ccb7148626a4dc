# groupchat/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    PROJECT_NAME: str = "Group Chat API"
    PROJECT_VERSION: str = "1.0.0"
    PROJECT_DESCRIPTION: str = "A FastAPI-based anonymous group chat service"
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0

    ADMIN_USER_IDS: list[str] = []
    GROUP_CHAT_CAPACITY: int = 5
    TRANSITION_SETTLE_DELAY_SECONDS: float = 0.5
    PRESERVE_RANKINGS_ON_TRANSITION: bool = True
    JOIN_MAX_RETRIES: int = 5
    RANDOM_SEED: int | None = None

    model_config = SettingsConfigDict(env_file=".env", extra="allow")
