from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Process-wide configuration loaded once at startup from environment variables
    (or a local .env file).
    """
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    project_name: str = "j_user_svc"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "sqlite:///./users.db"

    # Token signing
    jwt_secret: str = "change-me-to-a-long-random-signing-key"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # bcrypt work factor
    bcrypt_rounds: int = 10

    host: str = "0.0.0.0"
    port: int = 3000


@lru_cache
def get_settings() -> Settings:
    return Settings()
