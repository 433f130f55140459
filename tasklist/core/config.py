from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    cookie_secret: str

    session_ttl_minutes: int = 60 * 24 * 7
    cookie_secure: bool = True

    # 12 раундов bcrypt для продакшена, в тестах можно понизить до 4
    bcrypt_rounds: int = 12

    view_cache_max_entries: int = 1024

    create_schema: bool = True
    sql_echo: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)


@lru_cache
def get_settings() -> Settings:
    """Настройки процесса, создаются один раз"""
    return Settings()
