"""
Централизованная конфигурация клиента
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings

from .constants import (
    DEFAULT_API_TIMEOUT,
    DEFAULT_AUTH_ERROR_MARKERS,
    DEFAULT_EXPIRY_BUFFER_SECONDS,
    DEFAULT_STORAGE_FILENAME,
)
from .models import CredentialMode


class Settings(BaseSettings):
    """Настройки клиента с валидацией через Pydantic"""

    # Backend
    api_url: str = "http://localhost:8080/exec"
    request_timeout: int = DEFAULT_API_TIMEOUT

    # Авторизация
    credential_mode: CredentialMode = CredentialMode.TOKEN_WITH_EXPIRY
    shared_secret: Optional[str] = None
    token_expiry_buffer: int = DEFAULT_EXPIRY_BUFFER_SECONDS
    auth_error_markers: List[str] = list(DEFAULT_AUTH_ERROR_MARKERS)

    # LocalStorage
    storage_path: Path = Path.home() / ".workout_client" / DEFAULT_STORAGE_FILENAME

    # Логирование
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: Optional[str] = None

    class Config:
        env_prefix = "WORKOUT_"
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Возвращает синглтон настроек"""
    return Settings()
