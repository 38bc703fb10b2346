"""Модели данных клиента."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .timestamps import parse_timestamp


class CredentialMode(str, Enum):
    """Режим авторизации запросов к backend"""
    TOKEN_WITH_EXPIRY = "token_with_expiry"
    TOKEN = "token"
    SHARED_SECRET = "shared_secret"


class SessionState(BaseModel):
    """Состояние сессии пользователя"""
    token: Optional[str] = None
    user: Optional[Any] = None
    expires_at: Optional[datetime] = None


class AuthPayload(BaseModel):
    """
    Успешный ответ на login/register.

    Attributes:
        token: Токен, выданный backend
        user: Профиль пользователя (не интерпретируется клиентом)
        expires_at: Время истечения токена в формате ISO 8601
    """

    token: str = Field(..., min_length=1)
    user: Optional[Any] = None
    expires_at: Optional[str] = None

    model_config = {"extra": "allow"}

    @field_validator("expires_at")
    @classmethod
    def validate_expires_at(cls, v: Optional[str]) -> Optional[str]:
        """
        Проверка, что срок действия является ISO 8601 датой.

        Raises:
            ValueError: Если строку не удалось разобрать
        """
        if v:
            parse_timestamp(v)
        return v
