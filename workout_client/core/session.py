"""Хранилище сессии: токен, профиль пользователя и срок действия."""

import json
import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Union

from ..constants import (
    DEFAULT_EXPIRY_BUFFER_SECONDS,
    STORAGE_AUTH_TOKEN_KEY,
    STORAGE_AUTH_USER_KEY,
    STORAGE_TOKEN_EXPIRES_AT_KEY,
)
from ..models import SessionState
from ..timestamps import format_timestamp, parse_timestamp
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """
    Единственный источник правды о том, кто авторизован и до какого момента.

    Состояние живёт в памяти и дублируется в хранилище, чтобы
    пережить перезапуск. Запись в хранилище аддитивная: поле, не
    переданное в set_session, не затирает ранее сохранённое значение.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        clock: Clock = utc_now,
        default_buffer_seconds: int = DEFAULT_EXPIRY_BUFFER_SECONDS,
    ) -> None:
        """
        Args:
            storage: Постоянное хранилище (аналог localStorage)
            clock: Источник текущего времени (UTC)
            default_buffer_seconds: Запас до истечения токена, после которого он считается истёкшим
        """
        self.storage = storage
        self.clock = clock
        self.default_buffer_seconds = default_buffer_seconds
        self._state = SessionState()
        self._expires_at_raw: Optional[str] = None

    def init(self) -> None:
        """Загрузить токен, профиль и срок действия из хранилища."""
        token = self.storage.get_item(STORAGE_AUTH_TOKEN_KEY)
        expires_raw = self.storage.get_item(STORAGE_TOKEN_EXPIRES_AT_KEY)
        user_raw = self.storage.get_item(STORAGE_AUTH_USER_KEY)

        user: Optional[Any] = None
        if user_raw:
            try:
                user = json.loads(user_raw)
            except json.JSONDecodeError:
                logger.warning("Stored user profile is not valid JSON, ignoring it")
                user = None

        expires_at: Optional[datetime] = None
        if expires_raw:
            try:
                expires_at = parse_timestamp(expires_raw)
            except ValueError:
                logger.warning(f"Stored token expiry {expires_raw!r} is malformed, starting with empty session")
                self._state = SessionState()
                self._expires_at_raw = None
                return

        self._state = SessionState(token=token or None, user=user, expires_at=expires_at)
        self._expires_at_raw = expires_raw if expires_at else None
        logger.info(
            f"Session loaded: token={'EXISTS' if self._state.token else 'NOT FOUND'}, "
            f"expires_at={self._expires_at_raw}"
        )

    @property
    def state(self) -> SessionState:
        """Копия текущего состояния"""
        return self._state.model_copy()

    @property
    def token(self) -> Optional[str]:
        return self._state.token

    @property
    def user(self) -> Optional[Any]:
        return self._state.user

    @property
    def expires_at(self) -> Optional[datetime]:
        return self._state.expires_at

    def get_current_user(self) -> Optional[Any]:
        return self._state.user

    def get_token_expiration(self) -> Optional[str]:
        """Время истечения токена (ISO строка, как сохранена)"""
        return self._expires_at_raw

    def is_token_expired(self, buffer_seconds: Optional[int] = None) -> bool:
        """
        Проверить, истёк ли токен.

        Args:
            buffer_seconds: Запас в секундах до истечения (по умолчанию 5 минут)

        Returns:
            True если до истечения осталось меньше buffer_seconds.
            Сессия без срока действия никогда не истекает на стороне клиента.
        """
        if self._state.expires_at is None:
            return False
        if buffer_seconds is None:
            buffer_seconds = self.default_buffer_seconds
        remaining = (self._state.expires_at - self.clock()).total_seconds()
        return remaining <= buffer_seconds

    def is_authenticated(self, buffer_seconds: Optional[int] = None) -> bool:
        """Авторизован ли пользователь (учитывает срок жизни токена)"""
        return bool(self._state.token) and not self.is_token_expired(buffer_seconds)

    def time_left(self) -> int:
        """Оставшееся время жизни токена в секундах (0 если срока нет или он прошёл)"""
        if self._state.expires_at is None:
            return 0
        remaining = (self._state.expires_at - self.clock()).total_seconds()
        return max(0, math.floor(remaining))

    def set_session(
        self,
        token: str,
        user: Optional[Any] = None,
        expires_at: Optional[Union[str, datetime]] = None,
    ) -> None:
        """
        Установить новую сессию.

        Args:
            token: Токен авторизации
            user: Профиль пользователя
            expires_at: Время истечения (ISO 8601 строка или datetime)

        Raises:
            ValueError: Если expires_at не является ISO 8601 датой
        """
        expires_raw = format_timestamp(expires_at) if expires_at else None
        parsed = parse_timestamp(expires_raw) if expires_raw else None

        self._state = SessionState(token=token, user=user, expires_at=parsed)
        self._expires_at_raw = expires_raw

        self.storage.set_item(STORAGE_AUTH_TOKEN_KEY, token)
        if user is not None:
            self.storage.set_item(STORAGE_AUTH_USER_KEY, json.dumps(user, ensure_ascii=False))
        if expires_raw:
            self.storage.set_item(STORAGE_TOKEN_EXPIRES_AT_KEY, expires_raw)

        logger.info(f"Session set, expires_at={expires_raw}")

    def clear_session(self) -> None:
        """Очистить токен, профиль и срок действия (выход)."""
        self._state = SessionState()
        self._expires_at_raw = None
        self.storage.remove_item(STORAGE_AUTH_TOKEN_KEY)
        self.storage.remove_item(STORAGE_AUTH_USER_KEY)
        self.storage.remove_item(STORAGE_TOKEN_EXPIRES_AT_KEY)
        logger.info("Session cleared")
