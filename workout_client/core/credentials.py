"""
Стратегии авторизации запросов.

Backend развёрнут в одном из трёх режимов: токен со сроком действия,
токен без срока (выдаётся вне клиента) и общий секрет без понятия
пользователя. Стратегия отвечает за параметр авторизации в запросе,
проверку его наличия и распознавание ошибок авторизации.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence, TYPE_CHECKING

from ..constants import (
    AUTH_REQUIRED_MESSAGE,
    DEFAULT_AUTH_ERROR_MARKERS,
    MSG_NOT_AUTHENTICATED,
    PARAM_KEY,
    PARAM_TOKEN,
)
from ..models import CredentialMode
from .exceptions import ConfigurationError, NotAuthenticatedError
from .session import SessionStore

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)


class CredentialStrategy(ABC):
    """Способ авторизовать запрос к backend."""

    mode: CredentialMode
    param_name: str
    requires_session: bool = True
    tracks_expiry: bool = False

    @abstractmethod
    def credential(self) -> Optional[str]:
        """Текущее значение параметра авторизации"""

    def ensure_ready(self) -> str:
        """
        Проверить, что запрос можно авторизовать.

        Raises:
            NotAuthenticatedError: Если учётных данных нет
        """
        value = self.credential()
        if not value:
            raise NotAuthenticatedError(MSG_NOT_AUTHENTICATED)
        return value

    @abstractmethod
    def is_auth_error(self, message: str) -> bool:
        """Является ли текст ошибки backend ошибкой авторизации"""


class TokenStrategy(CredentialStrategy):
    """Токен без срока действия: истечение контролирует только backend."""

    mode = CredentialMode.TOKEN
    param_name = PARAM_TOKEN

    def __init__(
        self,
        session: SessionStore,
        auth_error_markers: Iterable[str] = DEFAULT_AUTH_ERROR_MARKERS,
    ) -> None:
        self.session = session
        self.auth_error_markers: Sequence[str] = tuple(auth_error_markers)

    def credential(self) -> Optional[str]:
        return self.session.token

    def is_auth_error(self, message: str) -> bool:
        # TODO: перейти на код ошибки, когда backend начнёт его отдавать
        if message == AUTH_REQUIRED_MESSAGE:
            return True
        return any(marker in message for marker in self.auth_error_markers)


class TokenWithExpiryStrategy(TokenStrategy):
    """Токен, выданный при login/register, со сроком действия."""

    mode = CredentialMode.TOKEN_WITH_EXPIRY
    tracks_expiry = True


class SharedSecretStrategy(CredentialStrategy):
    """Общий секрет, одинаковый для всех запросов. Сессии нет."""

    mode = CredentialMode.SHARED_SECRET
    param_name = PARAM_KEY
    requires_session = False

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ConfigurationError("Shared secret mode requires a non-empty secret")
        self._secret = secret

    def credential(self) -> Optional[str]:
        return self._secret

    def is_auth_error(self, message: str) -> bool:
        return False


def build_strategy(
    settings: "Settings",
    session: Optional[SessionStore] = None,
) -> CredentialStrategy:
    """
    Выбрать стратегию по настройкам.

    Args:
        settings: Настройки клиента
        session: Хранилище сессии (нужно для режимов с токеном)

    Raises:
        ConfigurationError: Если для режима не хватает данных
    """
    mode = CredentialMode(settings.credential_mode)
    logger.info(f"Using credential mode: {mode.value}")

    if mode is CredentialMode.SHARED_SECRET:
        return SharedSecretStrategy(settings.shared_secret or "")

    if session is None:
        raise ConfigurationError(f"Credential mode '{mode.value}' requires a session store")

    if mode is CredentialMode.TOKEN:
        return TokenStrategy(session, settings.auth_error_markers)
    return TokenWithExpiryStrategy(session, settings.auth_error_markers)
