"""
Core модуль: сессия, хранилище, авторизация, ошибки и логирование
"""

from .credentials import (
    CredentialStrategy,
    SharedSecretStrategy,
    TokenStrategy,
    TokenWithExpiryStrategy,
    build_strategy,
)
from .events import LogoutNotifier
from .exceptions import (
    ClientError,
    ConfigurationError,
    NotAuthenticatedError,
    RemoteError,
    ReservedParameterError,
    TransportError,
)
from .logging_config import get_logger, setup_logging
from .session import SessionStore
from .storage import JSONFileStorage, KeyValueStorage, MemoryStorage

__all__ = [
    # Credentials
    "CredentialStrategy",
    "SharedSecretStrategy",
    "TokenStrategy",
    "TokenWithExpiryStrategy",
    "build_strategy",
    # Events
    "LogoutNotifier",
    # Exceptions
    "ClientError",
    "ConfigurationError",
    "NotAuthenticatedError",
    "RemoteError",
    "ReservedParameterError",
    "TransportError",
    # Logging
    "setup_logging",
    "get_logger",
    # Session
    "SessionStore",
    # Storage
    "KeyValueStorage",
    "MemoryStorage",
    "JSONFileStorage",
]
