"""Сборка клиента из настроек."""

import logging
from typing import Optional

import requests

from .api_client import APIClient
from .config import Settings, get_settings
from .core.credentials import build_strategy
from .core.events import LogoutNotifier
from .core.logging_config import setup_logging
from .core.session import SessionStore
from .core.storage import JSONFileStorage, KeyValueStorage
from .models import CredentialMode

logger = logging.getLogger(__name__)


def create_client(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorage] = None,
    notifier: Optional[LogoutNotifier] = None,
    http: Optional[requests.Session] = None,
    configure_logging: bool = False,
) -> APIClient:
    """
    Создать клиент и загрузить сохранённую сессию.

    Args:
        settings: Настройки (по умолчанию из окружения)
        storage: Хранилище сессии (по умолчанию JSON файл из настроек)
        notifier: Канал сигнала logout
        http: HTTP сессия requests
        configure_logging: Настроить корневой логгер по настройкам

    Returns:
        Готовый к работе клиент
    """
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(level=settings.log_level, json_logs=settings.json_logs, log_file=settings.log_file)

    session: Optional[SessionStore] = None
    if CredentialMode(settings.credential_mode) is not CredentialMode.SHARED_SECRET:
        session = SessionStore(
            storage or JSONFileStorage(settings.storage_path),
            default_buffer_seconds=settings.token_expiry_buffer,
        )
        session.init()

    strategy = build_strategy(settings, session)
    logger.info(f"Client created for {settings.api_url}")
    return APIClient(
        strategy=strategy,
        session=session,
        notifier=notifier,
        base_url=settings.api_url,
        timeout=settings.request_timeout,
        http=http,
    )
