"""Клиент backend трекера тренировок."""

from .api_client import APIClient
from .app import create_client
from .config import Settings, get_settings
from .models import AuthPayload, CredentialMode, SessionState

__all__ = [
    "APIClient",
    "AuthPayload",
    "CredentialMode",
    "SessionState",
    "Settings",
    "create_client",
    "get_settings",
]
