"""
Исключения клиента
"""

from typing import Any, Dict, Optional


class ClientError(Exception):
    """Базовое исключение клиента"""

    error_code: str = "CLIENT_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация исключения в словарь"""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class NotAuthenticatedError(ClientError):
    """Запрос требует токен, а его нет"""

    error_code = "NOT_AUTHENTICATED"


class RemoteError(ClientError):
    """Backend вернул структурированную ошибку {"error": "..."}"""

    error_code = "REMOTE_ERROR"

    def __init__(
        self,
        message: str,
        action: Optional[str] = None,
        auth_failure: bool = False,
    ):
        super().__init__(
            message=message,
            details={"action": action, "auth_failure": auth_failure},
        )
        self.action = action
        self.auth_failure = auth_failure


class TransportError(ClientError):
    """Сетевая ошибка или ответ, который не удалось разобрать"""

    error_code = "TRANSPORT_ERROR"

    def __init__(self, message: str, action: Optional[str] = None):
        super().__init__(message=message, details={"action": action})
        self.action = action


class ReservedParameterError(ClientError):
    """Параметр запроса совпадает со служебным полем"""

    error_code = "RESERVED_PARAMETER"

    def __init__(self, name: str, action: str):
        super().__init__(
            message=f"Parameter '{name}' is reserved and cannot be passed to '{action}'",
            details={"parameter": name, "action": action},
        )


class ConfigurationError(ClientError):
    """Операция недоступна в текущем режиме или настройки некорректны"""

    error_code = "CONFIGURATION_ERROR"
