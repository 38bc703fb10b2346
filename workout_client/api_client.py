"""Шлюз к backend трекера тренировок."""

import asyncio
import json
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

import requests
from pydantic import ValidationError

from .config import get_settings
from .constants import (
    ACTION_ADD_BODY_METRIC,
    ACTION_ADD_EXERCISE,
    ACTION_ADD_WORKOUT,
    ACTION_ADD_WORKOUTS,
    ACTION_DELETE_BODY_METRIC,
    ACTION_DELETE_WORKOUT,
    ACTION_GET_BODY_METRICS,
    ACTION_GET_EXERCISES,
    ACTION_GET_STATS,
    ACTION_GET_WORKOUTS,
    ACTION_LOGIN,
    ACTION_LOGOUT,
    ACTION_REGISTER,
    CONTENT_TYPE_TEXT,
    DEFAULT_API_TIMEOUT,
    PARAM_ACTION,
    RESERVED_PARAMS,
)
from .core.credentials import CredentialStrategy
from .core.events import LogoutNotifier
from .core.exceptions import (
    ConfigurationError,
    RemoteError,
    ReservedParameterError,
    TransportError,
)
from .core.session import SessionStore
from .models import AuthPayload

logger = logging.getLogger(__name__)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def _json_default(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class APIClient:
    """
    Клиент для единственного endpoint backend.

    Все запросы асинхронные: блокирующий вызов requests выполняется
    в отдельном потоке, event loop не блокируется. Несколько запросов
    могут выполняться одновременно, порядок ответов не гарантируется.
    """

    def __init__(
        self,
        strategy: CredentialStrategy,
        session: Optional[SessionStore] = None,
        notifier: Optional[LogoutNotifier] = None,
        base_url: Optional[str] = None,
        timeout: int = DEFAULT_API_TIMEOUT,
        http: Optional[requests.Session] = None,
    ) -> None:
        """
        Инициализация клиента.

        Args:
            strategy: Стратегия авторизации запросов
            session: Хранилище сессии (не нужно в режиме общего секрета)
            notifier: Канал сигнала logout
            base_url: URL endpoint (по умолчанию из конфигурации)
            timeout: Таймаут запросов в секундах
            http: HTTP сессия requests. Запросы идут из разных потоков,
                поэтому переданный объект должен быть потокобезопасным.
                По умолчанию каждый запрос выполняется через requests.request
                без общей сессии.
        """
        if strategy.requires_session and session is None:
            raise ConfigurationError(f"Credential mode '{strategy.mode.value}' requires a session store")
        self.strategy = strategy
        self.session = session
        self.notifier = notifier or LogoutNotifier()
        self.base_url = base_url or get_settings().api_url
        self.timeout = timeout
        self._http = http

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Закрыть переданную HTTP сессию"""
        if self._http is not None:
            self._http.close()

    # ============================================
    # ТРАНСПОРТ
    # ============================================

    def _check_reserved(self, action: str, fields: Mapping[str, Any]) -> None:
        for name in RESERVED_PARAMS:
            if name in fields:
                raise ReservedParameterError(name, action)

    def _build_query(
        self,
        action: str,
        params: Mapping[str, Any],
        credential: Optional[str],
    ) -> Dict[str, str]:
        query = {PARAM_ACTION: action}
        if credential:
            query[self.strategy.param_name] = credential
        for key, value in params.items():
            if value is not None:
                query[key] = _query_value(value)
        return query

    def _build_body(
        self,
        action: str,
        payload: Mapping[str, Any],
        credential: Optional[str],
    ) -> bytes:
        body: Dict[str, Any] = {PARAM_ACTION: action}
        if credential:
            body[self.strategy.param_name] = credential
        body.update(payload)
        return json.dumps(body, ensure_ascii=False, default=_json_default).encode("utf-8")

    def _decode(self, response: requests.Response, action: str) -> Any:
        """
        Разбор ответа сервера.

        Backend отвечает JSON даже на ошибки, поэтому тело с полем error
        возвращается вызывающему коду независимо от HTTP статуса.

        Raises:
            TransportError: Если тело не JSON или статус неуспешный без поля error
        """
        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                f"Failed to parse JSON response for '{action}' "
                f"(status {response.status_code}): {response.text[:200]}"
            )
            raise TransportError(f"Invalid JSON response: {e}", action=action) from e

        if not response.ok and not (isinstance(data, dict) and data.get("error")):
            logger.error(f"API request '{action}' failed with status {response.status_code}")
            raise TransportError(f"HTTP {response.status_code}", action=action)
        return data

    async def _send(
        self,
        method: str,
        action: str,
        params: Optional[Dict[str, str]] = None,
        data: Optional[bytes] = None,
    ) -> Any:
        headers = {"Content-Type": CONTENT_TYPE_TEXT} if data is not None else None
        request = self._http.request if self._http is not None else requests.request
        logger.debug(f"API {method} '{action}'")
        try:
            response = await asyncio.to_thread(
                request,
                method,
                self.base_url,
                params=params,
                data=data,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"API {method} '{action}' failed: {type(e).__name__}")
            raise TransportError(f"{type(e).__name__}: request to backend failed", action=action) from e
        return self._decode(response, action)

    async def _invalidate_session(self, credential: Optional[str]) -> None:
        if self.session is None:
            return
        # Ответ на запрос со старым токеном не должен выбивать новую сессию
        if self.session.token is None or self.session.token != credential:
            logger.info("Auth error for a credential that is no longer current, session kept")
            return
        self.session.clear_session()
        await self.notifier.apublish()

    async def _call(
        self,
        method: str,
        action: str,
        fields: Optional[Mapping[str, Any]] = None,
        authenticated: bool = True,
        interpret_auth_errors: bool = True,
    ) -> Any:
        fields = fields or {}
        self._check_reserved(action, fields)
        credential = self.strategy.ensure_ready() if authenticated else None

        if method == "GET":
            data = await self._send(method, action, params=self._build_query(action, fields, credential))
        else:
            data = await self._send(method, action, data=self._build_body(action, fields, credential))

        if isinstance(data, dict) and data.get("error"):
            message = str(data["error"])
            auth_failure = (
                authenticated and interpret_auth_errors and self.strategy.is_auth_error(message)
            )
            if auth_failure:
                logger.warning(f"API {method} '{action}' rejected credential: {message}")
                await self._invalidate_session(credential)
            else:
                logger.error(f"API {method} '{action}' error: {message}")
            raise RemoteError(message, action=action, auth_failure=auth_failure)
        return data

    async def get(self, action: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """
        GET запрос к API.

        Args:
            action: Имя действия backend
            params: Параметры запроса (None значения не отправляются)

        Returns:
            Разобранный JSON ответа

        Raises:
            NotAuthenticatedError: Нет токена
            ReservedParameterError: Параметр совпадает со служебным полем
            RemoteError: Backend вернул {"error": ...}
            TransportError: Сетевая ошибка или ответ не JSON
        """
        return await self._call("GET", action, params)

    async def post(self, action: str, payload: Optional[Mapping[str, Any]] = None) -> Any:
        """POST запрос к API. Ошибки те же, что у get()."""
        return await self._call("POST", action, payload)

    # ============================================
    # АВТОРИЗАЦИЯ
    # ============================================

    def _require_session(self, operation: str) -> SessionStore:
        if not self.strategy.requires_session or self.session is None:
            raise ConfigurationError(
                f"'{operation}' is not available in '{self.strategy.mode.value}' mode"
            )
        return self.session

    async def _authenticate(self, action: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        session = self._require_session(action)
        data = await self._call("POST", action, fields, authenticated=False)

        try:
            payload = AuthPayload.model_validate(data)
        except ValidationError as e:
            logger.error(f"Malformed '{action}' response: {e.error_count()} validation error(s)")
            raise TransportError(f"Malformed '{action}' response", action=action) from e

        expires_at = payload.expires_at if self.strategy.tracks_expiry else None
        session.set_session(payload.token, payload.user, expires_at)
        logger.info(f"Authenticated via '{action}'")
        return data

    async def register(self, username: str, password: str, name: str) -> Dict[str, Any]:
        """
        Регистрация нового пользователя.

        Сохраняет выданный токен, профиль и срок действия в сессию.

        Returns:
            Ответ backend ({"token", "user", "expires_at", ...})
        """
        return await self._authenticate(
            ACTION_REGISTER,
            {"username": username, "password": password, "name": name},
        )

    async def login(self, username: str, password: str) -> Dict[str, Any]:
        """Вход по логину и паролю"""
        return await self._authenticate(
            ACTION_LOGIN,
            {"username": username, "password": password},
        )

    async def logout(self) -> None:
        """
        Выход (удаление сессии на сервере).

        Ошибки запроса игнорируются: локальная сессия очищается в любом случае.
        """
        session = self._require_session(ACTION_LOGOUT)
        try:
            if session.token:
                try:
                    await self._call("POST", ACTION_LOGOUT, interpret_auth_errors=False)
                except (TransportError, RemoteError) as e:
                    logger.warning(f"Logout request failed, clearing local session anyway: {e.message}")
        finally:
            session.clear_session()
            await self.notifier.apublish()

    # ============================================
    # УПРАЖНЕНИЯ
    # ============================================

    async def list_exercises(self) -> Any:
        """Получить список всех упражнений"""
        return await self.get(ACTION_GET_EXERCISES)

    async def add_exercise(self, exercise: Dict[str, Any]) -> Any:
        """Добавить своё упражнение"""
        return await self.post(ACTION_ADD_EXERCISE, {"exercise": exercise})

    # ============================================
    # ТРЕНИРОВКИ
    # ============================================

    async def record_workout(self, workout: Dict[str, Any]) -> Any:
        """Добавить один подход"""
        return await self.post(ACTION_ADD_WORKOUT, {"workout": workout})

    async def record_workouts(self, workouts: List[Dict[str, Any]]) -> Any:
        """Добавить несколько подходов (всю тренировку)"""
        return await self.post(ACTION_ADD_WORKOUTS, {"workouts": workouts})

    async def workout_history(
        self,
        start_date: Optional[Any] = None,
        end_date: Optional[Any] = None,
    ) -> Any:
        """Получить историю тренировок за период"""
        return await self.get(ACTION_GET_WORKOUTS, {"startDate": start_date, "endDate": end_date})

    async def delete_workout(self, id: Any) -> Any:
        return await self.post(ACTION_DELETE_WORKOUT, {"id": id})

    # ============================================
    # СТАТИСТИКА
    # ============================================

    async def exercise_stats(self, exercise_id: Any) -> Any:
        """Получить статистику по упражнению"""
        return await self.get(ACTION_GET_STATS, {"exerciseId": exercise_id})

    # ============================================
    # ПАРАМЕТРЫ ТЕЛА
    # ============================================

    async def body_metric_history(
        self,
        start_date: Optional[Any] = None,
        end_date: Optional[Any] = None,
    ) -> Any:
        """Получить историю измерений тела"""
        return await self.get(ACTION_GET_BODY_METRICS, {"startDate": start_date, "endDate": end_date})

    async def add_body_metric(self, metric: Dict[str, Any]) -> Any:
        """Добавить измерение тела"""
        return await self.post(ACTION_ADD_BODY_METRIC, {"metric": metric})

    async def delete_body_metric(self, id: Any) -> Any:
        return await self.post(ACTION_DELETE_BODY_METRIC, {"id": id})
