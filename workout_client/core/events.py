"""
Сигнал выхода из системы.

Шлюз публикует сигнал, когда сессия сброшена (явный logout или
ошибка авторизации от backend). UI и другие компоненты подписываются
на него без прямой связи со шлюзом.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, List, Union

logger = logging.getLogger(__name__)

LogoutListener = Callable[[], Union[None, Awaitable[Any]]]


class LogoutNotifier:
    """Канал сигнала logout без payload."""

    def __init__(self) -> None:
        self._listeners: List[LogoutListener] = []

    @property
    def listeners(self) -> List[LogoutListener]:
        """Текущие подписчики (копия)"""
        return list(self._listeners)

    def subscribe(self, listener: LogoutListener) -> Callable[[], None]:
        """
        Подписаться на сигнал.

        Args:
            listener: Функция без аргументов (может быть корутинной)

        Returns:
            Функция отписки
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> List[Awaitable[Any]]:
        pending: List[Awaitable[Any]] = []
        for listener in list(self._listeners):
            try:
                result = listener()
            except Exception as e:
                logger.error(f"Logout listener {listener!r} failed: {e}", exc_info=True)
                continue
            if inspect.isawaitable(result):
                pending.append(result)
        return pending

    def publish(self) -> None:
        """Оповестить подписчиков. Корутины подписчиков не ожидаются."""
        logger.info(f"Publishing logout signal to {len(self._listeners)} listener(s)")
        for awaitable in self._notify():
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            logger.warning("Async logout listener called from publish(), use apublish()")

    async def apublish(self) -> None:
        """Оповестить подписчиков, дожидаясь асинхронных."""
        logger.info(f"Publishing logout signal to {len(self._listeners)} listener(s)")
        for awaitable in self._notify():
            try:
                await awaitable
            except Exception as e:
                logger.error(f"Async logout listener failed: {e}", exc_info=True)
