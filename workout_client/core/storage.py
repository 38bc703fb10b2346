"""Хранилища ключ-значение, заменяющие localStorage браузера."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """Строковое хранилище с API как у localStorage."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Значение по ключу или None"""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Сохранить значение"""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Удалить ключ (отсутствующий ключ не ошибка)"""


class MemoryStorage(KeyValueStorage):
    """Хранилище в памяти процесса."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class JSONFileStorage(KeyValueStorage):
    """
    Хранилище в JSON файле, переживает перезапуск процесса.

    Каждая запись сразу сбрасывается на диск. Повреждённый файл
    считается пустым хранилищем.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        """
        Args:
            path: Путь к JSON файлу (каталог создаётся при первой записи)
        """
        self.path = Path(path)
        self._data: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._data is not None:
            return self._data

        self._data = {}
        if not self.path.exists():
            return self._data

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Storage file {self.path} is unreadable, starting empty: {e}")
            return self._data

        if isinstance(raw, dict):
            self._data = {str(k): str(v) for k, v in raw.items() if v is not None}
        else:
            logger.warning(f"Storage file {self.path} does not contain an object, starting empty")
        return self._data

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(self._load(), ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)
        try:
            self.path.chmod(0o600)
        except OSError:
            logger.debug(f"Could not restrict permissions on {self.path}")

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        self._load()[key] = str(value)
        self._flush()

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._flush()
