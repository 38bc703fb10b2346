"""Разбор и форматирование сроков действия токена."""

from datetime import datetime, timezone
from typing import Union


def parse_timestamp(value: str) -> datetime:
    """
    Разбор ISO 8601 строки, как её отдаёт backend.

    Суффикс "Z" понимается как UTC, время без зоны тоже считается UTC.

    Raises:
        ValueError: Если строка не является ISO 8601 датой
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: Union[str, datetime]) -> str:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    return value
