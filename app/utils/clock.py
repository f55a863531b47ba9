# app/utils/clock.py
from datetime import datetime, timezone
from typing import Callable

# Источник текущего времени. Сервисы принимают его параметром,
# чтобы тесты могли "переводить часы" без патчинга datetime.
Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Текущее время в UTC без tzinfo - в таком виде даты хранятся в БД."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
