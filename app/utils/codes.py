# app/utils/codes.py
"""
Генерация коротких цифровых кодов (реферальные коды и коды погашения).

Код детерминирован: одинаковые части в одинаковом порядке всегда дают один и тот же код.
Части склеиваются без разделителя, от строки берется хеш, из hex-дайджеста
выбираются цифры; если цифр меньше нужного, хешируется сам дайджест, и так далее.

Схема на MD5 - наследие старой версии платформы. Она НЕ является криптостойкой:
пространство кодов мало, а входные данные (ID кампаний и пользователей) почти публичны.
При заданном CODE_HMAC_SECRET используется HMAC-SHA256 с секретом - это осознанное
усиление, а не смена контракта: выход по-прежнему шестизначный и детерминированный.
"""

import hashlib
import hmac
import logging
import re
from typing import Callable, Protocol

from app.core.config import settings

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"\d+")


class CodeGenerator(Protocol):
    length: int

    def generate(self, *parts: str) -> str:
        ...


def harvest_digits(seed: str, digest: Callable[[str], str], length: int) -> str:
    """Собирает цифры из цепочки дайджестов, пока их не станет не меньше `length`."""
    current = digest(seed)
    result = ""
    while len(result) < length:
        result += "".join(_DIGITS_RE.findall(current))
        current = digest(current)
    return result[:length]


class Md5DigitCodeGenerator:
    """Исходная схема: цифры из повторного MD5."""

    def __init__(self, length: int = 6):
        self.length = length

    @staticmethod
    def _digest(value: str) -> str:
        return hashlib.md5(value.encode("utf-8")).hexdigest()

    def generate(self, *parts: str) -> str:
        return harvest_digits("".join(parts), self._digest, self.length)


class HmacDigitCodeGenerator:
    """Та же выборка цифр, но поверх HMAC-SHA256 с серверным секретом."""

    def __init__(self, secret: str, length: int = 6):
        if not secret:
            raise ValueError("HMAC code generator requires a non-empty secret.")
        self._key = secret.encode("utf-8")
        self.length = length

    def _digest(self, value: str) -> str:
        return hmac.new(self._key, value.encode("utf-8"), hashlib.sha256).hexdigest()

    def generate(self, *parts: str) -> str:
        return harvest_digits("".join(parts), self._digest, self.length)


def get_code_generator() -> CodeGenerator:
    """Возвращает стратегию генерации кодов согласно настройкам."""
    if settings.CODE_HMAC_SECRET:
        return HmacDigitCodeGenerator(settings.CODE_HMAC_SECRET, length=settings.CODE_LENGTH)
    logger.debug("CODE_HMAC_SECRET is not set, falling back to legacy MD5 codes.")
    return Md5DigitCodeGenerator(length=settings.CODE_LENGTH)

