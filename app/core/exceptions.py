# app/core/exceptions.py
"""
Доменные ошибки движка наград.

Каждая ошибка несет стабильный машинный код (`kind`), человекочитаемое сообщение
и HTTP-статус, в который ее переводит обработчик в `app.main`.
Все они восстановимы на стороне вызывающего и не роняют процесс.
"""

from typing import Any, Dict, Optional

from fastapi import status


class RewardServiceError(Exception):
    """Базовое исключение для всех доменных ошибок."""

    kind: str = "REWARD_ERROR"
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Не удалось выполнить операцию."

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r}, message={self.message!r})"


class ValidationError(RewardServiceError):
    kind = "VALIDATION_ERROR"
    default_message = "Не заполнены обязательные поля."


class SelfReferralError(ValidationError):
    kind = "SELF_REFERRAL"
    default_message = "Нельзя использовать собственный реферальный код."


class NotFoundError(RewardServiceError):
    kind = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Объект не найден."

    def __init__(self, resource: Optional[str] = None, identifier: Any = None, message: Optional[str] = None):
        details = {}
        if resource:
            details["resource"] = resource
            message = message or f"{resource}: объект не найден."
        if identifier is not None:
            details["identifier"] = str(identifier)
        super().__init__(message, details)


class OwnerNotFoundError(NotFoundError):
    kind = "OWNER_NOT_FOUND"
    default_message = "Владелец награды не найден."


class ReferrerNotFoundError(NotFoundError):
    kind = "REFERRER_NOT_FOUND"
    default_message = "Пригласивший пользователь не найден."


class PermissionDeniedError(RewardServiceError):
    kind = "PERMISSION_DENIED"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Недостаточно прав для выполнения операции."


class InvalidCodeError(RewardServiceError):
    kind = "INVALID_CODE"
    default_message = "Неверный код."


class CodeExpiredError(RewardServiceError):
    kind = "CODE_EXPIRED"
    status_code = status.HTTP_410_GONE
    default_message = "Срок действия кода истек. Запросите новый код."


class ExpiredOrUsedError(RewardServiceError):
    kind = "REWARD_EXPIRED_OR_USED"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Награда уже использована или истек срок ее действия."


class CampaignDisabledError(RewardServiceError):
    kind = "CAMPAIGN_DISABLED"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Кампания отключена."


class CampaignExpiredError(RewardServiceError):
    kind = "CAMPAIGN_EXPIRED"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Срок действия кампании истек."


class CampaignEndedError(CampaignExpiredError):
    kind = "CAMPAIGN_ENDED"
    default_message = "Кампания завершена."


class CapacityReachedError(RewardServiceError):
    kind = "CAMPAIGN_CAPACITY_REACHED"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Достигнут лимит участников кампании."


class AlreadyClaimedError(RewardServiceError):
    kind = "ALREADY_CLAIMED"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Пользователь уже получил награду по этой кампании."


class NotNewCustomerError(RewardServiceError):
    kind = "NOT_NEW_CUSTOMER"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Реферальная программа доступна только новым клиентам."


class InsufficientBalanceError(RewardServiceError):
    kind = "INSUFFICIENT_BALANCE"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Недостаточно баллов на балансе."


class InvalidStatusError(RewardServiceError):
    kind = "INVALID_STATUS"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Недопустимый статус заявки."


class SettlementFailedError(RewardServiceError):
    kind = "SETTLEMENT_FAILED"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Не удалось провести операцию. Попробуйте позже."
