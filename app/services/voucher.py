# app/services/voucher.py

import logging
from typing import List
from sqlalchemy.orm import Session

from app.crud import voucher as crud_voucher
from app.models.voucher import VoucherOffer

logger = logging.getLogger(__name__)

# Предложения платформы по умолчанию: баллы -> скидка
DEFAULT_VOUCHER_OFFERS = [
    {"point": 200, "value": 20000},
    {"point": 500, "value": 50000},
    {"point": 1000, "value": 100000},
]


def list_voucher_offers(db: Session) -> List[VoucherOffer]:
    """
    Возвращает активные предложения обмена.
    Если активных нет ни одного - создает набор по умолчанию.
    """
    offers = crud_voucher.get_active_offers(db)
    if offers:
        return offers

    logger.info("No active voucher offers found. Seeding default offers.")
    for item in DEFAULT_VOUCHER_OFFERS:
        crud_voucher.create_offer(db, point=item["point"], value=item["value"])
    db.commit()
    return crud_voucher.get_active_offers(db)
