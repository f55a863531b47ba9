# app/services/checkin.py

import logging
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.crud import checkin as crud_checkin
from app.crud import outlet as crud_outlet
from app.models.checkin import CheckIn

logger = logging.getLogger(__name__)


def record_check_in(db: Session, user_id: int, outlet_id: int, consents: dict | None = None) -> CheckIn:
    """Отмечает визит клиента в торговую точку."""
    if not crud_outlet.get_outlet_by_id(db, outlet_id):
        raise NotFoundError("Outlet", outlet_id)

    checkin = crud_checkin.upsert_visit(db, user_id=user_id, outlet_id=outlet_id, consents=consents)
    db.commit()
    db.refresh(checkin)
    logger.info(f"User {user_id} checked in at outlet {outlet_id} (visit #{checkin.visit_count}).")
    return checkin
