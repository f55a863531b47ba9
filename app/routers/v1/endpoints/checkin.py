# app/routers/v1/endpoints/checkin.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.dependencies import get_customer_user, get_db
from app.models.user import User
from app.schemas.checkin import CheckIn, CheckInCreate
from app.services import checkin as checkin_service

router = APIRouter()


@router.post("/checkin", response_model=CheckIn, status_code=status.HTTP_201_CREATED)
def check_in_endpoint(
    payload: CheckInCreate,
    current_user: User = Depends(get_customer_user),
    db: Session = Depends(get_db)
):
    """Отмечает визит клиента в торговую точку."""
    consents = payload.consents.model_dump() if payload.consents else None
    return checkin_service.record_check_in(db, user_id=current_user.id, outlet_id=payload.outlet_id, consents=consents)
