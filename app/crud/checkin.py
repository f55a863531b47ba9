# app/crud/checkin.py
from sqlalchemy import update
from sqlalchemy.orm import Session
from app.models.checkin import CheckIn
from app.models.outlet import Outlet


def get_checkin(db: Session, user_id: int, outlet_id: int) -> CheckIn | None:
    return db.query(CheckIn).filter_by(user_id=user_id, outlet_id=outlet_id).first()


def upsert_visit(
    db: Session,
    user_id: int,
    outlet_id: int,
    consents: dict | None = None
) -> CheckIn:
    """
    Регистрирует визит: увеличивает счетчик у существующей записи
    или создает новую с visit_count = 1.
    Требует внешнего вызова db.commit().
    """
    updated = db.execute(
        update(CheckIn)
        .where(CheckIn.user_id == user_id, CheckIn.outlet_id == outlet_id)
        .values(visit_count=CheckIn.visit_count + 1)
        .execution_options(synchronize_session=False)
    ).rowcount

    if updated:
        checkin = get_checkin(db, user_id, outlet_id)
        db.refresh(checkin)
        return checkin

    consents = consents or {}
    checkin = CheckIn(
        user_id=user_id,
        outlet_id=outlet_id,
        visit_count=1,
        consent_email=consents.get("email"),
        consent_sms=consents.get("sms"),
        consent_push=consents.get("push_notification"),
    )
    db.add(checkin)
    db.flush()
    return checkin


def exists_for_merchant(db: Session, user_id: int, merchant_owner_id: int) -> bool:
    """Был ли пользователь хотя бы в одной точке этого мерчанта."""
    return db.query(CheckIn.id).join(Outlet, Outlet.id == CheckIn.outlet_id).filter(
        CheckIn.user_id == user_id,
        Outlet.owner_user_id == merchant_owner_id
    ).first() is not None
