# app/crud/outlet.py
from typing import List
from sqlalchemy.orm import Session
from app.models.outlet import Outlet

def get_outlet_by_id(db: Session, outlet_id: int) -> Outlet | None:
    return db.query(Outlet).filter(Outlet.id == outlet_id).first()

def get_outlets_by_owner(db: Session, owner_user_id: int) -> List[Outlet]:
    """Все торговые точки мерчанта."""
    return db.query(Outlet).filter(Outlet.owner_user_id == owner_user_id).order_by(Outlet.id).all()
