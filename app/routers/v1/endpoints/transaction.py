# app/routers/v1/endpoints/transaction.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.crud import transaction as crud_transaction
from app.dependencies import get_current_user, get_db
from app.models.user import User
from app.schemas.transaction import RecentTransactions

router = APIRouter()


@router.get("/transaction/recent", response_model=RecentTransactions)
def get_recent_transactions(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Последние операции с баллами текущего пользователя."""
    transactions = crud_transaction.get_recent_transactions(
        db, user_id=current_user.id, limit=settings.RECENT_TRANSACTIONS_LIMIT
    )
    return RecentTransactions(transactions=transactions)
