# app/crud/campaign.py
from sqlalchemy import update
from sqlalchemy.orm import Session
from app.models.campaign import ReferralCampaign

def get_campaign_by_id(db: Session, campaign_id: int) -> ReferralCampaign | None:
    return db.query(ReferralCampaign).filter(ReferralCampaign.id == campaign_id).first()

def increment_participants(db: Session, campaign_id: int) -> bool:
    """
    Увеличивает счетчик участников, если лимит еще не достигнут.
    Возвращает False, если место в кампании закончилось.
    Требует внешнего вызова db.commit().
    """
    stmt = update(ReferralCampaign).where(ReferralCampaign.id == campaign_id).where(
        (ReferralCampaign.max_participants.is_(None))
        | (ReferralCampaign.participants_count < ReferralCampaign.max_participants)
    ).values(
        participants_count=ReferralCampaign.participants_count + 1
    ).execution_options(synchronize_session=False)
    return db.execute(stmt).rowcount == 1
