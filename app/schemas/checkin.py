# app/schemas/checkin.py
from pydantic import BaseModel

class CheckInConsents(BaseModel):
    email: bool | None = None
    sms: bool | None = None
    push_notification: bool | None = None

class CheckInCreate(BaseModel):
    outlet_id: int
    consents: CheckInConsents | None = None

class CheckIn(BaseModel):
    id: int
    user_id: int
    outlet_id: int
    visit_count: int

    class Config:
        from_attributes = True
