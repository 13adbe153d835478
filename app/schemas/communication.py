"""알림 센터/광고 Pydantic 스키마.

Notification center and ad request schemas.
"""

from datetime import datetime

from pydantic import BaseModel

from app.utils.constants import AdType


class NotificationCreate(BaseModel):
    name: str
    number: str
    message: str


class AdCreate(BaseModel):
    title: str
    description: str
    valid_from: datetime
    valid_to: datetime
    type: AdType = AdType.AD
    contact: str | None = None
