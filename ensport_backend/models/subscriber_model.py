# ensport_backend/models/subscriber_model.py
# Email subscribers: the fan-out list for reminders and results

import json
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel
from sqlmodel import SQLModel, Field

from ensport_backend.core.clock import utc_now


class Subscriber(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    email: str = Field(index=True, unique=True)
    is_active: bool = Field(default=True)
    sports: Optional[str] = None   # JSON-encoded list of sport names, None = all sports

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def sport_list(self) -> List[str]:
        if not self.sports:
            return []
        try:
            return list(json.loads(self.sports))
        except (TypeError, ValueError):
            return []


class SubscribeRequest(BaseModel):
    email: Optional[str] = None
    sports: Optional[List[str]] = None


class SubscriberRead(BaseModel):
    id: str
    email: str
    is_active: bool
    sports: List[str] = []
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_subscriber(cls, subscriber: Subscriber) -> "SubscriberRead":
        return cls(
            id=subscriber.id,
            email=subscriber.email,
            is_active=subscriber.is_active,
            sports=subscriber.sport_list(),
            created_at=subscriber.created_at,
            updated_at=subscriber.updated_at,
        )
