# ensport_backend/models/activity_log_model.py
# Audit trail of back-office and subscription actions

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field

from ensport_backend.core.clock import utc_now


class ActivityAction(str, Enum):
    # Banner actions
    UPLOAD_BANNER = "UPLOAD_BANNER"
    DELETE_BANNER = "DELETE_BANNER"

    # Match actions
    CREATE_MATCH = "CREATE_MATCH"
    UPDATE_MATCH = "UPDATE_MATCH"
    DELETE_MATCH = "DELETE_MATCH"
    UPDATE_MATCH_SCORE = "UPDATE_MATCH_SCORE"
    UPDATE_MATCH_STATUS = "UPDATE_MATCH_STATUS"

    # Email actions
    SEND_24H_REMINDER = "SEND_24H_REMINDER"
    SEND_MATCH_RESULT = "SEND_MATCH_RESULT"

    # User actions
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"

    # Subscription actions
    EMAIL_SUBSCRIBE = "EMAIL_SUBSCRIBE"
    EMAIL_UNSUBSCRIBE = "EMAIL_UNSUBSCRIBE"


# Filter groups offered by the log viewer
ACTION_GROUPS = {
    "banner": [ActivityAction.UPLOAD_BANNER, ActivityAction.DELETE_BANNER],
    "match": [
        ActivityAction.CREATE_MATCH,
        ActivityAction.UPDATE_MATCH,
        ActivityAction.DELETE_MATCH,
        ActivityAction.UPDATE_MATCH_SCORE,
        ActivityAction.UPDATE_MATCH_STATUS,
    ],
    "auth": [ActivityAction.LOGIN, ActivityAction.LOGOUT],
    "subscription": [ActivityAction.EMAIL_SUBSCRIBE, ActivityAction.EMAIL_UNSUBSCRIBE],
    "notification": [ActivityAction.SEND_24H_REMINDER, ActivityAction.SEND_MATCH_RESULT],
}


class ActivityLog(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(index=True)
    user_name: str
    user_role: str
    action: str = Field(index=True)
    target: str
    target_id: Optional[str] = None
    details: Optional[str] = None   # JSON text
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now, index=True)
