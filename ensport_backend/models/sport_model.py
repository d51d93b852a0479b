# ensport_backend/models/sport_model.py
# Catalogue of sports shown in filters and subscription forms

from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from ensport_backend.core.clock import utc_now


class Sport(SQLModel, table=True):
    """Reference data only: Match.sport_type is free text, not a foreign key."""
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True)
    code: str = Field(unique=True)
    description: Optional[str] = None
    icon: Optional[str] = None
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
