# ensport_backend/models/banner_model.py
# Home page carousel banners hosted on the image CDN

import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field

from ensport_backend.core.clock import utc_now


class Banner(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    filename: str
    url: str                  # CDN secure URL
    public_id: str            # CDN identifier, needed to delete the asset
    uploaded_by: Optional[str] = Field(default=None, index=True)  # User id
    created_at: datetime = Field(default_factory=utc_now, index=True)
