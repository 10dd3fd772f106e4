from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class LinkVisitResponse(BaseModel):
    """Visit row; absent headers serialize as null, never as an empty string"""
    id: int
    link_id: int
    ip: str
    user_agent: Optional[str] = None
    referer: Optional[str] = None
    status: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
