"""
Data models for visit recording.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class VisitEvent(BaseModel):
    """
    Everything needed to write one `link_visits` row.

    Built on the request path from the resolved link and the request headers,
    then handed to the visit recorder.
    """

    link_id: int = Field(..., description="Id of the resolved link")
    ip: str = Field(..., description="Client IP address")
    user_agent: Optional[str] = Field(None, description="User-Agent header, if sent")
    referer: Optional[str] = Field(None, description="Referer header, if sent")
    status: int = Field(..., description="HTTP status issued for the redirect")

    @field_validator("user_agent", "referer", mode="before")
    @classmethod
    def _blank_is_absent(cls, value):
        # Stored as NULL, never as an empty string
        if value == "":
            return None
        return value

    model_config = {
        "json_schema_extra": {
            "example": {
                "link_id": 1,
                "ip": "192.168.1.1",
                "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0",
                "referer": "https://twitter.com",
                "status": 302,
            }
        }
    }
