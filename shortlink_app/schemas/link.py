from datetime import datetime
from typing import Optional

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

SHORT_NAME_MIN_LENGTH = 3
SHORT_NAME_MAX_LENGTH = 32
SHORT_NAME_PATTERN = r"^[A-Za-z0-9_-]+$"

_url_adapter = TypeAdapter(AnyUrl)


def validate_original_url(value: str) -> str:
    """Accept only absolute URLs, but keep the string exactly as given.

    The stored value is what redirects send back in `Location`, so it must
    not be normalized (no added trailing slash).
    """
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError("must be a valid URL")
    return value


class LinkBase(BaseModel):
    original_url: str = Field(..., description="Destination the short link redirects to")

    @field_validator("original_url")
    @classmethod
    def _check_original_url(cls, value: str) -> str:
        return validate_original_url(value)


class LinkCreate(LinkBase):
    short_name: Optional[str] = Field(
        None,
        min_length=SHORT_NAME_MIN_LENGTH,
        max_length=SHORT_NAME_MAX_LENGTH,
        pattern=SHORT_NAME_PATTERN,
        description="Generated when omitted",
    )

    @field_validator("short_name", mode="before")
    @classmethod
    def _empty_means_generate(cls, value):
        if value == "":
            return None
        return value


class LinkUpdate(LinkBase):
    short_name: str = Field(
        ...,
        min_length=SHORT_NAME_MIN_LENGTH,
        max_length=SHORT_NAME_MAX_LENGTH,
        pattern=SHORT_NAME_PATTERN,
    )


class LinkResponse(BaseModel):
    """Link as returned by the API, with the public short URL attached"""
    id: int
    original_url: str
    short_name: str
    short_url: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_link(cls, link, base_url: str) -> "LinkResponse":
        return cls(
            id=link.id,
            original_url=link.original_url,
            short_name=link.short_name,
            short_url=f"{base_url.rstrip('/')}/r/{link.short_name}",
            created_at=link.created_at,
        )
