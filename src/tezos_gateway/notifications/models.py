"""Notification model: wallet news shown in the extension and mobile apps."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PlatformType(str, Enum):
    MOBILE = "Mobile"
    EXTENSION = "Extension"


class NotificationType(str, Enum):
    NEWS = "News"
    PLATFORM_UPDATE = "PlatformUpdate"
    SECURITY_NOTE = "SecurityNote"


class Notification(BaseModel):
    """A notification as stored and served, with camelCase field names."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    created_at: datetime = Field(alias="createdAt")
    type: NotificationType
    platforms: list[PlatformType] = Field(min_length=1)
    language: str = "en-US"
    title: str
    description: str
    content: list[str] | str = Field(default_factory=list)
    extension_image_url: str | None = Field(default=None, alias="extensionImageUrl")
    mobile_image_url: str | None = Field(default=None, alias="mobileImageUrl")
    is_mandatory: bool = Field(default=False, alias="isMandatory")
    expiration_date: datetime | None = Field(default=None, alias="expirationDate")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)
