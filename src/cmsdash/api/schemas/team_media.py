"""Team media DTOs."""
from __future__ import annotations
from datetime import datetime
from enum import Enum
from pydantic import AliasChoices, BaseModel, Field, model_validator


class MediaKindDTO(str, Enum):
    TEAM_PHOTO = "team-photo"
    HERO_BANNER = "hero-banner"
    LOGO = "logo"


class TeamMediaRead(BaseModel):
    model_config = {"from_attributes": True}

    team_photo_url: str | None = None
    hero_banner_url: str | None = None
    team_logo_url: str | None = None
    updated_at: datetime | None = None


class TeamMediaUpdate(BaseModel):
    """Either one slot (``type`` + ``data_url``) or any of the three URL fields.

    URL fields may hold hosted URLs or image data URLs.
    """

    type: MediaKindDTO | None = None
    data_url: str | None = Field(default=None, validation_alias=AliasChoices("data_url", "dataUrl"))
    team_photo_url: str | None = Field(
        default=None, validation_alias=AliasChoices("team_photo_url", "teamPhotoUrl")
    )
    hero_banner_url: str | None = Field(
        default=None, validation_alias=AliasChoices("hero_banner_url", "heroBannerUrl")
    )
    team_logo_url: str | None = Field(
        default=None, validation_alias=AliasChoices("team_logo_url", "teamLogoUrl")
    )

    @model_validator(mode="after")
    def single_update_is_complete(self) -> "TeamMediaUpdate":
        if (self.type is None) != (self.data_url is None):
            raise ValueError("type and data_url must be given together")
        return self

    @property
    def is_single(self) -> bool:
        return self.type is not None
