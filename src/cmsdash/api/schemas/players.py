"""Player DTOs: pure Pydantic, no storage imports."""
from __future__ import annotations
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field, field_validator


class RoleTagDTO(str, Enum):
    CAPTAIN = "Captain"
    COACH = "Coach"
    PLAYER = "Player"


class PlayerStatusDTO(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Socials(BaseModel):
    instagram: str | None = None
    twitter: str | None = None
    linkedin: str | None = None


class PlayerCreate(BaseModel):
    full_name: str
    jersey_number: int = Field(ge=0, le=999)
    role_tag: RoleTagDTO = RoleTagDTO.PLAYER
    position: str = ""
    tagline: str | None = None
    bio: str | None = None
    # Either an already-hosted URL or an image data URL from the uploader
    photo_url: str | None = None
    status: PlayerStatusDTO = PlayerStatusDTO.ACTIVE
    socials: Socials = Field(default_factory=Socials)

    @field_validator("full_name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("full_name must not be empty")
        return v.strip()


class PlayerUpdate(BaseModel):
    full_name: str | None = None
    jersey_number: int | None = Field(default=None, ge=0, le=999)
    role_tag: RoleTagDTO | None = None
    position: str | None = None
    tagline: str | None = None
    bio: str | None = None
    photo_url: str | None = None
    status: PlayerStatusDTO | None = None
    socials: Socials | None = None

    @field_validator("full_name")
    @classmethod
    def name_not_empty(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("full_name must not be empty")
        return v.strip() if v is not None else v


class PlayerRead(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    full_name: str
    jersey_number: int
    role_tag: RoleTagDTO
    position: str
    tagline: str | None = None
    bio: str | None = None
    photo_url: str | None = None
    status: PlayerStatusDTO
    socials: Socials
    created_at: datetime
    updated_at: datetime


class PlayerList(BaseModel):
    items: list[PlayerRead]
    total: int
