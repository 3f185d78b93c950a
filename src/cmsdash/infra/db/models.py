"""SQLModel tables for the sqlite backend."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class PlayerRow(SQLModel, table=True):
    __tablename__ = "players"

    id: str = Field(primary_key=True)
    full_name: str
    jersey_number: int
    role_tag: str = "Player"
    position: str = ""
    tagline: str | None = None
    bio: str | None = None
    photo_url: str | None = None
    status: str = Field(default="active", index=True)
    socials: dict = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime
    updated_at: datetime


class TeamMediaRow(SQLModel, table=True):
    __tablename__ = "team_media"

    id: int = Field(primary_key=True)
    team_photo_url: str | None = None
    hero_banner_url: str | None = None
    team_logo_url: str | None = None
    updated_at: datetime | None = None
