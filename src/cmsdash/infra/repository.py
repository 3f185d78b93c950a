"""ContentRepository contract and the in-memory backend.

Services receive a repository instance; which backend it is comes from
``settings.CONTENT_BACKEND`` via ``build_repository``.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Mapping

from cmsdash.domain.exceptions import ConflictError, NotFoundError

if TYPE_CHECKING:
    from cmsdash.config import Settings

TEAM_MEDIA_ID = 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class PlayerRecord:
    id: str
    full_name: str
    jersey_number: int
    role_tag: str = "Player"
    position: str = ""
    tagline: str | None = None
    bio: str | None = None
    photo_url: str | None = None
    status: str = "active"
    socials: Mapping[str, str] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True, slots=True)
class TeamMediaRecord:
    team_photo_url: str | None = None
    hero_banner_url: str | None = None
    team_logo_url: str | None = None
    updated_at: datetime | None = None


class ContentRepository(ABC):
    """Storage for dashboard content. Implementations own no business rules."""

    @abstractmethod
    def list_players(self) -> list[PlayerRecord]:
        """Return all players, newest first."""

    @abstractmethod
    def get_player(self, player_id: str) -> PlayerRecord | None:
        ...

    @abstractmethod
    def add_player(self, record: PlayerRecord) -> PlayerRecord:
        """Insert a new player. ``ConflictError`` if the id is taken."""

    @abstractmethod
    def update_player(self, record: PlayerRecord) -> PlayerRecord:
        """Replace an existing player. ``NotFoundError`` if absent."""

    @abstractmethod
    def delete_player(self, player_id: str) -> bool:
        """Delete a player; False when nothing was deleted."""

    @abstractmethod
    def get_team_media(self) -> TeamMediaRecord:
        """Return the single team-media row (empty record when never saved)."""

    @abstractmethod
    def save_team_media(self, record: TeamMediaRecord) -> TeamMediaRecord:
        ...


class InMemoryContentRepository(ContentRepository):
    def __init__(self) -> None:
        self._players: dict[str, PlayerRecord] = {}
        self._team_media = TeamMediaRecord()

    def list_players(self) -> list[PlayerRecord]:
        return sorted(self._players.values(), key=lambda p: p.created_at, reverse=True)

    def get_player(self, player_id: str) -> PlayerRecord | None:
        return self._players.get(player_id)

    def add_player(self, record: PlayerRecord) -> PlayerRecord:
        if record.id in self._players:
            raise ConflictError(f"Player {record.id} already exists")
        self._players[record.id] = record
        return record

    def update_player(self, record: PlayerRecord) -> PlayerRecord:
        if record.id not in self._players:
            raise NotFoundError(f"Player {record.id} not found")
        self._players[record.id] = record
        return record

    def delete_player(self, player_id: str) -> bool:
        return self._players.pop(player_id, None) is not None

    def get_team_media(self) -> TeamMediaRecord:
        return self._team_media

    def save_team_media(self, record: TeamMediaRecord) -> TeamMediaRecord:
        self._team_media = replace(record, updated_at=record.updated_at or utcnow())
        return self._team_media


def build_repository(settings: "Settings") -> ContentRepository:
    """Construct the backend named by ``CONTENT_BACKEND``."""
    backend = settings.CONTENT_BACKEND
    if backend == "memory":
        return InMemoryContentRepository()
    if backend == "sqlite":
        from cmsdash.infra.db.engine import get_engine, init_schema
        from cmsdash.infra.db.sql_repository import SqlContentRepository

        engine = get_engine(settings.database_url)
        init_schema(engine)
        return SqlContentRepository(engine)
    if backend == "http":
        from cmsdash.infra.http_repository import HttpContentRepository

        key = settings.REMOTE_API_KEY.get_secret_value() if settings.REMOTE_API_KEY else None
        return HttpContentRepository(settings.REMOTE_API_URL, api_key=key)
    raise ValueError(f"Unknown CONTENT_BACKEND {backend!r}")
