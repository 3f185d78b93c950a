"""SQLModel-backed ContentRepository. One UnitOfWork per call."""
from __future__ import annotations

from dataclasses import asdict, replace
from datetime import datetime, timezone

from sqlalchemy.engine import Engine
from sqlmodel import select

from cmsdash.domain.exceptions import ConflictError, NotFoundError
from cmsdash.infra.db.models import PlayerRow, TeamMediaRow
from cmsdash.infra.db.uow import UnitOfWork
from cmsdash.infra.repository import (
    TEAM_MEDIA_ID,
    ContentRepository,
    PlayerRecord,
    TeamMediaRecord,
    utcnow,
)


def _aware(value: datetime | None) -> datetime | None:
    # sqlite drops tzinfo; everything is stored in UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_record(row: PlayerRow) -> PlayerRecord:
    return PlayerRecord(
        id=row.id,
        full_name=row.full_name,
        jersey_number=row.jersey_number,
        role_tag=row.role_tag,
        position=row.position,
        tagline=row.tagline,
        bio=row.bio,
        photo_url=row.photo_url,
        status=row.status,
        socials=dict(row.socials or {}),
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


class SqlContentRepository(ContentRepository):
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def list_players(self) -> list[PlayerRecord]:
        with UnitOfWork(self._engine) as uow:
            rows = uow.session.exec(select(PlayerRow).order_by(PlayerRow.created_at.desc())).all()
            return [_to_record(r) for r in rows]

    def get_player(self, player_id: str) -> PlayerRecord | None:
        with UnitOfWork(self._engine) as uow:
            row = uow.session.get(PlayerRow, player_id)
            return _to_record(row) if row is not None else None

    def add_player(self, record: PlayerRecord) -> PlayerRecord:
        with UnitOfWork(self._engine) as uow:
            if uow.session.get(PlayerRow, record.id) is not None:
                raise ConflictError(f"Player {record.id} already exists")
            values = asdict(record)
            values["socials"] = dict(record.socials)
            uow.session.add(PlayerRow(**values))
        return record

    def update_player(self, record: PlayerRecord) -> PlayerRecord:
        with UnitOfWork(self._engine) as uow:
            row = uow.session.get(PlayerRow, record.id)
            if row is None:
                raise NotFoundError(f"Player {record.id} not found")
            for key, value in asdict(record).items():
                if key != "id":
                    setattr(row, key, dict(value) if key == "socials" else value)
            uow.session.add(row)
        return record

    def delete_player(self, player_id: str) -> bool:
        with UnitOfWork(self._engine) as uow:
            row = uow.session.get(PlayerRow, player_id)
            if row is None:
                return False
            uow.session.delete(row)
            return True

    def get_team_media(self) -> TeamMediaRecord:
        with UnitOfWork(self._engine) as uow:
            row = uow.session.get(TeamMediaRow, TEAM_MEDIA_ID)
            if row is None:
                return TeamMediaRecord()
            return TeamMediaRecord(
                team_photo_url=row.team_photo_url,
                hero_banner_url=row.hero_banner_url,
                team_logo_url=row.team_logo_url,
                updated_at=_aware(row.updated_at),
            )

    def save_team_media(self, record: TeamMediaRecord) -> TeamMediaRecord:
        record = replace(record, updated_at=record.updated_at or utcnow())
        with UnitOfWork(self._engine) as uow:
            row = uow.session.get(TeamMediaRow, TEAM_MEDIA_ID) or TeamMediaRow(id=TEAM_MEDIA_ID)
            row.team_photo_url = record.team_photo_url
            row.hero_banner_url = record.hero_banner_url
            row.team_logo_url = record.team_logo_url
            row.updated_at = record.updated_at
            uow.session.add(row)
        return record
