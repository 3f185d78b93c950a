"""ContentRepository over a hosted PostgREST-style database API.

Rows are addressed as ``/<table>?id=eq.<id>``; writes ask for the stored
representation back so the caller sees what the service persisted.
"""
from __future__ import annotations

from dataclasses import asdict, replace
from datetime import datetime
from typing import Any

import httpx

from cmsdash.domain.exceptions import ConflictError, NotFoundError, UpstreamError
from cmsdash.infra.repository import (
    TEAM_MEDIA_ID,
    ContentRepository,
    PlayerRecord,
    TeamMediaRecord,
    utcnow,
)


def _dt(value: Any) -> datetime | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _player_from_row(row: dict[str, Any]) -> PlayerRecord:
    return PlayerRecord(
        id=str(row["id"]),
        full_name=row.get("full_name") or "",
        jersey_number=int(row.get("jersey_number") or 0),
        role_tag=row.get("role_tag") or "Player",
        position=row.get("position") or "",
        tagline=row.get("tagline"),
        bio=row.get("bio"),
        photo_url=row.get("photo_url"),
        status=row.get("status") or "active",
        socials=row.get("socials") or {},
        created_at=_dt(row.get("created_at")) or utcnow(),
        updated_at=_dt(row.get("updated_at")) or utcnow(),
    )


def _player_to_row(record: PlayerRecord) -> dict[str, Any]:
    row = asdict(record)
    row["socials"] = dict(record.socials)
    row["created_at"] = record.created_at.isoformat()
    row["updated_at"] = record.updated_at.isoformat()
    return row


class HttpContentRepository(ContentRepository):
    def __init__(
        self,
        base_url: str,
        *,
        api_key: str | None = None,
        transport: httpx.BaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        headers = {"Accept": "application/json"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"), headers=headers, timeout=timeout, transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check(self, resp: httpx.Response) -> None:
        if resp.is_success:
            return
        try:
            body = resp.json()
            detail = (body.get("message") or body.get("detail")) if isinstance(body, dict) else None
            detail = detail or resp.text
        except ValueError:
            detail = resp.text
        if resp.status_code == 409:
            raise ConflictError(detail)
        raise UpstreamError(resp.status_code, detail)

    def _rows(self, resp: httpx.Response) -> list[dict[str, Any]]:
        self._check(resp)
        data = resp.json()
        return data if isinstance(data, list) else [data]

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    def list_players(self) -> list[PlayerRecord]:
        resp = self._client.get("/players", params={"select": "*", "order": "created_at.desc"})
        return [_player_from_row(r) for r in self._rows(resp)]

    def get_player(self, player_id: str) -> PlayerRecord | None:
        resp = self._client.get("/players", params={"select": "*", "id": f"eq.{player_id}"})
        rows = self._rows(resp)
        return _player_from_row(rows[0]) if rows else None

    def add_player(self, record: PlayerRecord) -> PlayerRecord:
        resp = self._client.post(
            "/players",
            json=_player_to_row(record),
            headers={"Prefer": "return=representation"},
        )
        rows = self._rows(resp)
        return _player_from_row(rows[0]) if rows else record

    def update_player(self, record: PlayerRecord) -> PlayerRecord:
        row = _player_to_row(record)
        row.pop("id")
        resp = self._client.patch(
            "/players",
            params={"id": f"eq.{record.id}"},
            json=row,
            headers={"Prefer": "return=representation"},
        )
        rows = self._rows(resp)
        if not rows:
            raise NotFoundError(f"Player {record.id} not found")
        return _player_from_row(rows[0])

    def delete_player(self, player_id: str) -> bool:
        resp = self._client.delete(
            "/players",
            params={"id": f"eq.{player_id}"},
            headers={"Prefer": "return=representation"},
        )
        return bool(self._rows(resp))

    # ------------------------------------------------------------------
    # Team media
    # ------------------------------------------------------------------

    def get_team_media(self) -> TeamMediaRecord:
        resp = self._client.get("/team_media", params={"select": "*", "id": f"eq.{TEAM_MEDIA_ID}"})
        rows = self._rows(resp)
        if not rows:
            return TeamMediaRecord()
        row = rows[0]
        return TeamMediaRecord(
            team_photo_url=row.get("team_photo_url"),
            hero_banner_url=row.get("hero_banner_url"),
            team_logo_url=row.get("team_logo_url"),
            updated_at=_dt(row.get("updated_at")),
        )

    def save_team_media(self, record: TeamMediaRecord) -> TeamMediaRecord:
        record = replace(record, updated_at=record.updated_at or utcnow())
        payload = {
            "id": TEAM_MEDIA_ID,
            "team_photo_url": record.team_photo_url,
            "hero_banner_url": record.hero_banner_url,
            "team_logo_url": record.team_logo_url,
            "updated_at": record.updated_at.isoformat(),
        }
        resp = self._client.post(
            "/team_media",
            params={"on_conflict": "id"},
            json=payload,
            headers={"Prefer": "resolution=merge-duplicates,return=representation"},
        )
        self._check(resp)
        return record
