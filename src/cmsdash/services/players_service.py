"""Players use-case service. Maps records to DTOs; routers never see records."""
from __future__ import annotations
import logging
import uuid
from dataclasses import replace
from cmsdash.domain.exceptions import NotFoundError
from cmsdash.imaging.transport import is_data_url
from cmsdash.infra.media_store import MediaStore, store_data_url
from cmsdash.infra.repository import ContentRepository, PlayerRecord, utcnow
from cmsdash.api.schemas.players import PlayerCreate, PlayerList, PlayerRead, PlayerUpdate

logger = logging.getLogger(__name__)

PLAYER_PHOTO_FOLDER = "players"
# fields an update may explicitly set to null
_CLEARABLE = {"photo_url", "tagline", "bio"}


class PlayersService:
    def __init__(self, repo: ContentRepository, media: MediaStore) -> None:
        self._repo = repo
        self._media = media

    def _photo(self, player_id: str, value: str | None) -> str | None:
        """Store an uploaded data URL and return its hosted URL; pass URLs through."""
        if is_data_url(value):
            return store_data_url(self._media, PLAYER_PHOTO_FOLDER, player_id, value)
        return value or None

    def _require(self, player_id: str) -> PlayerRecord:
        record = self._repo.get_player(player_id)
        if record is None:
            raise NotFoundError(f"Player {player_id} not found")
        return record

    def list_players(self) -> PlayerList:
        players = self._repo.list_players()
        return PlayerList(items=[PlayerRead.model_validate(p) for p in players], total=len(players))

    def get_player(self, player_id: str) -> PlayerRead:
        return PlayerRead.model_validate(self._require(player_id))

    def create_player(self, payload: PlayerCreate) -> PlayerRead:
        player_id = uuid.uuid4().hex
        now = utcnow()
        record = PlayerRecord(
            id=player_id,
            full_name=payload.full_name,
            jersey_number=payload.jersey_number,
            role_tag=payload.role_tag.value,
            position=payload.position,
            tagline=payload.tagline,
            bio=payload.bio,
            photo_url=self._photo(player_id, payload.photo_url),
            status=payload.status.value,
            socials=payload.socials.model_dump(exclude_none=True),
            created_at=now,
            updated_at=now,
        )
        record = self._repo.add_player(record)
        logger.info("created player %s (#%s)", record.full_name, record.jersey_number)
        return PlayerRead.model_validate(record)

    def update_player(self, player_id: str, payload: PlayerUpdate) -> PlayerRead:
        current = self._require(player_id)
        changes = payload.model_dump(exclude_unset=True)
        if "photo_url" in changes:
            changes["photo_url"] = self._photo(player_id, payload.photo_url)
        if "socials" in changes:
            changes["socials"] = payload.socials.model_dump(exclude_none=True) if payload.socials else {}
        for key in ("role_tag", "status"):
            if changes.get(key) is not None:
                changes[key] = getattr(payload, key).value
        changes = {k: v for k, v in changes.items() if v is not None or k in _CLEARABLE}
        record = self._repo.update_player(replace(current, **changes, updated_at=utcnow()))
        return PlayerRead.model_validate(record)

    def delete_player(self, player_id: str) -> None:
        if not self._repo.delete_player(player_id):
            raise NotFoundError(f"Player {player_id} not found")
