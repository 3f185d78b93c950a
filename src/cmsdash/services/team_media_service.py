"""Team media use-case service: three image slots on one row."""
from __future__ import annotations
import logging
from dataclasses import replace
from cmsdash.imaging.transport import is_data_url
from cmsdash.infra.media_store import MediaStore, store_data_url
from cmsdash.infra.repository import ContentRepository, TeamMediaRecord
from cmsdash.api.schemas.team_media import MediaKindDTO, TeamMediaRead, TeamMediaUpdate

logger = logging.getLogger(__name__)

TEAM_MEDIA_FOLDER = "team"

# kind -> (record field, stored file name)
SLOTS: dict[MediaKindDTO, tuple[str, str]] = {
    MediaKindDTO.TEAM_PHOTO: ("team_photo_url", "team_photo"),
    MediaKindDTO.HERO_BANNER: ("hero_banner_url", "hero_banner"),
    MediaKindDTO.LOGO: ("team_logo_url", "team_logo"),
}


class TeamMediaService:
    def __init__(self, repo: ContentRepository, media: MediaStore) -> None:
        self._repo = repo
        self._media = media

    def _hosted(self, kind: MediaKindDTO, value: str | None) -> str | None:
        if is_data_url(value):
            return store_data_url(self._media, TEAM_MEDIA_FOLDER, SLOTS[kind][1], value)
        return value or None

    def get(self) -> TeamMediaRead:
        return TeamMediaRead.model_validate(self._repo.get_team_media())

    def update_one(self, kind: MediaKindDTO, data_url: str) -> TeamMediaRead:
        field_name = SLOTS[kind][0]
        current = self._repo.get_team_media()
        record = replace(current, **{field_name: self._hosted(kind, data_url)}, updated_at=None)
        logger.info("updated team media slot %s", kind.value)
        return TeamMediaRead.model_validate(self._repo.save_team_media(record))

    def update_all(self, payload: TeamMediaUpdate) -> TeamMediaRead:
        record = TeamMediaRecord(
            team_photo_url=self._hosted(MediaKindDTO.TEAM_PHOTO, payload.team_photo_url),
            hero_banner_url=self._hosted(MediaKindDTO.HERO_BANNER, payload.hero_banner_url),
            team_logo_url=self._hosted(MediaKindDTO.LOGO, payload.team_logo_url),
        )
        return TeamMediaRead.model_validate(self._repo.save_team_media(record))

    def update(self, payload: TeamMediaUpdate) -> TeamMediaRead:
        if payload.is_single:
            return self.update_one(payload.type, payload.data_url)
        return self.update_all(payload)
