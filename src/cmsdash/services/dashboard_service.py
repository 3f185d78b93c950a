"""Dashboard counts."""
from __future__ import annotations
from cmsdash.infra.repository import ContentRepository
from cmsdash.api.schemas.dashboard import DashboardSummary


class DashboardService:
    def __init__(self, repo: ContentRepository) -> None:
        self._repo = repo

    def summary(self) -> DashboardSummary:
        players = self._repo.list_players()
        media = self._repo.get_team_media()
        slots = (media.team_photo_url, media.hero_banner_url, media.team_logo_url)
        return DashboardSummary(
            players=len(players),
            active_players=sum(1 for p in players if p.status == "active"),
            captains=sum(1 for p in players if p.role_tag == "Captain"),
            media_slots_set=sum(1 for s in slots if s),
        )
