"""Typed HTTP client for Streamlit pages.

Only imports from ``cmsdash.api.schemas``, never repositories or services.
Instantiate via ``get_client()`` which caches per Streamlit session.
"""
from __future__ import annotations

import httpx
import streamlit as st

from cmsdash.api.schemas.dashboard import DashboardSummary
from cmsdash.api.schemas.players import PlayerCreate, PlayerList, PlayerRead, PlayerUpdate
from cmsdash.api.schemas.team_media import MediaKindDTO, TeamMediaRead
from cmsdash.config import settings


class APIError(Exception):
    """Raised when the backend returns a 4xx/5xx response."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"[{status_code}] {detail}")


class CMSClient:
    """One method per backend endpoint. All return pure Pydantic DTOs."""

    def __init__(self, base_url: str | None = None, transport: httpx.BaseTransport | None = None) -> None:
        # Image payloads travel as data URLs; allow slow uploads.
        self._client = httpx.Client(
            base_url=base_url or settings.API_BASE_URL, timeout=60.0, transport=transport,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _raise_for_status(self, resp: httpx.Response) -> None:
        if resp.is_success:
            return
        try:
            detail = resp.json().get("detail", resp.text)
        except (ValueError, AttributeError):
            detail = resp.text
        raise APIError(resp.status_code, str(detail))

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    def list_players(self) -> PlayerList:
        resp = self._client.get("/players")
        self._raise_for_status(resp)
        return PlayerList.model_validate(resp.json())

    def get_player(self, player_id: str) -> PlayerRead:
        resp = self._client.get(f"/players/{player_id}")
        self._raise_for_status(resp)
        return PlayerRead.model_validate(resp.json())

    def create_player(self, payload: PlayerCreate) -> PlayerRead:
        resp = self._client.post("/players", json=payload.model_dump(mode="json"))
        self._raise_for_status(resp)
        return PlayerRead.model_validate(resp.json())

    def update_player(self, player_id: str, payload: PlayerUpdate) -> PlayerRead:
        resp = self._client.put(
            f"/players/{player_id}", json=payload.model_dump(mode="json", exclude_unset=True),
        )
        self._raise_for_status(resp)
        return PlayerRead.model_validate(resp.json())

    def delete_player(self, player_id: str) -> None:
        resp = self._client.delete(f"/players/{player_id}")
        self._raise_for_status(resp)

    # ------------------------------------------------------------------
    # Team media
    # ------------------------------------------------------------------

    def get_team_media(self) -> TeamMediaRead:
        resp = self._client.get("/team-media")
        self._raise_for_status(resp)
        return TeamMediaRead.model_validate(resp.json())

    def update_team_media(self, kind: MediaKindDTO, data_url: str | None) -> TeamMediaRead:
        # An empty data_url clears the slot
        resp = self._client.put("/team-media", json={"type": kind.value, "data_url": data_url or ""})
        self._raise_for_status(resp)
        return TeamMediaRead.model_validate(resp.json())

    # ------------------------------------------------------------------
    # Dashboard / health
    # ------------------------------------------------------------------

    def get_dashboard(self) -> DashboardSummary:
        resp = self._client.get("/dashboard")
        self._raise_for_status(resp)
        return DashboardSummary.model_validate(resp.json())

    def health(self) -> dict:
        resp = self._client.get("/health")
        self._raise_for_status(resp)
        return resp.json()


# ------------------------------------------------------------------
# Streamlit helper: one client per session
# ------------------------------------------------------------------

def get_client() -> CMSClient:
    """Return a cached ``CMSClient`` for the current Streamlit session."""
    if "cms_api_client" not in st.session_state:
        base_url = st.session_state.get("cms_api_url", settings.API_BASE_URL)
        st.session_state["cms_api_client"] = CMSClient(base_url=base_url)
    return st.session_state["cms_api_client"]
