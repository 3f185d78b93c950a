"""Dashboard summary DTO."""
from pydantic import BaseModel


class DashboardSummary(BaseModel):
    players: int
    active_players: int
    captains: int
    media_slots_set: int
    media_slots_total: int = 3
