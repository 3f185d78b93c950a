"""Dashboard summary endpoint."""
from fastapi import APIRouter, Depends
from cmsdash.api.deps import get_repository
from cmsdash.api.schemas.dashboard import DashboardSummary
from cmsdash.infra.repository import ContentRepository
from cmsdash.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardSummary)
def get_dashboard(repo: ContentRepository = Depends(get_repository)) -> DashboardSummary:
    return DashboardService(repo).summary()
