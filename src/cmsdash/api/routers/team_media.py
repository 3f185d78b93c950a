"""Team media endpoints. POST behaves like PUT for older form clients."""
from fastapi import APIRouter, Depends
from cmsdash.api.deps import get_media_store, get_repository
from cmsdash.api.schemas.team_media import TeamMediaRead, TeamMediaUpdate
from cmsdash.infra.media_store import MediaStore
from cmsdash.infra.repository import ContentRepository
from cmsdash.services.team_media_service import TeamMediaService

router = APIRouter(prefix="/team-media", tags=["team-media"])


def _service(
    repo: ContentRepository = Depends(get_repository),
    media: MediaStore = Depends(get_media_store),
) -> TeamMediaService:
    return TeamMediaService(repo, media)


@router.get("", response_model=TeamMediaRead)
def get_team_media(svc: TeamMediaService = Depends(_service)) -> TeamMediaRead:
    return svc.get()


@router.put("", response_model=TeamMediaRead)
@router.post("", response_model=TeamMediaRead, include_in_schema=False)
def update_team_media(
    payload: TeamMediaUpdate, svc: TeamMediaService = Depends(_service),
) -> TeamMediaRead:
    return svc.update(payload)
