"""Player endpoints."""
from fastapi import APIRouter, Depends, Response
from cmsdash.api.deps import get_media_store, get_repository
from cmsdash.api.schemas.players import PlayerCreate, PlayerList, PlayerRead, PlayerUpdate
from cmsdash.infra.media_store import MediaStore
from cmsdash.infra.repository import ContentRepository
from cmsdash.services.players_service import PlayersService

router = APIRouter(prefix="/players", tags=["players"])


def _service(
    repo: ContentRepository = Depends(get_repository),
    media: MediaStore = Depends(get_media_store),
) -> PlayersService:
    return PlayersService(repo, media)


@router.get("", response_model=PlayerList)
def list_players(svc: PlayersService = Depends(_service)) -> PlayerList:
    return svc.list_players()


@router.post("", response_model=PlayerRead, status_code=201)
def create_player(payload: PlayerCreate, svc: PlayersService = Depends(_service)) -> PlayerRead:
    return svc.create_player(payload)


@router.get("/{player_id}", response_model=PlayerRead)
def get_player(player_id: str, svc: PlayersService = Depends(_service)) -> PlayerRead:
    return svc.get_player(player_id)


@router.put("/{player_id}", response_model=PlayerRead)
def update_player(
    player_id: str, payload: PlayerUpdate, svc: PlayersService = Depends(_service),
) -> PlayerRead:
    return svc.update_player(player_id, payload)


@router.delete("/{player_id}", status_code=204)
def delete_player(player_id: str, svc: PlayersService = Depends(_service)) -> Response:
    svc.delete_player(player_id)
    return Response(status_code=204)
