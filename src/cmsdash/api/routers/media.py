"""Serves stored media back to the dashboard and the public site."""
from fastapi import APIRouter, Depends, Response
from cmsdash.api.deps import get_media_store
from cmsdash.domain.exceptions import NotFoundError
from cmsdash.infra.media_store import MediaStore

router = APIRouter(prefix="/media", tags=["media"])


@router.get("/{path:path}")
def get_media(path: str, media: MediaStore = Depends(get_media_store)) -> Response:
    found = media.get(path)
    if found is None:
        raise NotFoundError(f"Media {path} not found")
    data, content_type = found
    return Response(content=data, media_type=content_type, headers={"Cache-Control": "public, max-age=3600"})
