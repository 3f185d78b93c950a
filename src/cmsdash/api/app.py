"""FastAPI application factory."""
from __future__ import annotations
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from cmsdash.config import settings
from cmsdash.domain.exceptions import ConflictError, InvalidPayloadError, NotFoundError, UpstreamError
from cmsdash.logging import configure_logging


def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)
    app = FastAPI(title="Team CMS API", version="0.1.0")

    # Import routers inside create_app() to avoid circular imports at module load time
    from cmsdash.api.routers.players import router as players_router
    from cmsdash.api.routers.team_media import router as team_media_router
    from cmsdash.api.routers.dashboard import router as dashboard_router
    from cmsdash.api.routers.media import router as media_router

    app.include_router(players_router)
    app.include_router(team_media_router)
    app.include_router(dashboard_router)
    app.include_router(media_router)

    @app.middleware("http")
    async def _no_store(request: Request, call_next):
        response = await call_next(request)
        # Dashboard reads must never be served from a cache
        if not request.url.path.startswith("/media/"):
            response.headers["Cache-Control"] = "no-store"
        return response

    @app.exception_handler(NotFoundError)
    def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.message})

    @app.exception_handler(ConflictError)
    def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.message})

    @app.exception_handler(InvalidPayloadError)
    def _invalid(request: Request, exc: InvalidPayloadError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.exception_handler(UpstreamError)
    def _upstream(request: Request, exc: UpstreamError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": exc.message})

    @app.get("/health", tags=["ops"])
    def health() -> dict:
        return {"status": "ok"}

    return app
