from __future__ import annotations

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from app.logging_utils import configure_logging, get_logger
from companion.settings import CompanionSettings
from companion.supabase_client import SupabaseService

logger = get_logger(__name__)


def get_supabase(request: Request) -> SupabaseService:
    return request.app.state.supabase


def create_app(settings: CompanionSettings | None = None) -> FastAPI:
    """
    Build the companion service.

    The Supabase wrapper is constructed here, so missing Supabase settings
    stop the service at startup rather than on first request.
    """
    settings = settings or CompanionSettings()
    configure_logging("companion", settings.LOG_LEVEL)

    app = FastAPI(title="Session Transcriber Companion")
    app.state.supabase = SupabaseService(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=PlainTextResponse)
    def hello() -> str:
        return "Hello World!"

    @app.get("/supabase")
    def supabase_info(supabase: SupabaseService = Depends(get_supabase)) -> dict[str, str]:
        return {"projectUrl": supabase.get_project_url()}

    logger.info("companion ready", extra={"cors_origin": settings.FRONTEND_URL})
    return app


if __name__ == "__main__":
    import uvicorn

    _settings = CompanionSettings()
    uvicorn.run(create_app(_settings), host="0.0.0.0", port=_settings.PORT)
