from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import ApiError, InvalidUpload, ProcessingFailed
from app.deps import get_ingestor, get_store
from app.logging_utils import get_logger
from app.pipeline.ingest import SessionIngestor
from app.schemas.sessions import ErrorBody, SessionList, SessionRead
from app.services.session_store import SessionStore
from app.services.transcription import UploadedAudio

router = APIRouter(prefix="/sessions", tags=["sessions"])
log = get_logger(__name__)

_ERRORS = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorBody},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorBody},
}


async def _read_upload(request: Request) -> UploadedAudio:
    try:
        form = await request.form()
    except StarletteHTTPException as exc:
        # malformed multipart body
        raise InvalidUpload() from exc

    upload = form.get("file")
    if not isinstance(upload, UploadFile):
        raise InvalidUpload()

    data = await upload.read()
    return UploadedAudio.from_upload(data, upload.filename, upload.content_type)


@router.get("", response_model=SessionList, response_model_exclude_none=True)
def list_sessions(store: SessionStore = Depends(get_store)) -> SessionList:
    """All sessions held by this process, newest first."""
    return SessionList(sessions=store.list())


@router.post(
    "",
    response_model=SessionRead,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
)
async def create_session(
    request: Request,
    ingestor: SessionIngestor = Depends(get_ingestor),
) -> SessionRead:
    """
    Upload one audio file (multipart field ``file``) and run the pipeline.

    The provider key is checked by the dependency before the body is read,
    so a missing key is reported for any payload.
    """
    try:
        audio = await _read_upload(request)
        return await ingestor.ingest(audio)
    except ApiError:
        raise
    except Exception as exc:
        log.exception("Error processing session", extra={"path": request.url.path})
        raise ProcessingFailed() from exc
