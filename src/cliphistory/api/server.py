import logging
from typing import List, Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from cliphistory.api.schemas import Clip, Health, SelectClip, SelectResult, to_clips
from cliphistory.exceptions import ClipboardError, StoreError
from cliphistory.services import ChangeDetector, HistoryService

logger = logging.getLogger(__name__)

MAX_LIMIT = 10000


def create_app(service: HistoryService, detector: Optional[ChangeDetector] = None) -> FastAPI:
    """Build the HTTP surface the UI shell talks to.

    Endpoints are plain ``def`` handlers, so FastAPI runs them on its worker
    threads alongside the detector thread.
    """
    app = FastAPI(title="ClipHistory")
    app.state.service = service
    app.state.detector = detector

    @app.exception_handler(StoreError)
    async def store_error(request: Request, exc: StoreError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.exception_handler(ClipboardError)
    async def clipboard_error(request: Request, exc: ClipboardError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.get("/health", response_model=Health)
    def health():
        running = bool(app.state.detector and app.state.detector.is_running)
        return Health(detector_running=running)

    @app.get("/clips", response_model=List[Clip])
    def list_clips(limit: Optional[int] = Query(None, ge=1, le=MAX_LIMIT)):
        return to_clips(service.list_clips(limit))

    @app.get("/clips/search", response_model=List[Clip])
    def search_clips(
        term: str = "",
        source: str = "",
        limit: Optional[int] = Query(None, ge=1, le=MAX_LIMIT),
    ):
        return to_clips(service.search_clips(term, source, limit=limit))

    @app.get("/sources", response_model=List[str])
    def list_sources():
        return service.list_sources()

    @app.post("/clips/select", response_model=SelectResult)
    def select_clip(payload: SelectClip):
        changed = service.write_back(payload.value)
        return SelectResult(changed=changed)

    return app
