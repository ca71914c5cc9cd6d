"""
Stream Avatar Creator - Main FastAPI Application

Walks a user through creating a streaming-ready Digital Human on the
Unith platform:

- Authenticate with account email + secret key
- Browse head visuals (fetched once, paged locally)
- Pick a text-to-speech voice
- Create the head and get a playable stream URL

All platform calls are made server-side; the bearer token stays in the
creator session and is never returned.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import workflow
from .config import settings
from .errors import (
    PlatformHTTPError,
    PlatformResponseError,
    PlatformUnavailable,
    WorkflowError,
)
from .health import router as health_router
from .schemas import (
    AuthRequest,
    CreateHeadRequest,
    CreateHeadResponse,
    LoadVisualsRequest,
    OrgRequest,
    SelectVisualRequest,
    SelectVoiceRequest,
    SessionCreated,
    SessionState,
    VisualsPage,
    VoiceItem,
    VoicesResponse,
)
from .security import enforce_security
from .sessions import CreatorSession, get_store

logger = logging.getLogger("stream_avatar.main")


app = FastAPI(
    title="Stream Avatar Creator",
    description=(
        "Create a streaming-ready Digital Human with your Unith account: "
        "authenticate, pick a head visual and a voice, get a stream link."
    ),
    version=settings.SERVICE_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(health_router)


# =============================================================================
# ERROR HANDLING
# =============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Return consistent JSON error responses."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(PlatformHTTPError)
async def platform_http_error_handler(request: Request, exc: PlatformHTTPError):
    """Rejected credentials surface as 401; anything else is a bad gateway."""
    status = 401 if exc.status_code in (401, 403) else 502
    return JSONResponse(status_code=status, content={"detail": str(exc)})


@app.exception_handler(PlatformResponseError)
async def platform_response_error_handler(request: Request, exc: PlatformResponseError):
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(PlatformUnavailable)
async def platform_unavailable_handler(request: Request, exc: PlatformUnavailable):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


def _session(session_id: str) -> CreatorSession:
    try:
        return get_store().get(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Session not found or expired")


def _state(session: CreatorSession) -> dict:
    get_store().save(session)
    return SessionState.from_session(session).model_dump()


# =============================================================================
# SESSION ENDPOINTS
# =============================================================================


@app.post(
    "/v1/sessions",
    dependencies=[Depends(enforce_security)],
    response_model=SessionCreated,
    summary="Start a creator session",
)
async def create_session():
    session = get_store().create()
    logger.info("session %s started", session.session_id)
    return SessionCreated(session_id=session.session_id)


@app.get(
    "/v1/sessions/{session_id}",
    dependencies=[Depends(enforce_security)],
    response_model=SessionState,
    summary="Get session state",
)
async def get_session(session_id: str):
    return SessionState.from_session(_session(session_id))


@app.delete(
    "/v1/sessions/{session_id}",
    dependencies=[Depends(enforce_security)],
    summary="End a creator session",
    description="Forget the session, including its platform token.",
)
async def delete_session(session_id: str):
    if not get_store().delete(session_id):
        raise HTTPException(status_code=404, detail="Session not found or expired")
    return {"ok": True}


@app.post(
    "/v1/sessions/{session_id}/auth",
    dependencies=[Depends(enforce_security)],
    response_model=SessionState,
    summary="Authenticate",
    description=(
        "Exchange email + secret key for a platform token (valid 7 days), "
        "then load head visuals and voices."
    ),
)
async def authenticate(session_id: str, req: AuthRequest):
    session = _session(session_id)
    try:
        await workflow.authenticate(session, req.email, req.secret_key)
    finally:
        get_store().save(session)
    return _state(session)


@app.put(
    "/v1/sessions/{session_id}/org",
    dependencies=[Depends(enforce_security)],
    response_model=SessionState,
    summary="Set org for multi-org accounts",
)
async def set_org(session_id: str, req: OrgRequest):
    session = _session(session_id)
    workflow.set_org(session, req.org_id)
    return _state(session)


# =============================================================================
# HEAD VISUALS
# =============================================================================


@app.post(
    "/v1/sessions/{session_id}/visuals/load",
    dependencies=[Depends(enforce_security)],
    response_model=VisualsPage,
    summary="Load head visuals",
    description="Fetch head visuals from the platform, optionally filtered by gender.",
)
async def load_visuals(session_id: str, req: Optional[LoadVisualsRequest] = None):
    session = _session(session_id)
    gender = req.gender if req is not None else None
    try:
        await workflow.load_visuals(session, gender)
    finally:
        get_store().save(session)
    return VisualsPage.from_page(workflow.visuals_page(session), session)


@app.get(
    "/v1/sessions/{session_id}/visuals",
    dependencies=[Depends(enforce_security)],
    response_model=VisualsPage,
    summary="Get a page of head visuals",
    description="Pages are clamped to the available range.",
)
async def get_visuals(session_id: str, page: Optional[int] = Query(default=None)):
    session = _session(session_id)
    result = workflow.visuals_page(session, page)
    get_store().save(session)
    return VisualsPage.from_page(result, session)


@app.put(
    "/v1/sessions/{session_id}/visual",
    dependencies=[Depends(enforce_security)],
    response_model=SessionState,
    summary="Select head visual",
)
async def select_visual(session_id: str, req: SelectVisualRequest):
    session = _session(session_id)
    workflow.select_visual(session, req.visual_id)
    return _state(session)


# =============================================================================
# VOICES
# =============================================================================


def _voices(session: CreatorSession) -> VoicesResponse:
    return VoicesResponse(
        voices=[VoiceItem.from_voice(v, session.voice_id) for v in session.voices],
        voice_id=session.voice_id,
    )


@app.post(
    "/v1/sessions/{session_id}/voices/load",
    dependencies=[Depends(enforce_security)],
    response_model=VoicesResponse,
    summary="Load voices",
)
async def load_voices(session_id: str):
    session = _session(session_id)
    try:
        await workflow.load_voices(session)
    finally:
        get_store().save(session)
    return _voices(session)


@app.get(
    "/v1/sessions/{session_id}/voices",
    dependencies=[Depends(enforce_security)],
    response_model=VoicesResponse,
    summary="List loaded voices",
)
async def get_voices(session_id: str):
    return _voices(_session(session_id))


@app.put(
    "/v1/sessions/{session_id}/voice",
    dependencies=[Depends(enforce_security)],
    response_model=SessionState,
    summary="Select voice",
    description="Voice ids may be pasted by hand when the voice listing failed.",
)
async def select_voice(session_id: str, req: SelectVoiceRequest):
    session = _session(session_id)
    workflow.select_voice(session, req.voice_id)
    return _state(session)


# =============================================================================
# CREATE
# =============================================================================


@app.post(
    "/v1/sessions/{session_id}/heads",
    dependencies=[Depends(enforce_security)],
    response_model=CreateHeadResponse,
    summary="Create streaming avatar",
    description=(
        "Create the head, disable its splitter and compute the stream URL. "
        "The stream URL includes the org API key."
    ),
)
async def create_head(session_id: str, req: CreateHeadRequest):
    session = _session(session_id)
    try:
        await workflow.create_streaming_avatar(
            session,
            alias=req.alias,
            visual_id=req.visual_id,
            voice_id=req.voice_id,
            org_id=req.org_id,
        )
    finally:
        get_store().save(session)
    return CreateHeadResponse(head_id=session.head_id, stream_url=session.stream_url)


# =============================================================================
# STARTUP / SHUTDOWN EVENTS
# =============================================================================


@app.on_event("startup")
async def startup_event():
    """Application startup tasks."""
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    logger.info(f"Starting {settings.SERVICE_NAME} v{settings.SERVICE_VERSION}")
    logger.info(f"Platform URL: {settings.UNITH_API_BASE_URL}")
    logger.info(f"Stream URL base: {settings.UNITH_STREAM_BASE_URL}")


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown tasks."""
    purged = get_store().purge_expired()
    logger.info("Shutting down stream-avatar service (%d expired sessions purged)", purged)
