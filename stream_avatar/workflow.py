"""
Create-flow orchestration.

Each step works on a ``CreatorSession`` and talks to the platform through
``PlatformClient``. Steps are strictly sequential:

  authenticate -> load visuals -> load voices -> select -> create head
  -> disable splitter -> read details -> build stream URL

Failures are recorded on the session (``auth_error`` for authentication,
``error`` for everything else) and re-raised to the caller.
"""

from __future__ import annotations

import logging
from typing import Optional

from .audit import audit_event
from .config import settings
from .errors import PlatformError, PlatformResponseError, WorkflowError
from .models import HeadCreateRequest, HeadVisual
from .pagination import Page, clamp_page, paginate
from .platform_client import PlatformClient
from .sessions import CreatorSession
from .streaming import (
    build_stream_url,
    extract_head_id,
    extract_public_url,
    redact_stream_url,
    summarize_head,
)

logger = logging.getLogger("stream_avatar.workflow")

GENDERS = ("MALE", "FEMALE")


def client_for(session: CreatorSession) -> PlatformClient:
    """Platform client carrying the session's token."""
    return PlatformClient(token=session.token or None)


def _require_token(session: CreatorSession) -> None:
    if not session.token:
        raise WorkflowError("Authenticate first.")


def normalize_gender(gender: Optional[str]) -> str:
    """Map a user-supplied gender filter to ``MALE``/``FEMALE`` or "" for all."""
    value = (gender or "").strip().upper()
    if value in ("", "ALL"):
        return ""
    if value not in GENDERS:
        raise WorkflowError(f"Unknown gender '{gender}'. Use MALE, FEMALE or leave empty.")
    return value


async def authenticate(session: CreatorSession, email: str, secret_key: str) -> CreatorSession:
    """
    Acquire a bearer token, then load the visual gallery and the voices.

    Gallery and voice failures do not fail authentication; the first one is
    left on ``session.error``.

    Raises:
        WorkflowError: If email or secret key is missing
        PlatformError: If the platform rejects the credentials
    """
    session.auth_error = ""
    session.error = ""
    try:
        if not email or not secret_key:
            raise WorkflowError("Please enter email and secret key.")
        client = PlatformClient()
        token = await client.get_token(email, secret_key)
    except (WorkflowError, PlatformError) as e:
        session.auth_error = str(e)
        audit_event("auth_failed", session=session.session_id)
        raise

    session.token = token
    audit_event("authenticated", session=session.session_id)

    failures = []
    try:
        await load_visuals(session)
    except PlatformError as e:
        logger.warning("initial visual load failed for %s: %s", session.session_id, e)
        failures.append(str(e))
    try:
        await load_voices(session)
    except PlatformError as e:
        logger.warning("initial voice load failed for %s: %s", session.session_id, e)
        failures.append(str(e))
    # first failure wins; a later successful load must not clear it
    session.error = failures[0] if failures else ""

    return session


async def load_visuals(session: CreatorSession, gender: Optional[str] = None) -> CreatorSession:
    """
    Fetch head visuals and reset the gallery to its first page.

    Args:
        gender: New gender filter ("" for all); None keeps the session's current filter
    """
    _require_token(session)
    if gender is not None:
        session.gender = normalize_gender(gender)
    session.error = session.gallery_error = ""
    try:
        visuals = await client_for(session).list_head_visuals(session.gender or None)
    except PlatformError as e:
        session.error = session.gallery_error = str(e)
        raise
    session.visuals = visuals
    session.page = 1
    logger.info("loaded %d head visuals (gender=%s)", len(visuals), session.gender or "all")
    return session


async def load_voices(session: CreatorSession) -> CreatorSession:
    """Fetch voices; the first one becomes the chosen voice if none is chosen yet."""
    _require_token(session)
    session.error = ""
    try:
        voices = await client_for(session).list_voices()
    except PlatformError as e:
        session.error = str(e)
        raise
    session.voices = voices
    if not session.voice_id and voices:
        session.voice_id = voices[0].voice_id
    logger.info("loaded %d %s voices", len(voices), settings.VOICE_PROVIDER)
    return session


def visuals_page(session: CreatorSession, page: Optional[int] = None) -> Page[HeadVisual]:
    """Current (or requested) gallery page; the requested page is clamped and remembered."""
    if page is not None:
        set_page(session, page)
    return paginate(session.visuals, session.page, settings.VISUALS_PAGE_SIZE)


def set_page(session: CreatorSession, page: int) -> int:
    session.page = clamp_page(page, len(session.visuals), settings.VISUALS_PAGE_SIZE)
    return session.page


def select_visual(session: CreatorSession, visual_id: str) -> CreatorSession:
    """
    Choose the head visual to create from.

    Any id is accepted; the gallery only holds the first fetched batch.
    """
    visual_id = (visual_id or "").strip()
    if not visual_id:
        raise WorkflowError("Pick a head visual.")
    session.selected_visual_id = visual_id
    return session


def select_voice(session: CreatorSession, voice_id: str) -> CreatorSession:
    """Choose a voice; any id is accepted so one can be pasted when listing failed."""
    voice_id = (voice_id or "").strip()
    if not voice_id:
        raise WorkflowError("Pick a voice.")
    session.voice_id = voice_id
    return session


def set_org(session: CreatorSession, org_id: Optional[str]) -> CreatorSession:
    session.org_id = (org_id or "").strip()
    return session


def build_head_request(session: CreatorSession) -> HeadCreateRequest:
    return HeadCreateRequest(
        head_visual_id=session.selected_visual_id,
        alias=session.alias,
        language_speech_recognition=settings.HEAD_LANGUAGE,
        language=settings.HEAD_LANGUAGE,
        operation_mode=settings.HEAD_OPERATION_MODE,
        tts_provider=settings.VOICE_PROVIDER,
        tts_voice=session.voice_id,
        org_id=session.org_id or None,
    )


async def create_streaming_avatar(
    session: CreatorSession,
    alias: Optional[str] = None,
    visual_id: Optional[str] = None,
    voice_id: Optional[str] = None,
    org_id: Optional[str] = None,
) -> CreatorSession:
    """
    Create a head and make it streaming-ready.

    Arguments that are given override the session's current choices.
    ``session.stream_url`` stays None when the platform's public URL lacks
    org, head or api key.

    Raises:
        WorkflowError: If token, visual, alias or voice is missing
        PlatformResponseError: If no head id is returned
        PlatformError: On any other platform failure
    """
    if alias is not None:
        session.alias = alias.strip()
    if visual_id is not None:
        select_visual(session, visual_id)
    if voice_id is not None:
        select_voice(session, voice_id)
    if org_id is not None:
        set_org(session, org_id)

    _require_token(session)
    if not session.selected_visual_id:
        raise WorkflowError("Pick a head visual.")
    if not session.alias:
        raise WorkflowError("Enter an alias for the new avatar.")
    if not session.voice_id:
        raise WorkflowError("Pick a voice.")

    session.error = ""
    session.head_id = ""
    session.stream_url = None
    client = client_for(session)
    try:
        created = await client.create_head(build_head_request(session))
        head_id = extract_head_id(created)
        if not head_id:
            raise PlatformResponseError("Head ID not returned.")
        session.head_id = head_id
        audit_event("head_created", session=session.session_id, **summarize_head(created))

        await client.disable_splitter(head_id)

        details = await client.get_head(head_id)
        session.stream_url = build_stream_url(extract_public_url(details, created))
    except PlatformError as e:
        session.error = str(e)
        raise

    if session.stream_url:
        logger.info("head %s streaming at %s", head_id, redact_stream_url(session.stream_url))
    else:
        logger.warning("head %s has no usable publicUrl; no stream URL built", head_id)
    return session
