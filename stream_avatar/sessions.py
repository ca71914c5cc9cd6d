"""
Creator session storage.

A creator session holds everything one user accumulates while walking
through the create flow:
- The platform bearer token (never returned to callers)
- The fetched head visuals, gallery page and selection
- The fetched voices and the chosen voice
- The created head and its stream URL
- The last authentication error and the last generic error

Sessions live in process memory and expire after ``SESSION_TTL_SECONDS``.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import settings
from .models import HeadVisual, Voice


@dataclass
class CreatorSession:
    """
    State of one create flow.

    Attributes:
        session_id: Unique session identifier
        token: Platform bearer token once authenticated
        org_id: Optional org for multi-org accounts
        gender: Gender filter used for the last visual load ("" = all)
        visuals: Last fetched head visuals
        page: Current 1-based gallery page
        voices: Last fetched voices
        voice_id: Chosen voice id (may be pasted by hand)
        selected_visual_id: Chosen head visual id
        alias: Alias/name of the head to create
        head_id: Id of the created head
        stream_url: Playable stream URL of the created head
        auth_error: Message of the last failed authentication
        error: Message of the last failed load or create
        gallery_error: Message of the last failed gallery load
    """
    session_id: str
    token: str = ""
    org_id: str = ""
    gender: str = ""
    visuals: List[HeadVisual] = field(default_factory=list)
    page: int = 1
    voices: List[Voice] = field(default_factory=list)
    voice_id: str = ""
    selected_visual_id: str = ""
    alias: str = ""
    head_id: str = ""
    stream_url: Optional[str] = None
    auth_error: str = ""
    error: str = ""
    gallery_error: str = ""
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    def get_visual(self, visual_id: str) -> Optional[HeadVisual]:
        """Find a fetched visual by id."""
        for v in self.visuals:
            if v.id == visual_id:
                return v
        return None

    def get_voice(self, voice_id: str) -> Optional[Voice]:
        for v in self.voices:
            if v.voice_id == voice_id:
                return v
        return None

    def touch(self) -> None:
        self.updated_at = time.time()


class SessionStore:
    """
    In-memory session storage with TTL expiry.

    Suitable for single-instance deployments; sessions do not survive restarts.
    """

    def __init__(self, ttl_seconds: Optional[float] = None):
        self.ttl_seconds = float(
            ttl_seconds if ttl_seconds is not None else settings.SESSION_TTL_SECONDS
        )
        self._sessions: Dict[str, CreatorSession] = {}

    def _expired(self, session: CreatorSession, now: float) -> bool:
        return now - session.updated_at > self.ttl_seconds

    def create(self) -> CreatorSession:
        """Start a new, unauthenticated session."""
        self.purge_expired()
        session = CreatorSession(session_id=uuid.uuid4().hex)
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> CreatorSession:
        """
        Retrieve a live session.

        Raises:
            KeyError: If the session is unknown or expired
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(session_id)
        if self._expired(session, time.time()):
            self._sessions.pop(session_id, None)
            raise KeyError(session_id)
        return session

    def save(self, session: CreatorSession) -> CreatorSession:
        session.touch()
        self._sessions[session.session_id] = session
        return session

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def purge_expired(self) -> int:
        """Drop expired sessions and return how many were removed."""
        now = time.time()
        stale = [sid for sid, s in self._sessions.items() if self._expired(s, now)]
        for sid in stale:
            self._sessions.pop(sid, None)
        return len(stale)

    def __len__(self) -> int:
        return len(self._sessions)


_store: Optional[SessionStore] = None


def get_store() -> SessionStore:
    """Return the process-wide session store, creating it on first use."""
    global _store
    if _store is None:
        _store = SessionStore()
    return _store
