"""
Pydantic models for request/response validation.

These models define the API contract for the stream-avatar service.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .models import HeadVisual, Voice
from .pagination import Page
from .sessions import CreatorSession


class SessionCreated(BaseModel):
    session_id: str = Field(..., description="Identifier to use in follow-up calls")


class SessionState(BaseModel):
    """Current state of a creator session. Never carries the token."""
    session_id: str
    authenticated: bool = Field(..., description="True once a platform token is held")
    org_id: str = ""
    gender: str = Field(default="", description="Gender filter of the last visual load")
    visuals_total: int = 0
    page: int = 1
    voices_total: int = 0
    voice_id: str = ""
    selected_visual_id: str = ""
    alias: str = ""
    head_id: str = ""
    stream_url: Optional[str] = None
    auth_error: str = ""
    error: str = ""

    @classmethod
    def from_session(cls, session: CreatorSession) -> "SessionState":
        return cls(
            session_id=session.session_id,
            authenticated=session.authenticated,
            org_id=session.org_id,
            gender=session.gender,
            visuals_total=len(session.visuals),
            page=session.page,
            voices_total=len(session.voices),
            voice_id=session.voice_id,
            selected_visual_id=session.selected_visual_id,
            alias=session.alias,
            head_id=session.head_id,
            stream_url=session.stream_url,
            auth_error=session.auth_error,
            error=session.error,
        )


class AuthRequest(BaseModel):
    """Account credentials. The secret key is used once and never stored."""
    email: str = Field(default="", description="Platform account email")
    secret_key: str = Field(default="", description="Platform account secret key")


class OrgRequest(BaseModel):
    org_id: Optional[str] = Field(None, description="Org for multi-org accounts; empty clears it")


class LoadVisualsRequest(BaseModel):
    gender: Optional[str] = Field(
        None,
        description="MALE, FEMALE, or empty for all; omitted keeps the current filter"
    )


class VisualItem(BaseModel):
    id: str
    name: str = ""
    gender: str = ""
    thumbnail: str = ""
    selected: bool = False


class VisualsPage(BaseModel):
    """One client-side page of the fetched head visuals."""
    items: List[VisualItem]
    page: int
    page_count: int
    total: int
    has_prev: bool
    has_next: bool
    gender: str = ""

    @classmethod
    def from_page(cls, page: Page[HeadVisual], session: CreatorSession) -> "VisualsPage":
        return cls(
            items=[
                VisualItem(
                    id=v.id,
                    name=v.name,
                    gender=v.gender,
                    thumbnail=v.thumbnail,
                    selected=v.id == session.selected_visual_id,
                )
                for v in page.items
            ],
            page=page.page,
            page_count=page.page_count,
            total=page.total,
            has_prev=page.has_prev,
            has_next=page.has_next,
            gender=session.gender,
        )


class SelectVisualRequest(BaseModel):
    visual_id: str


class VoiceItem(BaseModel):
    voice_id: str
    display_name: str
    label: str
    locale: str = ""
    language: str = ""
    gender: str = ""
    selected: bool = False

    @classmethod
    def from_voice(cls, voice: Voice, selected_id: str) -> "VoiceItem":
        return cls(
            voice_id=voice.voice_id,
            display_name=voice.display_name,
            label=voice.label,
            locale=voice.locale,
            language=voice.language,
            gender=voice.gender,
            selected=voice.voice_id == selected_id,
        )


class VoicesResponse(BaseModel):
    voices: List[VoiceItem]
    voice_id: str = Field(default="", description="Currently chosen voice id")


class SelectVoiceRequest(BaseModel):
    voice_id: str = Field(..., description="Voice id from the listing or pasted by hand")


class CreateHeadRequest(BaseModel):
    """Create a streaming avatar. Omitted fields fall back to the session's choices."""
    alias: str = Field(..., description="Alias and name of the new head")
    visual_id: Optional[str] = None
    voice_id: Optional[str] = None
    org_id: Optional[str] = None


class CreateHeadResponse(BaseModel):
    head_id: str
    stream_url: Optional[str] = Field(
        None,
        description="Playable stream link; contains the org api key, keep it private"
    )


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status: ok or error")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    platform_base_url: str = Field(..., description="Platform API base URL")
    sessions: int = Field(..., description="Live creator sessions")


class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str = Field(..., description="Error message")
