"""
Platform data models.

The platform is loose about field names, so every model is built from the
raw JSON through a tolerant ``from_raw`` constructor instead of strict
validation.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


def _first(raw: Dict[str, Any], *keys: str) -> str:
    """Return the first truthy value among ``keys`` as a string."""
    for key in keys:
        value = raw.get(key)
        if value:
            return str(value)
    return ""


class HeadVisual(BaseModel):
    """A face/visual a head can be created from."""

    id: str
    name: str = ""
    gender: str = ""
    avatar: str = ""
    poster_image: str = ""
    video_url: str = ""
    raw: Dict[str, Any] = Field(default_factory=dict, exclude=True)

    @property
    def thumbnail(self) -> str:
        """Best image to preview this visual with."""
        return self.avatar or self.poster_image or self.video_url or ""

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["HeadVisual"]:
        if not isinstance(raw, dict):
            return None
        visual_id = _first(raw, "id")
        if not visual_id:
            return None
        return cls(
            id=visual_id,
            name=_first(raw, "name"),
            gender=_first(raw, "gender"),
            avatar=_first(raw, "avatar"),
            poster_image=_first(raw, "posterImage"),
            video_url=_first(raw, "videoUrl"),
            raw=raw,
        )


class Voice(BaseModel):
    """A text-to-speech voice offered by the configured provider."""

    voice_id: str
    display_name: str
    locale: str = ""
    language: str = ""
    gender: str = ""

    @property
    def label(self) -> str:
        if self.locale:
            return f"{self.display_name} ({self.locale})"
        return self.display_name

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["Voice"]:
        """
        Normalize one voice entry.

        Returns None when the entry has no usable id or display name.
        """
        if not isinstance(raw, dict):
            return None
        voice_id = _first(raw, "voiceId", "voice_id", "id", "ttsVoice")
        display_name = _first(raw, "displayName", "name", "ttsVoice", "voiceId", "id")
        if not voice_id or not display_name:
            return None
        return cls(
            voice_id=voice_id,
            display_name=display_name,
            locale=_first(raw, "locale", "languageCode"),
            language=_first(raw, "language"),
            gender=_first(raw, "gender"),
        )


class HeadCreateRequest(BaseModel):
    """Body of ``POST /head/create``."""

    head_visual_id: str = Field(..., serialization_alias="headVisualId")
    alias: str
    language_speech_recognition: str = Field(
        default="en-US", serialization_alias="languageSpeechRecognition"
    )
    language: str = "en-US"
    operation_mode: str = Field(default="oc", serialization_alias="operationMode")
    tts_provider: str = Field(default="elevenlabs", serialization_alias="ttsProvider")
    tts_voice: str = Field(..., serialization_alias="ttsVoice")
    greetings: str = ""
    org_id: Optional[str] = Field(default=None, serialization_alias="orgId")

    def to_payload(self) -> Dict[str, Any]:
        """Wire payload; ``name`` mirrors the alias and ``orgId`` is only sent when set."""
        payload = self.model_dump(by_alias=True, exclude_none=True)
        payload["name"] = self.alias
        if not self.org_id:
            payload.pop("orgId", None)
        return payload
