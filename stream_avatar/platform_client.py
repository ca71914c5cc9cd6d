"""
Digital Human platform API client module.

Provides an async HTTP client for the platform REST API: authentication,
head visual and voice listings, and head creation.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from .config import settings
from .errors import (
    PlatformHTTPError,
    PlatformResponseError,
    PlatformUnavailable,
)
from .models import HeadCreateRequest, HeadVisual, Voice

logger = logging.getLogger("stream_avatar.platform_client")


def extract_token(payload: Any) -> str:
    """Bearer token from an auth response: ``token`` or ``data.bearer``."""
    if not isinstance(payload, dict):
        return ""
    if payload.get("token"):
        return str(payload["token"])
    data = payload.get("data")
    if isinstance(data, dict) and data.get("bearer"):
        return str(data["bearer"])
    return ""


def extract_visual_items(payload: Any) -> List[Any]:
    """Raw head visual entries: ``data`` when it is a list, else nothing."""
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    return []


def extract_voice_items(payload: Any) -> List[Any]:
    """
    Raw voice entries from a voice listing.

    Handles various response shapes:
    - {"data": {"voices": [...]}}
    - {"data": {"items": [...]}}
    - {"voices": [...]}
    - {"data": [...]}
    - [...]
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []

    data = payload.get("data")
    if isinstance(data, dict):
        for key in ("voices", "items"):
            if isinstance(data.get(key), list):
                return data[key]
    if isinstance(payload.get("voices"), list):
        return payload["voices"]
    if isinstance(data, list):
        return data
    return []


class PlatformClient:
    """
    Async HTTP client for the Digital Human platform API.

    Handles:
    - Token acquisition with email + secret key
    - Head visual and voice listings
    - Head creation, splitter toggling and detail reads
    - Error handling and response parsing
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize client with configuration."""
        self.base = (base_url or settings.UNITH_API_BASE_URL).rstrip("/")
        self.token = token
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_S
        self._transport = transport

    def _headers(self, method: str) -> Dict[str, str]:
        """
        Build request headers.

        Includes the bearer token once one is held.
        """
        headers: Dict[str, str] = {"Accept": "application/json"}
        if method != "GET":
            headers["Content-Type"] = "application/json"
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send one request to the platform and decode its JSON body.

        Raises:
            PlatformUnavailable: On transport failure
            PlatformHTTPError: On a non-2xx status
            PlatformResponseError: On a non-JSON 2xx body
        """
        url = f"{self.base}{path}"
        kwargs: Dict[str, Any] = {"headers": self._headers(method)}
        if params:
            kwargs["params"] = params
        if body is not None:
            kwargs["json"] = body

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                resp = await client.request(method, url, **kwargs)
            except httpx.RequestError as e:
                logger.warning("platform %s %s unreachable: %s", method, path, e)
                raise PlatformUnavailable(f"Platform API unreachable: {e}") from e

        if resp.status_code >= 400:
            logger.info("platform %s %s failed with %s", method, path, resp.status_code)
            raise PlatformHTTPError(resp.status_code, resp.text)

        try:
            return resp.json()
        except ValueError as e:
            raise PlatformResponseError(
                f"Platform {method} {path} returned non-JSON response"
            ) from e

    async def get_token(self, email: str, secret_key: str) -> str:
        """
        Exchange account credentials for a bearer token.

        The token is also kept on the client for follow-up calls.

        Raises:
            PlatformResponseError: When the response carries no token
        """
        payload = await self.request(
            "POST",
            "/auth/token",
            body={"email": email, "secretKey": secret_key},
        )
        token = extract_token(payload)
        if not token:
            raise PlatformResponseError("No token returned. Check credentials.")
        self.token = token
        return token

    async def list_head_visuals(self, gender: Optional[str] = None) -> List[HeadVisual]:
        """
        Fetch one batch of head visuals, optionally filtered by gender.

        Args:
            gender: ``MALE``, ``FEMALE`` or empty for all

        Returns:
            Visuals in platform order (ascending)
        """
        params: Dict[str, Any] = {
            "order": "ASC",
            "page": "1",
            "take": str(settings.VISUALS_FETCH_SIZE),
            "_": str(int(time.time() * 1000)),  # cache buster
        }
        if gender:
            params["gender"] = gender

        payload = await self.request("GET", "/head_visual/face/all", params=params)
        visuals = [HeadVisual.from_raw(item) for item in extract_visual_items(payload)]
        return [v for v in visuals if v is not None]

    async def list_voices(self) -> List[Voice]:
        """Fetch voices of the configured provider, dropping unusable entries."""
        payload = await self.request(
            "GET",
            "/voice/all",
            params={
                "provider": settings.VOICE_PROVIDER,
                "take": str(settings.VOICES_FETCH_SIZE),
            },
        )
        voices = [Voice.from_raw(item) for item in extract_voice_items(payload)]
        return [v for v in voices if v is not None]

    async def create_head(self, req: HeadCreateRequest) -> Dict[str, Any]:
        """Create a head (digital human) and return the raw response."""
        created = await self.request("POST", "/head/create", body=req.to_payload())
        if not isinstance(created, dict):
            raise PlatformResponseError("Head creation returned an unexpected payload")
        return created

    async def disable_splitter(self, head_id: str) -> Any:
        """Turn the response splitter off; streaming heads require it."""
        return await self.request(
            "PUT",
            f"/head/{head_id}/splitter",
            params={"splitter": "false"},
        )

    async def get_head(self, head_id: str) -> Dict[str, Any]:
        details = await self.request("GET", f"/head/{head_id}")
        return details if isinstance(details, dict) else {}

    async def health_check(self) -> bool:
        """
        Check if the platform API is reachable.

        Returns:
            True if the API root answers without a server error
        """
        async with httpx.AsyncClient(timeout=5, transport=self._transport) as client:
            try:
                resp = await client.get(self.base, headers=self._headers("GET"))
                return resp.status_code < 500
            except httpx.HTTPError:
                return False
