"""
Audit logging for the create flow.
"""

from __future__ import annotations

import logging

logger = logging.getLogger("stream_avatar.audit")


def audit_event(event: str, **kwargs: object) -> None:
    """Log a structured audit event. Callers must not pass secrets."""
    logger.info("stream_avatar_event=%s %s", event, kwargs)
