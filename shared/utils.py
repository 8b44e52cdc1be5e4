"""Shared utility functions."""
from datetime import datetime
from typing import Optional

def event_timestamp(now: Optional[datetime] = None) -> str:
    """Render a timestamp like ``2024-03-01T14:02:11.042-0500`` in local time."""
    if now is None:
        now = datetime.now()
    if now.tzinfo is None:
        now = now.astimezone()
    millis = now.microsecond // 1000
    return f"{now.strftime('%Y-%m-%dT%H:%M:%S')}.{millis:03d}{now.strftime('%z')}"

def mask_token(token: Optional[str]) -> str:
    """Hide all but the last four characters of a token."""
    if not token:
        return ""
    if len(token) <= 4:
        return "*" * len(token)
    return "*" * (len(token) - 4) + token[-4:]
