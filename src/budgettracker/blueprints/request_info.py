"""Client IP and device detection from request headers."""

from __future__ import annotations

from typing import Any

from flask import Request

from ..services.auth import ClientContext


def get_client_ip(request: Request) -> str:
    """First proxy hop from X-Forwarded-For, then X-Real-IP, CF-Connecting-IP, remote addr."""

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    for header in ("X-Real-IP", "CF-Connecting-IP"):
        value = request.headers.get(header)
        if value:
            return value.strip()
    return request.remote_addr or "unknown"


def get_device_info(user_agent: str) -> dict[str, Any]:
    """Coarse platform/browser classification of a user-agent string."""

    if "Mobile" in user_agent:
        platform = "mobile"
    elif "Tablet" in user_agent:
        platform = "tablet"
    else:
        platform = "desktop"

    # Edge and Chrome user agents also mention Chrome/Safari; check the specific names first.
    if "Edg" in user_agent:
        browser = "Edge"
    elif "Firefox" in user_agent:
        browser = "Firefox"
    elif "Chrome" in user_agent:
        browser = "Chrome"
    elif "Safari" in user_agent:
        browser = "Safari"
    else:
        browser = "unknown"

    return {"userAgent": user_agent, "platform": platform, "browser": browser}


def client_context(request: Request) -> ClientContext:
    user_agent = request.headers.get("User-Agent", "")
    return ClientContext(
        ip_address=get_client_ip(request),
        user_agent=user_agent or None,
        device_info=get_device_info(user_agent),
    )
