"""Client IP and device detection tests."""

from __future__ import annotations

import pytest
from flask import Flask, request

from budgettracker.blueprints.request_info import client_context, get_client_ip, get_device_info

CHROME_DESKTOP = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)
EDGE_DESKTOP = CHROME_DESKTOP + " Edg/120.0"
SAFARI_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
FIREFOX_TABLET = "Mozilla/5.0 (Android 14; Tablet; rv:120.0) Gecko/120.0 Firefox/120.0"


@pytest.fixture()
def flask_app() -> Flask:
    return Flask(__name__)


@pytest.mark.parametrize(
    ("headers", "remote_addr", "expected"),
    [
        ({"X-Forwarded-For": "203.0.113.5, 10.0.0.1"}, "10.0.0.2", "203.0.113.5"),
        ({"X-Real-IP": "198.51.100.7"}, "10.0.0.2", "198.51.100.7"),
        ({"CF-Connecting-IP": "192.0.2.44"}, "10.0.0.2", "192.0.2.44"),
        ({}, "10.0.0.2", "10.0.0.2"),
    ],
)
def test_get_client_ip_priority(flask_app, headers, remote_addr, expected):
    with flask_app.test_request_context(
        "/", headers=headers, environ_base={"REMOTE_ADDR": remote_addr}
    ):
        assert get_client_ip(request) == expected


def test_get_client_ip_unknown_without_address(flask_app):
    with flask_app.test_request_context("/", environ_base={"REMOTE_ADDR": ""}):
        assert get_client_ip(request) == "unknown"


@pytest.mark.parametrize(
    ("user_agent", "platform", "browser"),
    [
        (CHROME_DESKTOP, "desktop", "Chrome"),
        (EDGE_DESKTOP, "desktop", "Edge"),
        (SAFARI_IPHONE, "mobile", "Safari"),
        (FIREFOX_TABLET, "tablet", "Firefox"),
        ("curl/8.4.0", "desktop", "unknown"),
    ],
)
def test_get_device_info(user_agent, platform, browser):
    info = get_device_info(user_agent)

    assert info == {"userAgent": user_agent, "platform": platform, "browser": browser}


def test_client_context_from_request(flask_app):
    with flask_app.test_request_context(
        "/",
        headers={"User-Agent": SAFARI_IPHONE, "X-Forwarded-For": "203.0.113.5"},
    ):
        context = client_context(request)

    assert context.ip_address == "203.0.113.5"
    assert context.user_agent == SAFARI_IPHONE
    assert context.device_info["platform"] == "mobile"
