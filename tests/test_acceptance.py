"""End-to-end checks against a running travel-tools server with real Google credentials.

Skipped unless TRAVEL_TOOLS_URL is set, e.g.:
    TRAVEL_TOOLS_URL=http://localhost:3001 TRAVEL_API_KEY=... pytest tests/test_acceptance.py
"""

import os
from datetime import datetime

import httpx
import pytest


TRAVEL_TOOLS_URL = os.getenv("TRAVEL_TOOLS_URL", "").rstrip("/")
PLAN_ENDPOINT = f"{TRAVEL_TOOLS_URL}/travel/plan"
DEFAULT_TIMEOUT = float(os.getenv("TEST_HTTP_TIMEOUT", "60"))

pytestmark = pytest.mark.skipif(not TRAVEL_TOOLS_URL, reason="TRAVEL_TOOLS_URL not set")


def _plan(home: str, venue_address: str, date: str, time: str, **prefs) -> httpx.Response:
    body = {
        "game": {
            "home_team": "TBD",
            "away_team": "Jr Kings",
            "date": date,
            "time": time,
            "timezone": "America/Los_Angeles",
            "venue": "Acceptance Rink",
        },
        "preferences": {"home_address": home, **prefs},
        "venue_address": venue_address,
    }
    headers = {"X-API-KEY": os.getenv("TRAVEL_API_KEY", ""), "Content-Type": "application/json"}
    with httpx.Client(timeout=DEFAULT_TIMEOUT) as client:
        return client.post(PLAN_ENDPOINT, json=body, headers=headers)


def test_live_plan_is_ordered():
    resp = _plan(
        "555 Nash St, El Segundo, CA 90245",
        "13071 Springdale St, Westminster, CA 92683",
        "2026-11-15",
        "08:40",
        prep_time_minutes=30,
        arrival_buffer_minutes=60,
    )
    resp.raise_for_status()
    plan = resp.json()
    times = [datetime.fromisoformat(plan[k]) for k in ("wake_up_time", "departure_time", "arrival_time", "game_time")]
    assert times == sorted(times)
    # A cross-county Sunday-morning drive is well over 10 minutes and under 3 hours
    assert 600 < plan["travel_duration_seconds"] < 3 * 3600
    assert plan["maps_url"].startswith("https://www.google.com/maps/dir/?api=1")


def test_live_plan_has_range_or_estimate():
    resp = _plan(
        "1166 E Mountain St, Pasadena, CA 91104",
        "201 S Plum Ave, Ontario, CA 91761",
        "2026-11-22",
        "17:00",
    )
    resp.raise_for_status()
    plan = resp.json()
    if plan["is_estimated"]:
        assert plan["disclaimer"]
    else:
        assert plan["travel_duration_low_seconds"] <= plan["travel_duration_high_seconds"]
        assert plan["travel_duration_seconds"] == plan["travel_duration_high_seconds"]
