"""
Open-Meteo Sky Conditions Service.

Derives the observing conditions at a point from the Open-Meteo forecast:
cloud cover for the hour closest to now, whether the sun is down, and the
composite visibility score that folds both into the aurora probability.

Open-Meteo is queried with timezone=auto, so timestamps come back as local
wall-clock strings plus a `utc_offset_seconds` field. Naive timestamps are
pinned to that offset before being compared with the current instant.
"""

import httpx
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Sequence

from app.core.config import settings
from app.services.units import clamp_percent, round_half_up, to_float
from app.services.upstream import fetch_json

logger = logging.getLogger(__name__)

CLEAR = "clear"
OVERCAST = "overcast"


@dataclass(frozen=True)
class DarkState:
    is_night: Optional[bool]
    sunrise: Optional[str]
    sunset: Optional[str]


@dataclass(frozen=True)
class Environment:
    cloud_cover: Optional[int]
    dark: DarkState

    @property
    def cloud_status(self) -> Optional[str]:
        if self.cloud_cover is None:
            return None
        return cloud_status(self.cloud_cover)


# ────────────────────────────────────────────────────────────
# Time helpers
# ────────────────────────────────────────────────────────────

def parse_local_time(value: Any, utc_offset_seconds: int = 0) -> Optional[datetime]:
    """Parse an ISO timestamp; naive values are taken to be at the given UTC offset."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone(timedelta(seconds=utc_offset_seconds)))
    return parsed


def _first(values: Any) -> Optional[str]:
    if isinstance(values, list) and values:
        return values[0] or None
    return None


# ────────────────────────────────────────────────────────────
# Derivations
# ────────────────────────────────────────────────────────────

def nearest_hour_cloud_cover(
    times: Sequence[Any],
    values: Sequence[Any],
    now: datetime,
    utc_offset_seconds: int = 0,
) -> Optional[int]:
    """
    Cloud cover (%) of the hourly sample closest to `now`.

    Both series must be lists of the same, nonzero length; otherwise the
    cloud data is treated as absent and None is returned.
    """
    if not isinstance(times, list) or not isinstance(values, list):
        return None
    if not times or len(times) != len(values):
        return None

    best_idx = None
    best_diff = None
    for i, raw in enumerate(times):
        ts = parse_local_time(raw, utc_offset_seconds)
        if ts is None:
            continue
        diff = abs((ts - now).total_seconds())
        if best_diff is None or diff < best_diff:
            best_diff = diff
            best_idx = i

    if best_idx is None:
        return None
    cover = to_float(values[best_idx])
    return clamp_percent(cover) if cover is not None else None


def cloud_status(cover: int) -> str:
    return CLEAR if cover <= settings.CLOUD_CLEAR_THRESHOLD else OVERCAST


def is_night(
    now: datetime,
    sunrise: Optional[datetime],
    sunset: Optional[datetime],
) -> Optional[bool]:
    """
    Day/night state for today's sunrise and sunset.

    No sunrise means polar night, no sunset means polar day, and neither
    leaves the state unknown (None).
    """
    if sunrise is not None and sunset is not None:
        return now < sunrise or now > sunset
    if sunset is not None:
        return True
    if sunrise is not None:
        return False
    return None


def visibility_score(
    probability: int,
    cloud_cover: Optional[int],
    night: Optional[bool],
) -> int:
    """Scale the aurora probability down by daylight and cloud cover."""
    night_factor = 0.0 if night is False else 1.0
    cloud_factor = 1.0 if cloud_cover is None else 1.0 - cloud_cover / 100.0
    factor = max(0.0, min(1.0, night_factor * cloud_factor))
    return round_half_up(factor * probability)


def read_environment(payload: Any, now: datetime) -> Environment:
    if not isinstance(payload, dict):
        raise ValueError("Open-Meteo response is not an object")

    offset = int(to_float(payload.get("utc_offset_seconds")) or 0)
    if abs(offset) >= 86400:
        offset = 0
    hourly = payload.get("hourly")
    daily = payload.get("daily")
    if not isinstance(hourly, dict):
        hourly = {}
    if not isinstance(daily, dict):
        daily = {}

    cover = nearest_hour_cloud_cover(
        hourly.get("time") or [],
        hourly.get("cloudcover") or [],
        now,
        offset,
    )

    sunrise_str = _first(daily.get("sunrise"))
    sunset_str = _first(daily.get("sunset"))
    night = is_night(
        now,
        parse_local_time(sunrise_str, offset),
        parse_local_time(sunset_str, offset),
    )

    return Environment(
        cloud_cover=cover,
        dark=DarkState(is_night=night, sunrise=sunrise_str, sunset=sunset_str),
    )


# ────────────────────────────────────────────────────────────
# Fetch
# ────────────────────────────────────────────────────────────

async def fetch_forecast(client: httpx.AsyncClient, lat: float, lon: float) -> Any:
    params = {
        "latitude": str(lat),
        "longitude": str(lon),
        "hourly": "cloudcover",
        "daily": "sunrise,sunset",
        "timezone": "auto",
    }
    return await fetch_json(client, settings.OPEN_METEO_URL, params=params)


async def fetch_environment(
    client: httpx.AsyncClient,
    lat: float,
    lon: float,
    now: Optional[datetime] = None,
) -> Environment:
    payload = await fetch_forecast(client, lat, lon)
    return read_environment(payload, now or datetime.now(timezone.utc))
