"""
Pytest configuration and shared fixtures.

Upstream feeds are served in-process by `FakeUpstream` through an
`httpx.MockTransport`, so no test touches the network.
"""
import pytest
import httpx
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient

from app.api.deps import get_http_client
from app.core.config import settings
from app.main import app


def _route_key(url):
    parsed = httpx.URL(str(url))
    return parsed.host, parsed.path


class FakeUpstream:
    """Canned responses keyed by upstream URL (host + path, query ignored)."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def set(self, url, body=None, status=200, error=None):
        self.routes[_route_key(url)] = (body, status, error)

    def fail(self, url, status=503):
        self.set(url, body={"detail": "unavailable"}, status=status)

    def handler(self, request):
        self.calls.append(request)
        key = _route_key(request.url)
        if key not in self.routes:
            return httpx.Response(404, json={"detail": "not found"})
        body, status, error = self.routes[key]
        if error is not None:
            raise error(f"simulated failure for {request.url}", request=request)
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    def client(self):
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


# ── Sample upstream documents ──

def ovation_payload():
    return {
        "Observation Time": "2024-03-01T12:00:00Z",
        "Forecast Time": "2024-03-01T12:45:00Z",
        "Data Format": "[Longitude, Latitude, Aurora]",
        "coordinates": [
            [18, 69, 45],
            [19, 70, 80],
            [20, 70, 10],
            [0, 0, 0],
        ],
    }


def forecast_payload(now, cloud=(90, 20, 20, 90), sunrise_in=2, sunset_in=10, offset_hours=0):
    """Open-Meteo style forecast around `now`, in local time without offset."""
    tz = timezone(timedelta(hours=offset_hours))
    local_hour = now.astimezone(tz).replace(minute=0, second=0, microsecond=0)
    fmt = "%Y-%m-%dT%H:%M"
    times = [(local_hour + timedelta(hours=h)).strftime(fmt) for h in range(-1, len(cloud) - 1)]
    local_now = now.astimezone(tz)
    return {
        "latitude": 69.65,
        "longitude": 18.96,
        "utc_offset_seconds": offset_hours * 3600,
        "timezone": "Europe/Oslo",
        "hourly": {"time": times, "cloudcover": list(cloud)},
        "daily": {
            "time": [local_now.strftime("%Y-%m-%d")],
            "sunrise": [(local_now + timedelta(hours=sunrise_in)).strftime(fmt)] if sunrise_in is not None else [None],
            "sunset": [(local_now + timedelta(hours=sunset_in)).strftime(fmt)] if sunset_in is not None else [None],
        },
    }


def kp_payload():
    return [
        {"time_tag": "2024-03-01T11:58:00", "kp_index": 2, "estimated_kp": 2.33, "kp": "2M"},
        {"time_tag": "2024-03-01T11:59:00", "kp_index": 2, "estimated_kp": "1,67", "kp": "2M"},
    ]


def plasma_payload():
    return [
        ["time_tag", "density", "speed", "temperature"],
        ["2024-03-01 11:55:00.000", "4.8", "415.0", "91000"],
        ["2024-03-01 12:00:00.000", "5.1", "420.3", "95000"],
    ]


def mag_payload():
    return [
        ["time_tag", "bx_gsm", "by_gsm", "bz_gsm", "lon_gsm", "lat_gsm", "bt"],
        ["2024-03-01 11:55:00.000", "1.0", "-3.0", "-5.0", "300.0", "-40.0", "7.0"],
        ["2024-03-01 12:00:00.000", "1.2", "-3.4", "-5.6", "301.2", "-41.0", "7.8"],
    ]


@pytest.fixture
def now():
    return datetime.now(timezone.utc)


@pytest.fixture
def upstream(now):
    fake = FakeUpstream()
    fake.set(settings.OVATION_URL, ovation_payload())
    fake.set(settings.OPEN_METEO_URL, forecast_payload(now))
    fake.set(settings.KP_URL, kp_payload())
    fake.set(settings.PLASMA_URL, plasma_payload())
    fake.set(settings.MAG_URL, mag_payload())
    return fake


@pytest.fixture
def client(upstream):
    """Test client whose upstream HTTP client is backed by the fake feeds."""
    async def override_get_http_client():
        async with upstream.client() as http_client:
            yield http_client

    app.dependency_overrides[get_http_client] = override_get_http_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
