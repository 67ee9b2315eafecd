"""
OVATION Aurora Grid Service.

Resolves the aurora probability at an arbitrary point from the NOAA SWPC
OVATION nowcast, an irregular grid of [lon, lat, value] triples.
"""

import httpx
import logging
import numpy as np
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from app.core.config import settings
from app.core.errors import UpstreamDataError
from app.services.units import clamp_percent, to_float
from app.services.upstream import fetch_json

logger = logging.getLogger(__name__)

SOURCE_LABEL = "NOAA OVATION (SWPC)"


@dataclass(frozen=True)
class GridSample:
    lon: float
    lat: float
    value: Any


@dataclass(frozen=True)
class GridProbability:
    probability: int
    sample: GridSample
    observation_time: Optional[Any]
    forecast_time: Optional[Any]


def parse_grid(payload: Any) -> List[GridSample]:
    """Extract the coordinate triples from an OVATION document."""
    coords = payload.get("coordinates") if isinstance(payload, dict) else None
    if not isinstance(coords, list) or not coords:
        raise UpstreamDataError("NOAA data missing coordinates")

    samples = []
    for row in coords:
        # Short or malformed rows keep missing fields; they only fail the
        # lookup if they turn out to be the nearest sample
        cells = list(row) if isinstance(row, (list, tuple)) else []
        cells += [None] * (3 - len(cells))
        lon, lat = to_float(cells[0]), to_float(cells[1])
        samples.append(GridSample(
            lon=lon if lon is not None else float("nan"),
            lat=lat if lat is not None else float("nan"),
            value=cells[2],
        ))
    return samples


def nearest_sample(lat: float, lon: float, samples: Sequence[GridSample]) -> GridSample:
    """
    Return the sample with the smallest squared (lat, lon) distance to the query.

    Ties go to the sample that appears first. Samples with unusable coordinates
    are never selected.
    """
    if not samples:
        raise UpstreamDataError("NOAA data missing coordinates")

    lats = np.array([s.lat for s in samples], dtype=float)
    lons = np.array([s.lon for s in samples], dtype=float)
    dist2 = (lats - lat) ** 2 + (lons - lon) ** 2
    dist2 = np.where(np.isfinite(dist2), dist2, np.inf)

    idx = int(np.argmin(dist2))
    if not np.isfinite(dist2[idx]):
        raise UpstreamDataError("NOAA grid has no usable coordinates")
    return samples[idx]


def resolve_probability(lat: float, lon: float, payload: Any) -> GridProbability:
    sample = nearest_sample(lat, lon, parse_grid(payload))
    value = to_float(sample.value)
    if value is None:
        raise UpstreamDataError("NOAA value not numeric")

    return GridProbability(
        probability=clamp_percent(value),
        sample=sample,
        observation_time=payload.get("Observation Time") or None,
        forecast_time=payload.get("Forecast Time") or None,
    )


async def fetch_aurora_grid(client: httpx.AsyncClient) -> Any:
    return await fetch_json(client, settings.OVATION_URL)


async def fetch_aurora_probability(
    client: httpx.AsyncClient, lat: float, lon: float
) -> GridProbability:
    payload = await fetch_aurora_grid(client)
    result = resolve_probability(lat, lon, payload)
    logger.debug(
        f"OVATION nearest to ({lat}, {lon}) is ({result.sample.lat}, {result.sample.lon}) "
        f"-> {result.probability}%"
    )
    return result
