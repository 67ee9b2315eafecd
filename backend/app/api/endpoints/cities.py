from fastapi import APIRouter
from typing import Any, Dict, List

from app.core.cities import CITIES

router = APIRouter()


@router.get("", response_model=List[Dict[str, Any]])
def list_cities():
    """High-latitude cities the client can offer as default locations."""
    return [city._asdict() for city in CITIES]
