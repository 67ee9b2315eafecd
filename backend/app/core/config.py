from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    PROJECT_NAME: str = "Borealis Hub"
    API_STR: str = "/api"

    HOST: str = "0.0.0.0"
    PORT: int = 5001
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: List[str] = ["*"]

    OVATION_URL: str = "https://services.swpc.noaa.gov/json/ovation_aurora_latest.json"
    KP_URL: str = "https://services.swpc.noaa.gov/json/planetary_k_index_1m.json"
    PLASMA_URL: str = "https://services.swpc.noaa.gov/products/solar-wind/plasma-5-minute.json"
    MAG_URL: str = "https://services.swpc.noaa.gov/products/solar-wind/mag-5-minute.json"
    OPEN_METEO_URL: str = "https://api.open-meteo.com/v1/forecast"

    # Applies to every upstream request; a timeout counts as an upstream failure
    UPSTREAM_TIMEOUT_SECONDS: float = 10.0

    # Cloud cover (%) at or below which the sky counts as clear enough
    CLOUD_CLEAR_THRESHOLD: int = 40

    class Config:
        case_sensitive = True
        env_file = ".env"

settings = Settings()
