from pydantic import BaseModel
from typing import Optional
import os

from dotenv import load_dotenv

load_dotenv(override=False)


def _float_env(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


class Settings(BaseModel):
    api_key: str = os.getenv("BIZIMPORT_API_KEY", "")
    google_places_api_key: str = os.getenv("GOOGLE_PLACES_API_KEY", "")

    # Where an empty location search is centered
    default_center_lat: Optional[float] = _float_env("DEFAULT_CENTER_LAT")
    default_center_lng: Optional[float] = _float_env("DEFAULT_CENTER_LNG")
    default_location_name: str = os.getenv("DEFAULT_LOCATION_NAME", "")

    country_code: str = os.getenv("COUNTRY_CODE", "GB")
    country_name: str = os.getenv("COUNTRY_NAME", "United Kingdom")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

settings = Settings()
