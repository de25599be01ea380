import pytest

from bizimport.core.nodes.location import LocationConfig
from bizimport.providers.base import GeocodeResult

from .helpers import LONDON


@pytest.fixture
def location_config():
    return LocationConfig(
        default_lat=LONDON[0],
        default_lng=LONDON[1],
        default_name="London",
        country_code="GB",
        country_name="United Kingdom",
    )


@pytest.fixture
def geocoded_bristol():
    return GeocodeResult(
        lat=51.4545,
        lng=-2.5879,
        formatted_address="Bristol, UK",
        country_code="GB",
        country_name="United Kingdom",
    )
