import pytest

from config.settings import get_settings
from windprofile.data.models import WindLayer

SETTINGS_ENV_VARS = [
    "IMPORT_ALTITUDE_UNIT",
    "IMPORT_SPEED_UNIT",
    "IMPORT_DIRECTION_MODE",
    "IMPORT_DIRECTION_REFERENCE",
    "IMPORT_ALTITUDE_REFERENCE",
    "LAUNCH_ELEVATION",
    "MAGNETIC_DECLINATION",
    "WIND_DIRECTION_MODE",
    "EXPORT_DIR",
]


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Run every test against default settings."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def pibal_xml() -> str:
    """Pibal XML in feet and knots with one unreadable row."""
    return (
        "<wRs><SpdUnits>Kts</SpdUnits><AltUnits>Feet</AltUnits></wRs>\n"
        "<wR>600 180 20</wR>\n"
        "<wR>bad</wR>\n"
    )


@pytest.fixture
def sounding_dat() -> str:
    """Windsond style whitespace sounding with a comment and header."""
    return (
        "# Windsond export\n"
        "ALT DIR SPD\n"
        "500   200  12.5\n"
        "1000  220  18.0\n"
        "1500  235  22.4\n"
    )


@pytest.fixture
def make_layer():
    """Factory for canonical wind layers."""
    def _make(altitude=600, direction=90, speed=10.0, **kwargs):
        return WindLayer(altitude=altitude, direction=direction, speed=speed, **kwargs)
    return _make
