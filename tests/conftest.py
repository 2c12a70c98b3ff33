import pytest

from geopoints.config.settings import get_settings


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    for name in (
        "GEOPOINTS_ENV",
        "GEOPOINTS_CONFIG_PATH",
        "GEOPOINTS_SQL_CONFIG",
        "GEOPOINTS_LOG_LEVEL",
        "GEOPOINTS_GEOCODER_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
