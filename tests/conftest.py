from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from clockdemo import clock_service, hello_service
from clockdemo.clock import TimeFormatter
from clockdemo.config import Settings

FIXED_INSTANT = datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def assets_dir(tmp_path):
    assets = tmp_path / "assets"
    assets.mkdir()
    (assets / "index.html").write_text("<html><body>clock</body></html>", encoding="utf-8")
    (assets / "app.css").write_text("body { color: black; }", encoding="utf-8")
    (assets / "sub" / "nested").mkdir(parents=True)
    (assets / "sub" / "a.txt").write_text("a", encoding="utf-8")
    return assets


@pytest.fixture
def settings(assets_dir):
    return Settings(port=0, assets_dir=str(assets_dir), push_interval=0.01, timezone="UTC")


@pytest.fixture
def fixed_formatter():
    return TimeFormatter("UTC", now=lambda: FIXED_INSTANT)


@pytest.fixture
def clock_client(settings, fixed_formatter):
    with TestClient(clock_service.create_app(settings, fixed_formatter)) as client:
        yield client


@pytest.fixture
def hello_client(settings):
    with TestClient(hello_service.create_app(settings)) as client:
        yield client
