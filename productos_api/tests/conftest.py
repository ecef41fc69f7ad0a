"""Shared fixtures: every test gets its own backing file under tmp_path."""

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from config import Settings  # noqa: E402
from main import create_app  # noqa: E402
from store import ProductStore  # noqa: E402


@pytest.fixture
def data_path(tmp_path: Path) -> Path:
    path = tmp_path / "productos.json"
    path.write_text("[]", encoding="utf-8")
    return path


@pytest.fixture
def store(data_path: Path) -> ProductStore:
    return ProductStore(data_path, lock_timeout=5.0)


@pytest.fixture
def make_client(data_path: Path):
    def _make(**overrides) -> TestClient:
        settings = Settings(data_path=data_path, **overrides)
        return TestClient(create_app(settings))

    return _make


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
