"""Shared test fixtures — seeded randomness and an isolated session registry."""
import os
import random
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture(autouse=True)
def clean_registry():
    """Every test starts with no live sessions."""
    from services import session_service
    session_service.clear()
    yield
    session_service.clear()


@pytest.fixture(autouse=True)
def no_dev_override(monkeypatch):
    """Tests never pick up a developer tenure/aptitude override."""
    from config import settings
    monkeypatch.setitem(settings.DEV_DEFAULTS, 'enabled', False)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def static_allot():
    """Time callable that ignores telemetry: band midpoint per score."""
    from engine.timing import compute_dynamic_time

    def _allot(score, tag):
        return compute_dynamic_time(score)
    return _allot


@pytest.fixture
def app():
    """Flask test app."""
    from app import create_app
    application = create_app()
    application.config['TESTING'] = True
    return application


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
