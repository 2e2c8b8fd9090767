"""
Shared fixtures: in-memory backends and a configured sign-up app.
"""

import pytest
from fastapi.testclient import TestClient

from app.api.signup_workflow import session_store
from app.api.signup_workflow.config import SignupWorkflowConfig
from app.api.signup_workflow.routes.shared_utils import limiter

from .fakes import FakeIdentityProvider, FakeObjectStore, FakeRecordStore


@pytest.fixture(autouse=True)
def clear_state():
    limiter.enabled = False
    session_store._sessions.clear()
    yield
    session_store._sessions.clear()


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture
def record_store():
    return FakeRecordStore()


@pytest.fixture
def object_store():
    return FakeObjectStore()


@pytest.fixture
def config():
    return SignupWorkflowConfig()


@pytest.fixture
def app(identity_provider, record_store, object_store, config):
    from app.main import create_app

    return create_app(identity_provider, record_store, object_store, config)


@pytest.fixture
def client(app):
    return TestClient(app)
