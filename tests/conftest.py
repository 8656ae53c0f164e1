"""
Pytest fixtures for progression-api tests.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Generator

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from api.deps import get_current_user, get_definition_repo, get_instance_repo, get_settings
from backend.main import create_app
from backend.settings import Settings
from models.program_definition import ProgramDefinition
from tests.definitions import (
    GZCLP_CONFIG,
    gzclp_definition,
    ladder_definition,
    percentage_definition,
    training_max_definition,
)
from tests.fakes import FakeProgramDefinitionRepository, FakeProgramInstanceRepository


# ---------------------------------------------------------------------------
# Auth Mock
# ---------------------------------------------------------------------------

TEST_USER_ID = "test-user-123"
OTHER_USER_ID = "other-user-456"


async def mock_get_current_user() -> str:
    """Mock auth dependency that returns a test user."""
    return TEST_USER_ID


# ---------------------------------------------------------------------------
# Mock Environment Variables
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Set mock environment variables for tests."""
    monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "test-supabase-key")
    monkeypatch.setenv("ENVIRONMENT", "test")


# ---------------------------------------------------------------------------
# Domain Fixtures - Definitions
# ---------------------------------------------------------------------------


@pytest.fixture
def gzclp() -> ProgramDefinition:
    """Two-day GZCLP-style definition."""
    return ProgramDefinition.model_validate(gzclp_definition())


@pytest.fixture
def ladder() -> ProgramDefinition:
    """Single-slot stage ladder definition."""
    return ProgramDefinition.model_validate(ladder_definition())


@pytest.fixture
def percentage() -> ProgramDefinition:
    """Prescription ladder definition."""
    return ProgramDefinition.model_validate(percentage_definition())


@pytest.fixture
def training_max() -> ProgramDefinition:
    """Definition with two slots sharing a training max."""
    return ProgramDefinition.model_validate(training_max_definition())


@pytest.fixture
def gzclp_config() -> Dict[str, Any]:
    """Raw GZCLP config as a client would send it."""
    return dict(GZCLP_CONFIG)


# ---------------------------------------------------------------------------
# Fake Repositories
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_definition_repo() -> FakeProgramDefinitionRepository:
    """Definition repository seeded with every test definition."""
    repo = FakeProgramDefinitionRepository()
    repo.seed(
        [
            gzclp_definition(),
            ladder_definition(),
            percentage_definition(),
            training_max_definition(),
        ]
    )
    return repo


@pytest.fixture
def fake_instance_repo() -> FakeProgramInstanceRepository:
    """Empty instance repository."""
    return FakeProgramInstanceRepository()


# ---------------------------------------------------------------------------
# Test App and Client
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Test settings with minimal configuration."""
    return Settings(
        environment="test",
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-key",
        _env_file=None,
    )


@pytest.fixture(scope="session")
def app(test_settings):
    """Create test application instance."""
    return create_app(settings=test_settings)


@pytest.fixture
def client(
    app,
    test_settings,
    fake_definition_repo,
    fake_instance_repo,
) -> Generator[TestClient, None, None]:
    """
    Per-test FastAPI TestClient backed by fake repositories.
    Properly cleans up dependency overrides after each test.
    """
    app.dependency_overrides[get_current_user] = mock_get_current_user
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_definition_repo] = lambda: fake_definition_repo
    app.dependency_overrides[get_instance_repo] = lambda: fake_instance_repo
    yield TestClient(app)
    app.dependency_overrides.clear()
