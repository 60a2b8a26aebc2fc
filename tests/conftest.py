# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Mints Supabase-style HS256 access tokens
# - Provides a scripted stand-in for the Vivino fetcher
# =============================================================================

import os
import time
import uuid

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-for-hs256-signing")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
# Live sweeps in API tests should not actually wait between candidates
os.environ.setdefault("ENRICH_DELAY_SECONDS", "0")

import pytest
from jose import jwt

TEST_JWT_SECRET = os.environ["SUPABASE_JWT_SECRET"]


# =============================================================================
# Helpers
# =============================================================================

class FakeFetcher:
    """
    Scripted Vivino fetcher.

    `responses` maps Vivino id -> payload dict, None (lookup failed) or an
    exception instance to raise. Unknown ids behave like failed lookups.
    """

    def __init__(self, responses: dict | None = None):
        self.responses = responses or {}
        self.calls: list[str] = []

    async def fetch(self, vivino_id: str):
        self.calls.append(vivino_id)
        result = self.responses.get(vivino_id)
        if isinstance(result, Exception):
            raise result
        return result


def make_token(
    user_id: str | None = None,
    email: str | None = "sommelier@example.com",
    expires_in: int = 3600,
    secret: str = TEST_JWT_SECRET,
    audience: str = "authenticated",
    **claims,
) -> str:
    """Create an HS256 token shaped like a Supabase access token."""
    now = int(time.time())
    payload = {
        "sub": user_id or str(uuid.uuid4()),
        "email": email,
        "aud": audience,
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def user_id():
    """A stable user id for the current test."""
    return str(uuid.uuid4())


@pytest.fixture
def auth_headers(user_id):
    """Authorization header carrying a valid token for `user_id`."""
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def fake_fetcher():
    """Factory for FakeFetcher instances."""
    return FakeFetcher


@pytest.fixture
def wine_row():
    """Factory for candidate rows as returned by the wines query."""

    def _make(
        wine_id: str = "wine-1",
        vivino_url: str | None = "https://www.vivino.com/w/1234567",
        **overrides,
    ) -> dict:
        row = {
            "id": wine_id,
            "user_id": "6b1f3c5e-1111-4c2a-9e3d-0a1b2c3d4e5f",
            "producer": "Ridge",
            "wine_name": "Monte Bello",
            "vintage": 2016,
            "vivino_url": vivino_url,
            "rating": None,
            "region": None,
            "grapes": None,
        }
        row.update(overrides)
        return row

    return _make


@pytest.fixture
def vivino_api_payload():
    """Raw payload from https://www.vivino.com/api/wines/{id}."""
    return {
        "wine": {
            "id": 1234567,
            "name": "Monte Bello",
            "winery": {"id": 1, "name": "Ridge Vineyards"},
            "statistics": {"ratings_average": 4.4637, "ratings_count": 8211},
            "image": {"location": "//images.vivino.com/thumbs/monte-bello.png"},
            "vintage": {"year": 2016},
            "region": {
                "name": "Santa Cruz Mountains",
                "country": {"code": "us", "name": "United States"},
            },
            "primary_varietal": {"name": "Cabernet Sauvignon"},
        }
    }
