# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides a chainable fake for Supabase query builders
# - Provides an API test client with auth and storage overridden
# =============================================================================

import os
from unittest.mock import MagicMock
from uuid import UUID

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length-123")
os.environ.setdefault("AWS_S3_BUCKET", "test-bucket")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

USER_ID = UUID("11111111-1111-4111-8111-111111111111")
OTHER_USER_ID = UUID("22222222-2222-4222-8222-222222222222")


# =============================================================================
# Supabase Fakes
# =============================================================================

QUERY_METHODS = (
    "select", "insert", "update", "upsert", "delete",
    "eq", "ilike", "order", "range", "single",
)


def make_query(data=None, count=None, error: Exception | None = None) -> MagicMock:
    """
    Fake PostgREST query builder.

    Every builder method returns the same mock, so any chain ends in
    execute(), which returns `data`/`count` or raises `error`.
    """
    query = MagicMock()
    for name in QUERY_METHODS:
        getattr(query, name).return_value = query

    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value = MagicMock(data=data, count=count)
    return query


def make_client(*queries: MagicMock) -> MagicMock:
    """
    Fake Supabase client whose table() hands out `queries` in order.

    A single query is reused for every table() call.
    """
    client = MagicMock()
    if len(queries) == 1:
        client.table.return_value = queries[0]
    else:
        client.table.side_effect = list(queries)
    return client


@pytest.fixture
def user_id() -> UUID:
    return USER_ID


@pytest.fixture
def file_row():
    """A files table row owned by USER_ID."""
    return {
        "id": "33333333-3333-4333-8333-333333333333",
        "user_id": str(USER_ID),
        "s3_key": f"uploads/{USER_ID}/sales-1700000000000-ab12cd34.csv",
        "original_name": "sales.csv",
        "status": "uploaded",
        "error_message": None,
        "created_at": "2024-01-15T10:30:00+00:00",
        "last_processing_date": None,
        "processed_s3_key": None,
    }


@pytest.fixture
def template_config():
    """A stored (camelCase) template document."""
    return {
        "type": "csv",
        "intro": "Hello team,",
        "columns": [
            {"id": "col-0", "name": "Region", "selected": True, "order": 0, "preface": "Region: ", "closing": ""},
            {"id": "col-1", "name": "Revenue", "selected": False, "order": 1, "preface": "", "closing": ""},
        ],
        "conclusion": "Thanks",
        "validation": {"rules": ["trim"], "allowedValues": None, "errorMessage": ""},
    }


@pytest.fixture
def template_row(template_config):
    """A message_templates row owned by USER_ID."""
    return {
        "id": "44444444-4444-4444-8444-444444444444",
        "user_id": str(USER_ID),
        "name": "Weekly update",
        "description": None,
        "type": "csv",
        "config": template_config,
        "folder_id": None,
        "created_at": "2024-01-15T10:30:00+00:00",
        "updated_at": "2024-01-16T10:30:00+00:00",
    }


# =============================================================================
# API Client
# =============================================================================

@pytest.fixture
def storage():
    """Fake StorageService."""
    fake = MagicMock()
    fake.bucket = "test-bucket"
    return fake


@pytest.fixture
def api_client(storage):
    """
    TestClient with the current user and storage overridden.

    Used without a `with` block so the Redis listener never starts.
    """
    from fastapi.testclient import TestClient

    from app.auth.dependencies import get_current_user
    from app.auth.models import AuthUser
    from app.dependencies import get_storage
    from app.main import app

    app.dependency_overrides[get_current_user] = lambda: AuthUser(
        id=USER_ID,
        email="user@example.com",
        access_token="test-token",
        expires_at=1_900_000_000,
    )
    app.dependency_overrides[get_storage] = lambda: storage

    yield TestClient(app)

    app.dependency_overrides.clear()
