# =============================================================================
# tests/test_supabase_client.py - Supabase Wrapper Tests
# =============================================================================
# Checks the PostgREST calls the wrapper builds, against a MagicMock client.
# =============================================================================

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from lib.supabase_client import (
    CANDIDATE_COLUMNS,
    CANDIDATE_MISSING_FILTER,
    SupabaseClient,
    SupabaseClientError,
)


class FakeAPIError(Exception):
    """Shaped like postgrest.exceptions.APIError."""

    def __init__(self, message, code):
        super().__init__(message)
        self.message = message
        self.code = code


@pytest.fixture
def client():
    mock = MagicMock()
    with patch.object(SupabaseClient, "get_client", return_value=mock):
        yield mock


class TestCheckIsAdmin:
    """Test the is_admin RPC wrapper."""

    def test_true(self, client):
        client.rpc.return_value.execute.return_value = SimpleNamespace(data=True)

        assert SupabaseClient.check_is_admin("user-1") is True
        client.rpc.assert_called_once_with("is_admin", {"check_user_id": "user-1"})

    @pytest.mark.parametrize("data", [False, None, "true", 1])
    def test_anything_but_true_is_not_admin(self, client, data):
        client.rpc.return_value.execute.return_value = SimpleNamespace(data=data)

        assert SupabaseClient.check_is_admin("user-1") is False

    def test_rpc_error_raises(self, client):
        client.rpc.return_value.execute.side_effect = FakeAPIError("function is_admin does not exist", "42883")

        with pytest.raises(SupabaseClientError) as exc_info:
            SupabaseClient.check_is_admin("user-1")

        assert exc_info.value.code == "42883"
        assert exc_info.value.message == "function is_admin does not exist"


class TestFetchEnrichmentCandidates:
    """Test the candidate query."""

    def test_query_shape(self, client):
        query = client.table.return_value.select.return_value
        limited = query.not_.is_.return_value.or_.return_value.limit.return_value
        limited.execute.return_value = SimpleNamespace(data=[{"id": "wine-1"}])

        rows = SupabaseClient.fetch_enrichment_candidates(limit=25)

        client.table.assert_called_once_with("wines")
        client.table.return_value.select.assert_called_once_with(CANDIDATE_COLUMNS)
        query.not_.is_.assert_called_once_with("vivino_url", "null")
        query.not_.is_.return_value.or_.assert_called_once_with(CANDIDATE_MISSING_FILTER)
        query.not_.is_.return_value.or_.return_value.limit.assert_called_once_with(25)
        assert rows == [{"id": "wine-1"}]

    def test_no_data(self, client):
        query = client.table.return_value.select.return_value
        query.not_.is_.return_value.or_.return_value.limit.return_value.execute.return_value = (
            SimpleNamespace(data=None)
        )

        assert SupabaseClient.fetch_enrichment_candidates(limit=5) == []

    def test_error(self, client):
        client.table.return_value.select.side_effect = FakeAPIError("relation does not exist", "42P01")

        with pytest.raises(SupabaseClientError) as exc_info:
            SupabaseClient.fetch_enrichment_candidates(limit=5)

        assert exc_info.value.code == "42P01"


class TestUpdateWine:
    """Test single-row patches."""

    def test_update(self, client):
        SupabaseClient.update_wine("wine-1", {"rating": 4.2})

        client.table.assert_called_once_with("wines")
        client.table.return_value.update.assert_called_once_with({"rating": 4.2})
        client.table.return_value.update.return_value.eq.assert_called_once_with("id", "wine-1")

    def test_update_error(self, client):
        client.table.return_value.update.return_value.eq.return_value.execute.side_effect = (
            FakeAPIError("permission denied for table wines", "42501")
        )

        with pytest.raises(SupabaseClientError) as exc_info:
            SupabaseClient.update_wine("wine-1", {"region": "Rioja"})

        assert exc_info.value.message == "permission denied for table wines"
        assert exc_info.value.details == {"wine_id": "wine-1", "fields": ["region"]}
