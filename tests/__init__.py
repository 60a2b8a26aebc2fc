# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Cellar Enrichment API:
# - test_models.py: Pydantic model validation and progress bookkeeping
# - test_enrichment_service.py: Candidate selection and the sweep
# - test_vivino.py: Vivino payload parsing and HTTP clients
# - test_supabase_client.py: Query construction against a mocked client
# - test_auth.py: Token verification and the admin gate
# - test_api.py: Endpoint behaviour through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
