# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the domain logic:
# - models/: Pydantic schemas for wines, Vivino data and sweep results
# - services/: Batch enrichment sweep and Vivino lookups
#
# Code in this package should NOT import from FastAPI.
# This keeps the logic testable and reusable.
# =============================================================================
