# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - wine.py: Wine rows and cleaned Vivino data
# - enrichment.py: Batch enrichment request, progress and response bodies
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Wine Models - the rows being enriched and the data they are enriched from
# -----------------------------------------------------------------------------
from .wine import (
    ENRICHABLE_FIELDS,
    VivinoWineData,
    Wine,
)

# -----------------------------------------------------------------------------
# Enrichment Models - POST /batch-enrich and POST /vivino/fetch
# -----------------------------------------------------------------------------
from .enrichment import (
    BatchEnrichRequest,
    BatchEnrichResponse,
    BatchError,
    BatchProgress,
    BatchSummary,
    DryRunResponse,
    FetchVivinoRequest,
    FetchVivinoResponse,
)

__all__ = [
    # Wine
    "ENRICHABLE_FIELDS",
    "VivinoWineData",
    "Wine",
    # Enrichment
    "BatchEnrichRequest",
    "BatchEnrichResponse",
    "BatchError",
    "BatchProgress",
    "BatchSummary",
    "DryRunResponse",
    "FetchVivinoRequest",
    "FetchVivinoResponse",
]
