# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .enrichment_service import (
    EnrichmentService,
    VivinoFetcher,
    build_enrichment_patch,
    extract_vivino_id,
)
from .vivino_service import VivinoService, parse_vivino_wine

__all__ = [
    "EnrichmentService",
    "VivinoFetcher",
    "build_enrichment_patch",
    "extract_vivino_id",
    "VivinoService",
    "parse_vivino_wine",
]
