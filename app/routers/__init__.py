# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - enrich.py: Admin batch Vivino enrichment
# - vivino.py: Vivino fetch-by-id proxy
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import enrich
from . import vivino

__all__ = [
    "health",
    "enrich",
    "vivino",
]
