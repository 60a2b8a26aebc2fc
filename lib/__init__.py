# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable adapters and helpers:
# - supabase_client.py: Typed Supabase wrapper (admin RPC, wines table)
# - vivino_client.py: HTTP clients for Vivino and the fetch-vivino-data function
# - utils.py: Shared utilities (UUID normalization, blank checks, percentages)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import format_percent, is_blank, normalize_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Utils
    "format_percent",
    "is_blank",
    "normalize_uuid",
]
