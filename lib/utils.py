# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from typing import Any
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Example:
        wine_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        wine_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Value Helpers
# =============================================================================

def is_blank(value: Any) -> bool:
    """
    True for values a wine row treats as "not filled in yet".

    None, empty/whitespace strings and empty lists all count as blank.
    Zero does not: a 0 vintage or price is still a value.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def format_percent(numerator: int, denominator: int) -> str:
    """
    Format a ratio as a one-decimal percentage string.

    Example:
        format_percent(1, 3)  # "33.3%"
        format_percent(0, 0)  # "0%"
    """
    if denominator <= 0:
        return "0%"
    return f"{numerator / denominator * 100:.1f}%"
