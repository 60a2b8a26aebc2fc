# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized methods for:
# - The is_admin() RPC used by the admin gate
# - Selecting wines that still need Vivino enrichment
# - Patching a single wine row
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   rows = SupabaseClient.fetch_enrichment_candidates(limit=100)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)


# Columns the sweep needs to decide what to patch
CANDIDATE_COLUMNS = (
    "id, wine_name, producer, vintage, vivino_url, rating, region, grapes, user_id"
)

# A wine is a candidate while any of these is still NULL
CANDIDATE_MISSING_FILTER = "rating.is.null,region.is.null,grapes.is.null"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries the PostgREST error code (when there is one) so callers can
    surface it without parsing the message.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        if SupabaseClient.check_is_admin(user.id):
            rows = SupabaseClient.fetch_enrichment_candidates(limit=50)
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS),
        so the sweep can see every user's wines.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @staticmethod
    def _error_code(error: Exception, fallback: str) -> str:
        """PostgREST APIError exposes .code; anything else gets the fallback."""
        code = getattr(error, "code", None)
        return str(code) if code else fallback

    @staticmethod
    def _error_message(error: Exception) -> str:
        message = getattr(error, "message", None)
        return str(message) if message else str(error)

    # -------------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------------

    @classmethod
    def check_is_admin(cls, user_id: str | UUID) -> bool:
        """
        Ask the database whether a user is an admin.

        Calls the `is_admin(check_user_id)` SQL function. Only a literal
        `True` counts as admin; NULL or any other payload is treated as
        "not admin".

        Raises:
            SupabaseClientError: If the RPC itself fails, so callers can tell
                "cannot verify" apart from "verified, not admin"
        """
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = client.rpc("is_admin", {"check_user_id": user_id_str}).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=cls._error_message(e),
                code=cls._error_code(e, "ADMIN_RPC_FAILED"),
                suggestion="Check that the is_admin() function exists and the database is reachable",
                details={"user_id": user_id_str},
            )

        logger.debug(f"is_admin({user_id_str}) -> {response.data!r}")
        return response.data is True

    # -------------------------------------------------------------------------
    # Wines
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_enrichment_candidates(cls, limit: int) -> list[dict[str, Any]]:
        """
        Fetch wines that have a Vivino URL but are missing enrichable data.

        One query, no pagination: at most `limit` rows, in whatever order
        the database returns them.

        Args:
            limit: Maximum number of rows

        Returns:
            List of wine row dicts (see CANDIDATE_COLUMNS)

        Raises:
            SupabaseClientError: If the query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table("wines")
                .select(CANDIDATE_COLUMNS)
                .not_.is_("vivino_url", "null")
                .or_(CANDIDATE_MISSING_FILTER)
                .limit(limit)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch enrichment candidates: {cls._error_message(e)}",
                code=cls._error_code(e, "FETCH_CANDIDATES_FAILED"),
                details={"limit": limit},
            )

        rows = response.data or []
        logger.debug(f"Fetched {len(rows)} enrichment candidates (limit={limit})")
        return rows

    @classmethod
    def update_wine(cls, wine_id: str | UUID, patch: dict[str, Any]) -> None:
        """
        Apply a partial update to one wine row.

        Raises:
            SupabaseClientError: If the update fails
        """
        client = cls.get_client()
        wine_id_str = normalize_uuid(wine_id)

        try:
            (
                client.table("wines")
                .update(patch)
                .eq("id", wine_id_str)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=cls._error_message(e),
                code=cls._error_code(e, "UPDATE_WINE_FAILED"),
                details={"wine_id": wine_id_str, "fields": sorted(patch)},
            )

    @classmethod
    def ping(cls) -> None:
        """Cheapest possible query, used by the readiness check."""
        cls.get_client().table("wines").select("id").limit(1).execute()
