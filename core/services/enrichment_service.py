# =============================================================================
# core/services/enrichment_service.py - Batch Vivino Enrichment
# =============================================================================
# Fills in missing rating / region / grapes on wines that link to Vivino.
#
# Flow for one request:
#   select_candidates(limit)  -> one query, at most `limit` wines
#   dry_run(...)              -> report only, no Vivino calls, no writes
#   run_sweep(...)            -> for each candidate, in order:
#       parse Vivino id -> fetch -> sleep -> build patch -> update
#
# The sweep is strictly sequential. The fixed sleep after every fetch is
# the whole rate limiter. Nothing is retried and nothing is checkpointed;
# re-running is safe because a patch never touches a filled-in field.
# =============================================================================

import asyncio
import logging
import re
from typing import Any, Protocol

from app.config import settings
from core.models.enrichment import (
    BatchEnrichResponse,
    BatchProgress,
    BatchSummary,
    DryRunResponse,
)
from core.models.wine import ENRICHABLE_FIELDS, VivinoWineData, Wine
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)


VIVINO_ID_PATTERN = re.compile(r"/w/(\d+)")


class VivinoFetcher(Protocol):
    """Anything that can look up Vivino data by wine id (see VivinoFunctionClient)."""

    async def fetch(self, vivino_id: str) -> dict[str, Any] | None:
        ...


def extract_vivino_id(url: str | None) -> str | None:
    """
    Pull the numeric Vivino wine id out of a wine page URL.

    Example:
        extract_vivino_id("https://www.vivino.com/w/1234567?year=2016")  # "1234567"
        extract_vivino_id("https://www.vivino.com/search?q=ridge")      # None
    """
    if not url:
        return None
    match = VIVINO_ID_PATTERN.search(url)
    return match.group(1) if match else None


def build_enrichment_patch(wine: Wine, data: VivinoWineData) -> dict[str, Any]:
    """
    Compute the sparse update for one wine.

    A field is included only if Vivino has a value for it AND the wine's
    current value is empty. Existing values are never overwritten.
    """
    patch: dict[str, Any] = {}
    for field in ENRICHABLE_FIELDS:
        value = data.value_for(field)
        if value is not None and wine.is_missing(field):
            patch[field] = value
    return patch


class EnrichmentService:
    """
    Service for the admin batch enrichment sweep.

    Provides a clean interface between the batch-enrich route and the
    database / Vivino collaborators.
    """

    @staticmethod
    def select_candidates(limit: int) -> list[Wine]:
        """
        Fetch the candidate set once, in query order.

        Raises:
            SupabaseClientError: If the query fails
        """
        rows = SupabaseClient.fetch_enrichment_candidates(limit)
        wines = [Wine.model_validate(row) for row in rows]
        logger.info(f"Found {len(wines)} wines to process (limit={limit})")
        return wines

    @staticmethod
    def dry_run(candidates: list[Wine], sample_size: int | None = None) -> DryRunResponse:
        """Report what a live run would touch without touching anything."""
        if sample_size is None:
            sample_size = settings.DRY_RUN_SAMPLE_SIZE
        return DryRunResponse(
            progress=BatchProgress(total=len(candidates)),
            wines_to_process=candidates[:sample_size],
        )

    @staticmethod
    async def enrich_one(
        wine: Wine,
        fetcher: VivinoFetcher,
        progress: BatchProgress,
        delay_seconds: float,
    ) -> None:
        """
        Process a single candidate and record exactly one outcome.

        Fetch failures and empty results are skips; only a failed write
        lands in progress.errors.
        """
        vivino_id = extract_vivino_id(wine.vivino_url)
        if vivino_id is None:
            logger.info(f"Skipping {wine.id}: invalid Vivino URL format")
            progress.record_skipped()
            return

        try:
            payload = await fetcher.fetch(vivino_id)
        finally:
            await asyncio.sleep(delay_seconds)

        if payload is None:
            logger.info(f"Skipping {wine.id}: Vivino data not found")
            progress.record_skipped()
            return

        data = VivinoWineData.from_payload(payload)
        if not data.has_enrichable_data():
            logger.info(f"Skipping {wine.id}: no enrichable data found")
            progress.record_skipped()
            return

        patch = build_enrichment_patch(wine, data)
        if not patch:
            logger.info(f"Skipping {wine.id}: no new data to add")
            progress.record_skipped()
            return

        try:
            SupabaseClient.update_wine(wine.id, patch)
        except SupabaseClientError as e:
            logger.error(f"Error updating wine {wine.id}: {e.message}")
            progress.record_failed(wine.id, e.message)
            return

        logger.info(f"Enriched {wine.id} with: {', '.join(patch)}")
        progress.record_enriched()

    @staticmethod
    async def run_sweep(
        candidates: list[Wine],
        fetcher: VivinoFetcher,
        delay_seconds: float | None = None,
    ) -> BatchProgress:
        """
        Enrich every candidate, one at a time, in list order.

        A failing candidate never stops the sweep: unexpected errors are
        recorded against that wine and the loop moves on.
        """
        if delay_seconds is None:
            delay_seconds = settings.ENRICH_DELAY_SECONDS

        progress = BatchProgress(total=len(candidates))

        for wine in candidates:
            logger.info(
                f"[{progress.processed + 1}/{progress.total}] Processing: {wine.label} (ID: {wine.id})"
            )
            try:
                await EnrichmentService.enrich_one(wine, fetcher, progress, delay_seconds)
            except Exception as e:
                logger.exception(f"Error processing wine {wine.id}: {e}")
                progress.record_failed(wine.id, str(e) or type(e).__name__)

        logger.info(
            f"Sweep completed: total={progress.total} enriched={progress.enriched} "
            f"skipped={progress.skipped} failed={progress.failed}"
        )
        return progress

    @staticmethod
    def build_response(progress: BatchProgress) -> BatchEnrichResponse:
        return BatchEnrichResponse(
            progress=progress,
            summary=BatchSummary.from_progress(progress),
        )
