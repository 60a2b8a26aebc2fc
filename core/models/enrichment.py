# =============================================================================
# core/models/enrichment.py - Batch Enrichment Schemas
# =============================================================================
# These models define the API contract for POST /batch-enrich:
# - BatchEnrichRequest: {dryRun, limit}
# - BatchProgress: per-sweep counters, mutated once per candidate
# - DryRunResponse / BatchEnrichResponse: the two success bodies
#
# Wire names are camelCase (dryRun, successRate, winesToProcess) to match
# the admin page that calls this endpoint; Python attributes stay snake_case.
# =============================================================================

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.config import settings
from lib.utils import format_percent

from .wine import VivinoWineData, Wine


class BatchEnrichRequest(BaseModel):
    """
    Options for one enrichment sweep.

    Example:
        {"dryRun": true, "limit": 50}
    """

    model_config = ConfigDict(populate_by_name=True)

    dry_run: bool = Field(
        default=False,
        alias="dryRun",
        description="Only report candidates; no Vivino calls, no writes"
    )

    limit: int = Field(
        default_factory=lambda: settings.ENRICH_DEFAULT_LIMIT,
        ge=1,
        description="Maximum number of candidate wines to select"
    )


class BatchError(BaseModel):
    """A candidate whose write failed."""
    wine_id: str
    error: str


class BatchProgress(BaseModel):
    """
    Counters for a single sweep.

    `processed` always equals enriched + failed + skipped: every outcome
    goes through one of the record_* helpers, which bump both.
    """

    total: int = 0
    processed: int = 0
    enriched: int = 0
    failed: int = 0
    skipped: int = 0
    errors: list[BatchError] = Field(default_factory=list)

    def record_enriched(self) -> None:
        self.processed += 1
        self.enriched += 1

    def record_skipped(self) -> None:
        self.processed += 1
        self.skipped += 1

    def record_failed(self, wine_id: str, error: str) -> None:
        self.processed += 1
        self.failed += 1
        self.errors.append(BatchError(wine_id=wine_id, error=error))

    def success_rate(self) -> str:
        """enriched / total as "NN.N%" ("0%" for an empty sweep)."""
        return format_percent(self.enriched, self.total)


class BatchSummary(BaseModel):
    """Flat summary rendered by the admin page after a live run."""

    model_config = ConfigDict(populate_by_name=True)

    total: int
    enriched: int
    skipped: int
    failed: int
    success_rate: str = Field(..., alias="successRate")

    @classmethod
    def from_progress(cls, progress: BatchProgress) -> "BatchSummary":
        return cls(
            total=progress.total,
            enriched=progress.enriched,
            skipped=progress.skipped,
            failed=progress.failed,
            success_rate=progress.success_rate(),
        )


class DryRunResponse(BaseModel):
    """Body returned for {"dryRun": true}."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = "Dry run completed"
    progress: BatchProgress
    wines_to_process: list[Wine] = Field(default_factory=list, alias="winesToProcess")


class BatchEnrichResponse(BaseModel):
    """Body returned after a live sweep."""

    message: str = "Batch enrichment completed"
    progress: BatchProgress
    summary: BatchSummary


# =============================================================================
# Vivino fetch-by-id
# =============================================================================

class FetchVivinoRequest(BaseModel):
    """Body for POST /vivino/fetch."""
    wine_id: str = Field(..., min_length=1, pattern=r"^\d+$", description="Vivino wine id")

    @field_validator("wine_id", mode="before")
    @classmethod
    def _stringify_wine_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class FetchVivinoResponse(BaseModel):
    """
    Result envelope of the fetch-by-id call.

    Failures are reported in-band (success=false) with HTTP 200.
    """
    success: bool
    data: VivinoWineData | None = None
    error: str | None = None
