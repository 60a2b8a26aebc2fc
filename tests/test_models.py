# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the wine / Vivino / sweep models:
# - Candidate rows parse into Wine correctly
# - VivinoWineData knows when it has something to contribute
# - BatchProgress keeps processed == enriched + failed + skipped
# - Request/response bodies use the camelCase wire names
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models import (
    BatchEnrichRequest,
    BatchEnrichResponse,
    BatchProgress,
    BatchSummary,
    DryRunResponse,
    FetchVivinoRequest,
    VivinoWineData,
    Wine,
)


# =============================================================================
# Wine Tests
# =============================================================================

class TestWine:
    """Tests for the Wine candidate model."""

    def test_from_row(self, wine_row):
        """Test parsing a row from the wines query."""
        wine = Wine.model_validate(wine_row(region="Napa Valley", grapes=["Merlot"]))

        assert wine.id == "wine-1"
        assert wine.vintage == 2016
        assert wine.region == "Napa Valley"
        assert wine.grapes == ["Merlot"]

    def test_extra_columns_ignored(self, wine_row):
        """Columns the sweep doesn't use are dropped."""
        wine = Wine.model_validate(wine_row(color="red", notes="decant"))
        assert not hasattr(wine, "color")

    def test_uuid_ids_become_strings(self, wine_row):
        import uuid
        wine_id = uuid.uuid4()
        wine = Wine.model_validate(wine_row(wine_id=wine_id))
        assert wine.id == str(wine_id)

    def test_is_missing(self, wine_row):
        """None, blank strings and empty lists all count as missing."""
        wine = Wine.model_validate(wine_row(rating=3.9, region="  ", grapes=[]))

        assert wine.is_missing("rating") is False
        assert wine.is_missing("region") is True
        assert wine.is_missing("grapes") is True

    def test_single_grape_string_becomes_list(self, wine_row):
        wine = Wine.model_validate(wine_row(grapes="Syrah"))
        assert wine.grapes == ["Syrah"]

    def test_label(self, wine_row):
        assert Wine.model_validate(wine_row()).label == "Ridge Monte Bello 2016"
        assert Wine.model_validate(
            wine_row(producer=None, wine_name=None, vintage=None)
        ).label == "wine-1"


# =============================================================================
# VivinoWineData Tests
# =============================================================================

class TestVivinoWineData:
    """Tests for cleaned Vivino data."""

    def test_has_enrichable_data(self):
        assert VivinoWineData(rating=4.2).has_enrichable_data() is True
        assert VivinoWineData(region="Rioja").has_enrichable_data() is True
        assert VivinoWineData(grapes=["Tempranillo"]).has_enrichable_data() is True

    def test_all_null_is_not_enrichable(self):
        """rating/region/grapes all null means there's nothing to add."""
        data = VivinoWineData.from_payload({"rating": None, "region": None, "grapes": None})
        assert data.has_enrichable_data() is False

    def test_zero_rating_counts_as_missing(self):
        """The fetch function reports "no rating" as 0."""
        data = VivinoWineData(rating=0)

        assert data.value_for("rating") is None
        assert data.has_enrichable_data() is False

    def test_other_fields_alone_are_not_enrichable(self):
        data = VivinoWineData(name="Monte Bello", country="United States", price=250.0)
        assert data.has_enrichable_data() is False

    def test_from_payload_maps_single_grape(self):
        data = VivinoWineData.from_payload({"wine_id": 1234567, "grape": "Nebbiolo"})

        assert data.wine_id == "1234567"
        assert data.grapes == ["Nebbiolo"]

    def test_from_payload_prefers_grapes_list(self):
        data = VivinoWineData.from_payload(
            {"grape": "Grenache", "grapes": ["Grenache", "Syrah", "Mourvedre"]}
        )
        assert data.grapes == ["Grenache", "Syrah", "Mourvedre"]

    def test_malformed_descriptive_fields_fall_back_to_defaults(self):
        data = VivinoWineData.from_payload(
            {"rating": 4.2, "vintage": "N.V.", "price": "call", "rating_count": "many", "name": ["x"]}
        )

        assert data.rating == 4.2
        assert data.vintage is None
        assert data.price is None
        assert data.rating_count == 0
        assert data.name == ""
        assert data.has_enrichable_data() is True

    def test_malformed_rating_still_rejected(self):
        with pytest.raises(ValidationError):
            VivinoWineData.from_payload({"rating": "excellent"})


# =============================================================================
# BatchProgress Tests
# =============================================================================

class TestBatchProgress:
    """Tests for the sweep counters."""

    def test_defaults(self):
        progress = BatchProgress()

        assert progress.total == 0
        assert progress.processed == 0
        assert progress.errors == []

    def test_each_outcome_counts_as_processed(self):
        progress = BatchProgress(total=3)

        progress.record_enriched()
        progress.record_skipped()
        progress.record_failed("wine-3", "duplicate key")

        assert progress.processed == 3
        assert progress.processed == progress.enriched + progress.failed + progress.skipped
        assert progress.errors[0].wine_id == "wine-3"
        assert progress.errors[0].error == "duplicate key"

    def test_success_rate(self):
        progress = BatchProgress(total=3)
        progress.record_enriched()

        assert progress.success_rate() == "33.3%"

    def test_success_rate_counts_skips_against_total(self):
        progress = BatchProgress(total=4)
        progress.record_enriched()
        progress.record_enriched()
        progress.record_skipped()
        progress.record_skipped()

        assert progress.success_rate() == "50.0%"

    def test_success_rate_empty_sweep(self):
        assert BatchProgress().success_rate() == "0%"


# =============================================================================
# Request / Response Tests
# =============================================================================

class TestBatchEnrichRequest:
    """Tests for the {dryRun, limit} body."""

    def test_defaults(self):
        request = BatchEnrichRequest()

        assert request.dry_run is False
        assert request.limit == 1000

    def test_camel_case_body(self):
        request = BatchEnrichRequest.model_validate({"dryRun": True, "limit": 25})

        assert request.dry_run is True
        assert request.limit == 25

    @pytest.mark.parametrize("limit", [0, -5])
    def test_limit_must_be_positive(self, limit):
        with pytest.raises(ValidationError):
            BatchEnrichRequest.model_validate({"limit": limit})


class TestResponses:
    """Tests for response serialization."""

    def test_summary_wire_names(self):
        progress = BatchProgress(total=2)
        progress.record_enriched()
        progress.record_skipped()

        body = BatchEnrichResponse(
            progress=progress,
            summary=BatchSummary.from_progress(progress),
        ).model_dump(by_alias=True)

        assert body["message"] == "Batch enrichment completed"
        assert body["summary"] == {
            "total": 2,
            "enriched": 1,
            "skipped": 1,
            "failed": 0,
            "successRate": "50.0%",
        }

    def test_dry_run_wire_names(self, wine_row):
        body = DryRunResponse(
            progress=BatchProgress(total=1),
            wines_to_process=[Wine.model_validate(wine_row())],
        ).model_dump(by_alias=True)

        assert body["message"] == "Dry run completed"
        assert body["winesToProcess"][0]["id"] == "wine-1"
        assert body["progress"]["processed"] == 0


class TestFetchVivinoRequest:
    """Tests for the fetch-by-id body."""

    def test_numeric_id_accepted(self):
        assert FetchVivinoRequest.model_validate({"wine_id": 1234567}).wine_id == "1234567"

    def test_non_numeric_id_rejected(self):
        with pytest.raises(ValidationError):
            FetchVivinoRequest.model_validate({"wine_id": "monte-bello"})
