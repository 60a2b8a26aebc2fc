# =============================================================================
# core/services/vivino_service.py - Vivino Lookup Logic
# =============================================================================
# Turns Vivino's raw /wines/{id} payload into VivinoWineData and wraps the
# lookup in the in-band {success, data | error} envelope served by
# POST /vivino/fetch.
# =============================================================================

import logging
from typing import Any

from pydantic import ValidationError

from core.models.enrichment import FetchVivinoResponse
from core.models.wine import VivinoWineData
from lib.vivino_client import VivinoApiClient, VivinoClientError

logger = logging.getLogger(__name__)


def _name_of(obj: Any) -> str | None:
    if isinstance(obj, dict):
        name = obj.get("name")
        return name if isinstance(name, str) and name else None
    return None


def _section(wine: dict[str, Any], key: str) -> dict[str, Any]:
    """Nested object under `key`, or {} when Vivino sent something else."""
    value = wine.get(key)
    return value if isinstance(value, dict) else {}


def _average_rating(value: Any) -> float:
    try:
        return round(float(value), 1) if value else 0
    except (TypeError, ValueError):
        return 0


def parse_vivino_wine(wine_id: str, payload: dict[str, Any]) -> VivinoWineData:
    """
    Extract the fields we care about from a Vivino wine payload.

    Vivino sometimes nests everything under "wine"; both shapes are handled.
    A missing average rating becomes 0, which VivinoWineData treats as
    "no rating". Sub-objects of the wrong shape are read as empty.
    """
    wine = payload.get("wine") or payload
    if not isinstance(wine, dict):
        wine = payload

    statistics = _section(wine, "statistics")
    region = _section(wine, "region")
    grape = _name_of(wine.get("primary_varietal")) or _name_of(wine.get("varietal"))

    return VivinoWineData(
        wine_id=wine_id,
        name=wine.get("name") or "",
        winery=_name_of(wine.get("winery")) or "",
        rating=_average_rating(statistics.get("ratings_average")),
        rating_count=statistics.get("ratings_count") or 0,
        image_url=_section(wine, "image").get("location"),
        vintage=_section(wine, "vintage").get("year"),
        region=_name_of(region),
        country=_name_of(region.get("country")),
        grapes=[grape] if grape else None,
    )


class VivinoService:
    """Fetch-by-id lookups against the Vivino API."""

    @staticmethod
    async def fetch_wine(
        wine_id: str,
        client: VivinoApiClient | None = None,
    ) -> FetchVivinoResponse:
        """
        Look up one wine and report the result in-band.

        Upstream failures come back as success=false with the error message
        instead of raising, so callers only have to check one flag.
        """
        logger.info(f"Fetching Vivino wine {wine_id}")

        owns_client = client is None
        api = client or VivinoApiClient()
        try:
            payload = await api.get_wine(wine_id)
            data = parse_vivino_wine(wine_id, payload)
        except VivinoClientError as e:
            logger.error(f"Vivino lookup for {wine_id} failed: {e.message}")
            return FetchVivinoResponse(success=False, error=e.message)
        except ValidationError as e:
            logger.error(f"Vivino wine {wine_id} has an unreadable payload: {e}")
            return FetchVivinoResponse(success=False, error="Vivino API returned an unexpected payload")
        finally:
            if owns_client:
                await api.aclose()

        logger.info(f"Vivino wine {wine_id} resolved to '{data.name}'")
        return FetchVivinoResponse(success=True, data=data)
