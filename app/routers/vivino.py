# =============================================================================
# app/routers/vivino.py - Vivino Fetch-by-id Endpoint
# =============================================================================
# Server-side proxy to Vivino's API. Browsers can't call Vivino directly
# (CORS), and the batch sweep can point VIVINO_FETCH_URL here.
# Callers authenticate with the anon key or a user access token.
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import require_api_key
from app.dependencies import VivinoApiDep
from core.models.enrichment import FetchVivinoRequest, FetchVivinoResponse
from core.services.vivino_service import VivinoService

router = APIRouter()


@router.post(
    "/vivino/fetch",
    response_model=FetchVivinoResponse,
    dependencies=[Depends(require_api_key)],
)
async def fetch_vivino_data(
    body: FetchVivinoRequest,
    api: VivinoApiDep,
) -> FetchVivinoResponse:
    """
    Fetch cleaned data for one Vivino wine id.

    Always 200 once authenticated: upstream failures are reported as
    {"success": false, "error": "..."} so callers check one flag.
    """
    return await VivinoService.fetch_wine(body.wine_id, client=api)
