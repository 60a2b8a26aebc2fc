# =============================================================================
# app/routers/enrich.py - Batch Enrichment Endpoint
# =============================================================================
# POST /batch-enrich runs the whole Vivino enrichment sweep inside one
# request. The response is sent only after the last candidate; nothing is
# streamed while the sweep runs, so latency grows with
# candidate_count x ENRICH_DELAY_SECONDS.
# =============================================================================

import json
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.auth import AuthUser, require_admin
from app.dependencies import VivinoFetcherDep
from app.exceptions import CandidateQueryError, CellarException, InternalServerError
from core.models.enrichment import BatchEnrichRequest, BatchEnrichResponse, DryRunResponse
from core.services.enrichment_service import EnrichmentService
from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_options(request: Request) -> BatchEnrichRequest:
    """
    Parse {dryRun, limit} from the body.

    An empty or non-JSON body means "use the defaults"; a JSON body with
    bad values is a 422.
    """
    raw: Any = {}
    body = await request.body()
    if body:
        try:
            raw = json.loads(body)
        except ValueError:
            logger.debug("Ignoring unparseable batch-enrich body")
            raw = {}
    if not isinstance(raw, dict):
        raw = {}

    try:
        return BatchEnrichRequest.model_validate(raw)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


@router.post(
    "/batch-enrich",
    response_model=None,
    responses={
        200: {"description": "DryRunResponse for dryRun=true, BatchEnrichResponse otherwise"},
        401: {"description": "Missing or invalid token"},
        403: {"description": "Caller is not an admin"},
        500: {"description": "Admin check, candidate query or unexpected failure"},
    },
)
async def batch_enrich(
    request: Request,
    user: Annotated[AuthUser, Depends(require_admin)],
    fetcher: VivinoFetcherDep,
) -> DryRunResponse | BatchEnrichResponse:
    """
    Enrich wines that link to Vivino but are missing rating, region or grapes.

    - dryRun=true: returns the candidate count and a sample, no Vivino
      calls and no writes
    - otherwise: processes every candidate sequentially with a fixed
      delay after each Vivino call and returns the final counters
    """
    options = await _read_options(request)
    logger.info(
        f"Batch enrichment requested by {user.id} (dryRun={options.dry_run}, limit={options.limit})"
    )

    try:
        try:
            candidates = EnrichmentService.select_candidates(options.limit)
        except SupabaseClientError as e:
            logger.error(f"Error fetching wines: {e}")
            raise CandidateQueryError(e.message)

        if options.dry_run:
            return EnrichmentService.dry_run(candidates)

        progress = await EnrichmentService.run_sweep(candidates, fetcher)
        return EnrichmentService.build_response(progress)

    except CellarException:
        raise
    except Exception as e:
        logger.exception(f"Batch enrichment failed: {e}")
        raise InternalServerError(str(e))
