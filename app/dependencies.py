# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated, AsyncIterator

from fastapi import Depends

from core.services.enrichment_service import VivinoFetcher
from lib.vivino_client import VivinoApiClient, VivinoFunctionClient


async def get_vivino_fetcher() -> AsyncIterator[VivinoFetcher]:
    """
    Per-request client for the fetch-vivino-data function.

    Closed when the request finishes.
    """
    async with VivinoFunctionClient() as client:
        yield client


async def get_vivino_api() -> AsyncIterator[VivinoApiClient]:
    """Per-request client for the upstream Vivino API."""
    async with VivinoApiClient() as client:
        yield client


# Type aliases for dependency injection
VivinoFetcherDep = Annotated[VivinoFetcher, Depends(get_vivino_fetcher)]
VivinoApiDep = Annotated[VivinoApiClient, Depends(get_vivino_api)]
