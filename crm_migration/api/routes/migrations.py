"""Migration dry-run endpoints."""

import asyncio
import logging
from functools import partial
from typing import Callable

from fastapi import APIRouter, Depends

from .auth import CallerContext, require_org
from ..models import DryRunRequest, DryRunResponse, ErrorResponse, SourceListResponse
from ..storage import get_store
from ...config import Settings, get_settings
from ...errors import DryRunTimeoutError, MigrationError, MissingCredentialsError
from ...extractors import BaseSourceAdapter, create_adapter
from ...models.dry_run import MigrationSource
from ...orchestrator import run_dry_run
from ...services.store import InternalStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_adapter_factory() -> Callable[..., BaseSourceAdapter]:
    """Factory used to build source adapters."""
    return create_adapter


async def resolve_source(source: str) -> MigrationSource:
    """Path dependency resolving the source before the caller is authenticated."""
    return MigrationSource.parse(source)


@router.get("/sources", response_model=SourceListResponse)
async def list_sources():
    """List the source systems a dry run can read from."""
    return SourceListResponse(sources=[s.value for s in MigrationSource])


@router.post(
    "/{source}/dry-run",
    response_model=DryRunResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def dry_run(
    request: DryRunRequest,
    migration_source: MigrationSource = Depends(resolve_source),
    caller: CallerContext = Depends(require_org),
    store: InternalStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    adapter_factory: Callable[..., BaseSourceAdapter] = Depends(get_adapter_factory),
):
    """
    Simulate a migration from an external CRM without writing anything.

    Returns record counts, duplicate matches, validation errors, sample
    field mappings, a duration estimate and recommendations.
    """
    if not request.credential:
        raise MissingCredentialsError()

    options = request.to_options(settings.default_sample_size)

    loop = asyncio.get_running_loop()
    try:
        result = await asyncio.wait_for(
            loop.run_in_executor(None, partial(
                run_dry_run,
                migration_source,
                caller.org_id,
                store,
                api_key=request.api_key,
                access_token=request.access_token,
                options=options,
                settings=settings,
                adapter_factory=adapter_factory,
            )),
            timeout=settings.request_timeout,
        )
    except asyncio.TimeoutError:
        logger.error(f"[Migration Dry-Run] {migration_source.value} timed out")
        raise DryRunTimeoutError(settings.request_timeout)
    except MigrationError as e:
        logger.error(f"[Migration Dry-Run] {migration_source.value} error: {e.message}")
        raise
    except Exception as e:
        logger.exception(f"[Migration Dry-Run] {migration_source.value} error")
        raise MigrationError(str(e) or None) from e

    return result.to_dict()
