"""
Workflow Cache Proxy - Main FastAPI Application
Fronts the Novu workflows API with a coalescing TTL cache
"""
import logging

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.cache import CacheSpace, get_cache_manager
from app.errors import WorkflowAPIError
from app.schemas import (
    ErrorResponse,
    WorkflowDetailResponse,
    WorkflowListData,
    WorkflowListResponse,
)
from app.security import (
    ALLOWED_HEADERS,
    ALLOWED_METHODS,
    CORS_MAX_AGE,
    OriginGuardMiddleware,
    SecurityHeadersMiddleware,
)
from app.workflows import get_workflow_provider
from config.settings import settings

logger = logging.getLogger("main")

# Version tracking
APP_VERSION = "v0.1.0"
APP_NAME = "Workflow Cache Proxy"

app = FastAPI(
    title=APP_NAME,
    description="Cached, normalized access to Novu workflows",
    version=APP_VERSION,
)

# Last added runs first: security headers wrap the origin guard, the guard wraps CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=ALLOWED_METHODS,
    allow_headers=ALLOWED_HEADERS,
    max_age=CORS_MAX_AGE,
)
app.add_middleware(OriginGuardMiddleware, allowed_origins=settings.cors_allowed_origins)
app.add_middleware(SecurityHeadersMiddleware)


def _cache_headers(cache_status, cache_key: str) -> dict:
    return {"X-Cache": cache_status.value, "X-Cache-Key": cache_key}


@app.exception_handler(WorkflowAPIError)
async def workflow_error_handler(request: Request, exc: WorkflowAPIError):
    """Render any WorkflowAPIError as the JSON error envelope."""
    logger.error(f"Error in {request.method} {request.url.path}: {exc!r}")
    body = ErrorResponse(error=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.status, content=body.model_dump())


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok", "source": "novu", "version": APP_VERSION}


@app.get("/cache/stats")
def cache_stats():
    """Get statistics for both cache spaces."""
    return {
        space.value: get_cache_manager(space).get_stats()
        for space in CacheSpace
    }


@app.get("/api/workflows")
def list_workflows(refresh: str = Query("0", description="1 to bypass the cache")):
    """
    List the first page of workflows, each expanded with its detail.

    X-Cache reports HIT, HIT-STALE-INFLIGHT, MISS or MISS-REFRESH.
    """
    result = get_workflow_provider().list_workflows(force_refresh=refresh == "1")
    body = WorkflowListResponse(data=WorkflowListData(**result.to_payload()))
    return JSONResponse(
        content=body.model_dump(),
        headers=_cache_headers(result.cache_status, result.cache_key),
    )


@app.get("/api/workflows/{workflow_id}")
def get_workflow(workflow_id: str):
    """Get a single normalized workflow."""
    lookup = get_workflow_provider().get_workflow_by_id(workflow_id)
    body = WorkflowDetailResponse(data=lookup.workflow.to_dict())
    return JSONResponse(
        content=body.model_dump(),
        headers=_cache_headers(lookup.cache_status, lookup.cache_key),
    )
