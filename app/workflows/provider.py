"""
Workflow provider: cached detail lookups and the list fan-out.

Both operations share the detail cache space, so a direct lookup and a
list-triggered lookup for the same id coalesce onto one upstream call.
"""
from typing import Any, List, Optional, Tuple
from concurrent.futures import ThreadPoolExecutor, as_completed
import logging

from app import api_client
from app.cache import (
    CacheSpace,
    CacheSpaceManager,
    CacheStatus,
    FULL_WORKFLOWS_CACHE_KEY,
    LIST_PAGE,
    LIST_PAGE_SIZE,
    detail_cache_key,
    get_cache_manager,
)
from app.errors import InputError
from config.settings import settings

from .envelopes import extract_candidate_ids, extract_pagination, extract_workflow_records
from .models import ListResult, WorkflowListPage, WorkflowLookup
from .normalizer import normalize_workflow

logger = logging.getLogger("workflows.provider")


class WorkflowProvider:
    """
    Read-through access to upstream workflows.

    Cache managers default to the process-wide ones; tests may inject their
    own to control TTLs.
    """

    def __init__(
        self,
        list_cache: Optional[CacheSpaceManager] = None,
        detail_cache: Optional[CacheSpaceManager] = None,
        max_workers: Optional[int] = None,
    ):
        self._list_cache = list_cache
        self._detail_cache = detail_cache
        self._max_workers = max_workers or settings.detail_max_workers

    @property
    def list_cache(self) -> CacheSpaceManager:
        if self._list_cache is not None:
            return self._list_cache
        return get_cache_manager(CacheSpace.WORKFLOW_LIST)

    @property
    def detail_cache(self) -> CacheSpaceManager:
        if self._detail_cache is not None:
            return self._detail_cache
        return get_cache_manager(CacheSpace.WORKFLOW_DETAIL)

    # ------------------------------------------------------------------
    # Detail
    # ------------------------------------------------------------------

    def _fetch_detail_raw(self, workflow_id: str) -> Tuple[Any, CacheStatus, str]:
        """Cached upstream get-by-id; returns the raw (unnormalized) body."""
        cache_key = detail_cache_key(workflow_id)
        raw, status = self.detail_cache.fetch(
            cache_key,
            lambda: api_client.fetch_workflow(workflow_id),
        )
        return raw, status, cache_key

    def get_workflow_by_id(self, workflow_id: str) -> WorkflowLookup:
        """
        Get one workflow by id.

        Normalization runs on every call, including cache hits, so the cache
        holds raw upstream bodies only.

        Raises:
            ConfigurationError: If the API key is missing
            InputError: If workflow_id is empty
            UpstreamError: If upstream fails
        """
        api_client.require_api_key()
        if not workflow_id:
            raise InputError("Missing workflowId")

        raw, status, cache_key = self._fetch_detail_raw(workflow_id)
        logger.debug(f"Workflow {workflow_id} served with {status.value}")
        return WorkflowLookup(
            workflow=normalize_workflow(raw),
            cache_status=status,
            cache_key=cache_key,
        )

    # ------------------------------------------------------------------
    # List
    # ------------------------------------------------------------------

    def _fetch_details(self, workflow_ids: List[str]) -> List[Any]:
        """
        Fetch details for every id in parallel, dropping failures.

        Results keep the order of ``workflow_ids``.
        """
        if not workflow_ids:
            return []

        results: List[Any] = [None] * len(workflow_ids)
        succeeded = [False] * len(workflow_ids)

        workers = min(self._max_workers, len(workflow_ids))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="workflow-detail") as executor:
            future_to_index = {
                executor.submit(self._fetch_detail_raw, workflow_id): index
                for index, workflow_id in enumerate(workflow_ids)
            }

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                try:
                    results[index] = future.result()[0]
                    succeeded[index] = True
                except Exception as e:
                    logger.warning(f"Dropping workflow {workflow_ids[index]} from list: {e!r}")

        return [raw for raw, ok in zip(results, succeeded) if ok]

    def _build_list_page(self) -> WorkflowListPage:
        """Upstream list call, id extraction, detail fan-out and assembly."""
        body = api_client.fetch_workflows_page(LIST_PAGE, LIST_PAGE_SIZE)

        records = extract_workflow_records(body)
        workflow_ids = extract_candidate_ids(records)
        logger.info(f"Workflow list returned {len(records)} records, {len(workflow_ids)} ids")

        details = self._fetch_details(workflow_ids)
        items = [normalize_workflow(raw) for raw in details]
        if len(items) < len(workflow_ids):
            logger.warning(f"{len(workflow_ids) - len(items)} workflow detail lookups failed")

        total_count, page, page_size = extract_pagination(body, len(items))
        return WorkflowListPage(
            items=items,
            total_count=total_count,
            page=page,
            page_size=page_size,
        )

    def list_workflows(self, force_refresh: bool = False) -> ListResult:
        """
        Get the first page of workflows, fully detailed and normalized.

        Args:
            force_refresh: Bypass a fresh or in-flight list entry

        Raises:
            ConfigurationError: If the API key is missing
            UpstreamError: If the upstream list call fails
        """
        api_client.require_api_key()

        page, status = self.list_cache.fetch(
            FULL_WORKFLOWS_CACHE_KEY,
            self._build_list_page,
            force_refresh=force_refresh,
        )
        return ListResult.from_page(page, status, FULL_WORKFLOWS_CACHE_KEY)


# Singleton factory
_provider: Optional[WorkflowProvider] = None


def get_workflow_provider() -> WorkflowProvider:
    """Get the shared workflow provider instance."""
    global _provider
    if _provider is None:
        _provider = WorkflowProvider()
    return _provider
