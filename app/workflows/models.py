"""
Data models for workflows.

These dataclasses represent the canonical shape of workflow data,
independent of which upstream envelope or field aliases produced it.
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from app.cache import CacheStatus


@dataclass
class NormalizedWorkflow:
    """A workflow with guaranteed fields plus every original source field."""
    id: str
    name: str
    active: bool
    created_at: str
    updated_at: str
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    workflow_id: Optional[str] = None
    source: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the JSON shape served to clients.

        Source fields come first; derived fields override them. Optional
        derived fields that resolved to None are omitted entirely.
        """
        result = dict(self.source)
        result.update({
            "id": self.id,
            "name": self.name,
            "active": self.active,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        })
        optional = {
            "description": self.description,
            "tags": list(self.tags) if self.tags is not None else None,
            "workflowId": self.workflow_id,
        }
        for key, value in optional.items():
            if value is None:
                result.pop(key, None)
            else:
                result[key] = value
        return result


@dataclass
class WorkflowListPage:
    """The cached value of the list space: normalized items plus pagination."""
    items: List[NormalizedWorkflow]
    total_count: int
    page: int
    page_size: int


@dataclass
class ListResult:
    """Result of a list call, with how the cache served it."""
    items: List[NormalizedWorkflow]
    total_count: int
    page: int
    page_size: int
    cache_status: CacheStatus
    cache_key: str

    @classmethod
    def from_page(
        cls, page: WorkflowListPage, cache_status: CacheStatus, cache_key: str
    ) -> "ListResult":
        return cls(
            items=list(page.items),
            total_count=page.total_count,
            page=page.page,
            page_size=page.page_size,
            cache_status=cache_status,
            cache_key=cache_key,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "data": [item.to_dict() for item in self.items],
            "totalCount": self.total_count,
            "page": self.page,
            "pageSize": self.page_size,
        }


@dataclass
class WorkflowLookup:
    """Result of a single-id lookup, with how the cache served it."""
    workflow: NormalizedWorkflow
    cache_status: CacheStatus
    cache_key: str
