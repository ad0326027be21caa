"""
Workflows module: normalization, list envelopes and the cached provider.
"""
from .models import (
    ListResult,
    NormalizedWorkflow,
    WorkflowListPage,
    WorkflowLookup,
)
from .normalizer import normalize_tags, normalize_workflow
from .envelopes import (
    extract_candidate_id,
    extract_candidate_ids,
    extract_pagination,
    extract_workflow_records,
)
from .provider import WorkflowProvider, get_workflow_provider

__all__ = [
    # Models
    "ListResult",
    "NormalizedWorkflow",
    "WorkflowListPage",
    "WorkflowLookup",
    # Normalization
    "normalize_tags",
    "normalize_workflow",
    # Envelopes
    "extract_candidate_id",
    "extract_candidate_ids",
    "extract_pagination",
    "extract_workflow_records",
    # Provider
    "WorkflowProvider",
    "get_workflow_provider",
]
