"""
Workflow normalization.

Upstream has shipped several shapes for the same workflow over time
(``_id`` vs ``id``, ``created_at`` vs ``createdAt``, tags as strings or as
objects, ...). normalize_workflow() maps any of them onto NormalizedWorkflow.
"""
import json
from typing import Any, Dict, List, Optional

from app.utils.helpers import read_bool, read_dict, read_str, safe_lower
from .models import NormalizedWorkflow


# Field aliases, in priority order
ID_FIELDS = ("id", "_id", "workflowId")
NAME_FIELDS = ("name", "workflowName")
CREATED_AT_FIELDS = ("createdAt", "created_at", "created")
UPDATED_AT_FIELDS = ("updatedAt", "updated_at", "updated")

ACTIVE_STATUS = "active"
UNKNOWN_NAME = "unknown"


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, default=str)


def normalize_tags(raw_tags: Any) -> Optional[List[str]]:
    """
    Normalize the many tag encodings into a list of strings.

    - ["a", "b"]                -> ["a", "b"]
    - [{"name": "a"}, ...]      -> ["a", ...]
    - [1, {"x": 2}, "a"]        -> each item stringified
    - "a"                       -> ["a"]
    - anything else             -> None
    """
    if isinstance(raw_tags, list):
        if all(isinstance(tag, str) for tag in raw_tags):
            return list(raw_tags)
        if all(isinstance(tag, dict) and isinstance(tag.get("name"), str) for tag in raw_tags):
            return [tag["name"] for tag in raw_tags]
        return [_stringify(tag) for tag in raw_tags]
    if isinstance(raw_tags, str):
        return [raw_tags]
    return None


def _is_active(workflow: Dict[str, Any]) -> bool:
    active = read_bool(workflow, "active")
    if active is not None:
        return active
    status = read_str(workflow, "status")
    if status:
        return safe_lower(status) == ACTIVE_STATUS
    return False


def _description(workflow: Dict[str, Any]) -> Optional[str]:
    description = read_str(workflow, "description")
    if description is not None:
        return description
    for container in ("metadata", "workflow"):
        nested = read_dict(workflow, container)
        if nested is not None:
            description = read_str(nested, "description")
            if description is not None:
                return description
    return None


def normalize_workflow(workflow: Any) -> NormalizedWorkflow:
    """
    Convert one raw upstream workflow into a NormalizedWorkflow.

    Pure function: the same input always yields the same output, and the
    input is never mutated. Non-object input is treated as an empty object.
    """
    w: Dict[str, Any] = workflow if isinstance(workflow, dict) else {}

    workflow_id = read_str(w, *ID_FIELDS) or ""
    name = read_str(w, *NAME_FIELDS)
    if name is None:
        name = workflow_id
    name = name or UNKNOWN_NAME

    raw_tags = w.get("tags")
    if raw_tags is None:
        metadata = read_dict(w, "metadata")
        if metadata is not None:
            raw_tags = metadata.get("tags")

    return NormalizedWorkflow(
        id=workflow_id,
        name=name,
        active=_is_active(w),
        created_at=read_str(w, *CREATED_AT_FIELDS) or "",
        updated_at=read_str(w, *UPDATED_AT_FIELDS) or "",
        description=_description(w),
        tags=normalize_tags(raw_tags),
        workflow_id=read_str(w, "workflowId"),
        source=dict(w),
    )
