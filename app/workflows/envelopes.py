"""
Shape matchers for the upstream list envelope.

The list endpoint has returned at least four envelopes over time. Each
matcher below recognizes exactly one of them and returns the record list,
or None when the body has a different shape. Matchers are tried in order and
the first match wins; an unrecognized body yields an empty list.
"""
from typing import Any, Callable, List, Optional, Tuple

from app.utils.helpers import read_dict, read_int, read_str

Matcher = Callable[[Any], Optional[List[Any]]]

# Fields carrying a workflow id on list records, in priority order
LIST_ID_FIELDS = ("workflowId", "id", "_id")

DEFAULT_PAGE = 0
DEFAULT_PAGE_SIZE = 50


def _bare_array(body: Any) -> Optional[List[Any]]:
    """[...]"""
    return body if isinstance(body, list) else None


def _workflows_member(body: Any) -> Optional[List[Any]]:
    """{"workflows": [...]}"""
    if isinstance(body, dict) and isinstance(body.get("workflows"), list):
        return body["workflows"]
    return None


def _data_array(body: Any) -> Optional[List[Any]]:
    """{"data": [...]}"""
    if isinstance(body, dict) and isinstance(body.get("data"), list):
        return body["data"]
    return None


def _data_workflows(body: Any) -> Optional[List[Any]]:
    """{"data": {"workflows": [...]}}"""
    if isinstance(body, dict):
        data = read_dict(body, "data")
        if data is not None and isinstance(data.get("workflows"), list):
            return data["workflows"]
    return None


LIST_SHAPES: Tuple[Matcher, ...] = (
    _bare_array,
    _workflows_member,
    _data_array,
    _data_workflows,
)


def extract_workflow_records(body: Any) -> List[Any]:
    """Return the raw record list from any known list envelope."""
    for matcher in LIST_SHAPES:
        records = matcher(body)
        if records is not None:
            return records
    return []


def extract_candidate_id(record: Any) -> Optional[str]:
    """First non-empty string among workflowId, id and _id."""
    if not isinstance(record, dict):
        return None
    for key in LIST_ID_FIELDS:
        value = read_str(record, key)
        if value:
            return value
    return None


def extract_candidate_ids(records: List[Any]) -> List[str]:
    """Candidate ids in record order; records without one are dropped."""
    ids = []
    for record in records:
        workflow_id = extract_candidate_id(record)
        if workflow_id:
            ids.append(workflow_id)
    return ids


def _envelope_int(body: Any, key: str) -> Optional[int]:
    if not isinstance(body, dict):
        return None
    value = read_int(body, key)
    if value is not None:
        return value
    data = read_dict(body, "data")
    if data is not None:
        return read_int(data, key)
    return None


def extract_pagination(body: Any, item_count: int) -> Tuple[int, int, int]:
    """
    Read (totalCount, page, pageSize) from the list envelope.

    Top-level values win over values nested under ``data``. Missing values
    fall back to the number of normalized items, page 0 and size 50.
    """
    total_count = _envelope_int(body, "totalCount")
    page = _envelope_int(body, "page")
    page_size = _envelope_int(body, "pageSize")
    return (
        item_count if total_count is None else total_count,
        DEFAULT_PAGE if page is None else page,
        DEFAULT_PAGE_SIZE if page_size is None else page_size,
    )
