"""
Pydantic schemas for API responses.
"""
from pydantic import BaseModel
from typing import Any, Dict, List, Optional


# ===== WORKFLOW SCHEMAS =====

class WorkflowListData(BaseModel):
    """One page of normalized workflows"""
    data: List[Dict[str, Any]]
    totalCount: int
    page: int
    pageSize: int


class WorkflowListResponse(BaseModel):
    """Envelope for GET /api/workflows"""
    success: bool = True
    data: WorkflowListData


class WorkflowDetailResponse(BaseModel):
    """Envelope for GET /api/workflows/{workflow_id}"""
    success: bool = True
    data: Dict[str, Any]


# ===== ERROR SCHEMAS =====

class ErrorResponse(BaseModel):
    """Envelope for any failed request"""
    success: bool = False
    error: str
    details: Optional[str] = None
