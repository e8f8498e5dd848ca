"""
Search API Schemas
"""

from typing import Any, Dict, List
from pydantic import BaseModel, Field


class SearchResponse(BaseModel):
    query: str = Field(..., description="Query text")
    applied: bool = Field(..., description="False when a newer search superseded this one (results are then empty)")
    results: List[Dict[str, Any]] = Field(..., description="Set records, each flagged with in_collection")
