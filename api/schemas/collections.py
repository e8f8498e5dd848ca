"""
Collection API Schemas - Requests and responses for collection management
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class CollectionSummary(BaseModel):
    """One collection as listed in the collection set"""

    id: str = Field(..., description="Stable collection id (not persisted across restarts)")
    index: int = Field(..., description="Current position")
    name: str = Field(..., description="Display name")
    set_count: int = Field(..., description="Number of set records")
    total_parts: int = Field(..., description="Sum of num_parts")
    active: bool = Field(..., description="Whether this is the active collection")


class CollectionSetResponse(BaseModel):
    active_index: int
    collections: List[CollectionSummary]


class CreateCollectionRequest(BaseModel):
    name: str = Field("", description="Display name (a default is used when blank)")


class RenameCollectionRequest(BaseModel):
    name: str = Field(..., description="New display name; blank names are ignored")


class SetActiveRequest(BaseModel):
    index: int = Field(..., description="Position to activate (clamped to the valid range)")


class SetItem(BaseModel):
    """A stored set record plus its resolved theme label"""

    record: Any = Field(..., description="The set record exactly as stored")
    theme_label: Optional[str] = Field(None, description="Theme name or 'Theme <id>' fallback")


class SetListResponse(BaseModel):
    index: int
    name: str
    total_parts: int
    items: List[SetItem]


class RemoveSetResponse(BaseModel):
    removed: bool


class ImportResponse(BaseModel):
    index: int = Field(..., description="Position of the collection that received the import")
    name: str
    set_count: int


class SummaryResponse(BaseModel):
    set_count: int
    total_parts: int
    parts_by_theme: Dict[str, int]
    sets_by_year: Dict[int, int]
