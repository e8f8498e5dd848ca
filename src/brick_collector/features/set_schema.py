"""
Schema for set records exchanged with Rebrickable and stored in collections.

Collections keep plain dicts so imported files pass through unchanged;
LegoSet is only applied to search results and to strict-mode imports.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Fields shown for a set, in display/CSV order
SET_COLUMNS = ['set_num', 'name', 'year', 'num_parts', 'theme_id', 'set_img_url']


class LegoSet(BaseModel):
    """One catalog item as returned by the Rebrickable sets endpoint."""

    model_config = ConfigDict(extra="allow")

    set_num: str = Field(..., min_length=1, description="Unique set key, e.g. '10265-1'")
    name: str = Field("", description="Display name")
    num_parts: int = Field(0, ge=0, description="Piece count")
    year: Optional[int] = Field(None, description="Release year")
    set_img_url: Optional[str] = Field(None, description="Image URL")
    theme_id: Optional[int] = Field(None, description="Rebrickable theme id")

    @field_validator("num_parts", mode="before")
    @classmethod
    def _absent_parts_are_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


def normalize_set(record: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a remote record and return it as a plain dict (extra fields kept)."""
    return LegoSet.model_validate(record).model_dump()


def set_key(record: Any) -> Optional[str]:
    """Return the set_num of a record, or None for records without one."""
    if isinstance(record, dict):
        value = record.get('set_num')
        return str(value) if value is not None else None
    return None


def num_parts(record: Any) -> int:
    """Piece count of a record, 0 when absent or unusable."""
    if not isinstance(record, dict):
        return 0
    value = record.get('num_parts')
    if isinstance(value, bool):
        return 0
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0
