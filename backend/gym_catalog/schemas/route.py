"""
Pydantic schemas for gym route API requests/responses.
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class RouteUpdate(BaseModel):
    """Editable route fields. Omitted fields are left unchanged."""
    name: Optional[str] = Field(default=None, max_length=255)
    opened_at: Optional[date] = None
    min_grade_value: Optional[int] = Field(default=None, ge=0)
    max_grade_value: Optional[int] = Field(default=None, ge=0)
    gym_grade_line_id: Optional[int] = None
    points: Optional[int] = Field(default=None, ge=0)
    hold_colors: Optional[List[str]] = None
    tag_colors: Optional[List[str]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Blue dihedral",
                "min_grade_value": 37,
                "max_grade_value": 38,
            }
        }


class RouteSummary(BaseModel):
    """Public summary of a route, the payload cached per route version."""
    id: int
    name: Optional[str] = None
    opened_at: date
    dismounted_at: Optional[date] = None
    mounted: bool
    grade: Optional[str] = None
    grade_line: Optional[str] = None
    min_grade_value: Optional[int] = None
    max_grade_value: Optional[int] = None
    points: Optional[int] = None
    calculated_point: Optional[float] = None
    hold_colors: List[str] = []
    tag_colors: List[str] = []
    gym_sector_id: int
    gym_sector_name: str
