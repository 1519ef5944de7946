"""
Pydantic schemas shared by the task and goal endpoints.

Both resources have the same shape, so one pair of models serves both.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ResourceCreate(BaseModel):
    # Presence checks only; dueDate is kept verbatim, never parsed as a date.
    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"name": "Buy milk", "description": "Go to the store", "dueDate": "2025-12-01"},
            ]
        },
    )

    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    due_date: str = Field(..., alias="dueDate", min_length=1)


class ResourceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    description: str
    due_date: str = Field(..., alias="dueDate")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")
