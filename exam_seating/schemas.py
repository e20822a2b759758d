from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field


class StudentOut(BaseModel):
    id: int
    register_number: str
    name: str
    branch: str
    section: str
    year: int

    class Config:
        from_attributes = True


class ClassGroupCreate(BaseModel):
    branch: str = Field(min_length=1)
    section: str = Field(min_length=1)
    year: int = Field(ge=1)
    display_name: str | None = None


class ClassGroupOut(BaseModel):
    id: int
    branch: str
    section: str
    year: int
    display_name: str
    student_count: int = 0


class RoomCreate(BaseModel):
    name: str = Field(min_length=1)
    capacity: int = Field(gt=0)
    rows: int | None = Field(default=None, gt=0)
    cols: int | None = Field(default=None, gt=0)


class RoomOut(RoomCreate):
    id: int

    class Config:
        from_attributes = True


class GenerateSeatingRequest(BaseModel):
    exam_name: str = Field(min_length=1)
    exam_date: date
    class_ids: list[int] = Field(default_factory=list)
    room_ids: list[int] = Field(default_factory=list)


class SeatingSummary(BaseModel):
    id: int
    exam_name: str
    exam_date: str
    created_at: datetime
    included_classes: list[dict[str, Any]]
    unassigned_count: int


class SeatingOut(SeatingSummary):
    rooms: list[dict[str, Any]]
    unassigned_student_ids: list[Any]
    stranded_student_ids: list[Any]


class GenerateSeatingResponse(BaseModel):
    message: str
    data: SeatingOut
