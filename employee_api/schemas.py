from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Employee:
    """A persisted employee, detached from any database session."""
    id: int
    name: str
    designation: str
    salary: float
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row) -> "Employee":
        return cls(
            id=row.id,
            name=row.name,
            designation=row.designation,
            salary=row.salary,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class EmployeeIn(BaseModel):
    # Missing fields fall back to zero values; the table constraints reject empty text.
    id: int = 0
    name: str = ""
    designation: str = ""
    salary: float = 0.0

class EmployeePatch(BaseModel):
    # None or a zero value keeps what is stored.
    id: Optional[int] = None
    name: Optional[str] = None
    designation: Optional[str] = None
    salary: Optional[float] = None

class EmployeeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    designation: str
    salary: float
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")


class MessageOut(BaseModel):
    message: str
