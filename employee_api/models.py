# employee_api/models.py
from sqlalchemy import CheckConstraint, Column, DateTime, Float, Integer, String
from sqlalchemy.sql import func
from .db import Base


class EmployeeRow(Base):
    __tablename__ = "employee"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    designation = Column(String(100), nullable=False)
    salary = Column(Float, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("name <> ''", name="ck_employee_name_not_empty"),
        CheckConstraint("designation <> ''", name="ck_employee_designation_not_empty"),
    )
