# employee_api/main.py
from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Depends, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api import EmployeeAPI
from .config import ALLOWED_ORIGINS, LOG_LEVEL, STORE_TIMEOUT_SECONDS
from .db import SessionLocal
from .exceptions import EmployeeNotFound
from .schemas import EmployeeIn, EmployeeOut, EmployeePatch, MessageOut
from .store import EmployeeStore

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

# Range of the employee.id INTEGER column
ID_MIN = -(2**31)
ID_MAX = 2**31 - 1
_ID_PATTERN = re.compile(r"-?[0-9]+")

# Lazy init so import does not touch the database
_employee_api: Optional[EmployeeAPI] = None


def get_employee_api() -> EmployeeAPI:
    global _employee_api
    if _employee_api is None:
        _employee_api = EmployeeAPI(EmployeeStore(SessionLocal), timeout=STORE_TIMEOUT_SECONDS)
    return _employee_api


def reset_employee_api() -> None:
    """Close the cached API so the next request or startup builds a fresh one."""
    global _employee_api
    if _employee_api is not None:
        _employee_api.close()
        _employee_api = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    provider = app.dependency_overrides.get(get_employee_api, get_employee_api)
    # Create tables if they don't exist (dev only; use migrations in prod)
    provider().store.ensure_schema()
    yield
    reset_employee_api()


# ---------------- FASTAPI APP ----------------
APP = FastAPI(title="Employee Records API", version=__version__, lifespan=lifespan)

APP.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@APP.exception_handler(RequestValidationError)
async def bad_request_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies are client errors, reported as 400 rather than FastAPI's 422.
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


# ---------------- HELPERS ----------------
def parse_employee_id(raw: str) -> int:
    """Accept only a plain decimal integer that fits the id column."""
    if not _ID_PATTERN.fullmatch(raw):
        raise HTTPException(status_code=400, detail="Invalid employee ID")
    value = int(raw)
    if not ID_MIN <= value <= ID_MAX:
        raise HTTPException(status_code=400, detail="Invalid employee ID")
    return value


def parse_positive(raw: Optional[str], default: int) -> int:
    """Parse a pagination parameter, falling back to `default` when absent or invalid."""
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    return value if value >= 1 else default


def server_error(action: str, e: Exception) -> HTTPException:
    logger.error("Failed to %s employee: %s", action, e)
    return HTTPException(status_code=500, detail=str(e))


# ---------------- HEALTH ----------------
@APP.get("/api/health")
def health():
    return {"ok": True, "timeout": STORE_TIMEOUT_SECONDS}


@APP.get("/api/health/db")
def health_db(api: EmployeeAPI = Depends(get_employee_api)):
    if not api.store.ping():
        raise HTTPException(status_code=503, detail="db unreachable")
    return {"db": "ok"}


# ---------------- EMPLOYEES ----------------
@APP.post("/employees", response_model=EmployeeOut, status_code=status.HTTP_201_CREATED)
def create_employee(payload: EmployeeIn, api: EmployeeAPI = Depends(get_employee_api)):
    try:
        return api.create_employee(payload)
    except Exception as e:
        raise server_error("create", e)


@APP.get("/employees/{employee_id}", response_model=EmployeeOut)
def read_employee(employee_id: str, api: EmployeeAPI = Depends(get_employee_api)):
    emp_id = parse_employee_id(employee_id)
    try:
        return api.read_employee(emp_id)
    except EmployeeNotFound:
        raise HTTPException(status_code=404, detail="Employee not found")
    except Exception as e:
        raise server_error("read", e)


@APP.get("/employeeList", response_model=List[EmployeeOut])
def read_employee_list(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    api: EmployeeAPI = Depends(get_employee_api),
):
    page_no = parse_positive(page, DEFAULT_PAGE)
    per_page = parse_positive(limit, DEFAULT_LIMIT)
    try:
        return api.read_employee_list(per_page, (page_no - 1) * per_page)
    except Exception as e:
        raise server_error("list", e)


@APP.put("/employees/{employee_id}", response_model=EmployeeOut)
def update_employee(
    employee_id: str,
    payload: EmployeePatch,
    api: EmployeeAPI = Depends(get_employee_api),
):
    emp_id = parse_employee_id(employee_id)
    try:
        return api.update_employee(emp_id, payload)
    except EmployeeNotFound:
        raise HTTPException(status_code=404, detail="Employee not found")
    except Exception as e:
        raise server_error("update", e)


@APP.delete("/employees/{employee_id}", response_model=MessageOut)
def delete_employee(employee_id: str, api: EmployeeAPI = Depends(get_employee_api)):
    emp_id = parse_employee_id(employee_id)
    try:
        api.delete_employee(emp_id)
    except EmployeeNotFound:
        raise HTTPException(status_code=404, detail="Employee not found")
    except Exception as e:
        raise server_error("delete", e)
    return MessageOut(message="Employee deleted successfully")
