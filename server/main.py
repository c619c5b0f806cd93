from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from roster.config import AppConfig, load_config
from roster.domain.db import Store
from roster.domain.errors import NotFoundError, RosterError, StoreError, ValidationError
from roster.domain.repositories import EmployeeRepository, ShiftRepository
from roster.domain.validation import employee_fields, parse_record_id, parse_shift_filter, shift_fields
from roster.logging_config import setup_logging

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    StoreError: 500,
}


def get_store(request: Request) -> Store:
    return request.app.state.store


def _employee_id(employee_id: str) -> int:
    return parse_record_id(employee_id, "Employee not found")


def _shift_id(shift_id: str) -> int:
    return parse_record_id(shift_id, "Shift not found")


# Handlers are plain ``def`` so FastAPI runs them in its worker threadpool;
# the event loop keeps accepting requests while a store call is in progress.
router = APIRouter()


# ============= EMPLOYEE ROUTES =============

@router.get("/employees")
def list_employees(store: Store = Depends(get_store)):
    return [e.to_dict() for e in EmployeeRepository.get_all(store)]


@router.get("/employees/{employee_id}")
def get_employee(employee_id: int = Depends(_employee_id), store: Store = Depends(get_store)):
    return EmployeeRepository.get_by_id(store, employee_id).to_dict()


@router.post("/employees")
def create_employee(payload: Any = Body(None), store: Store = Depends(get_store)):
    """
    Expected payload:
    {"name": "Ana", "role": "Barista", "email": "ana@example.com", "phone": "555-0100"}
    """
    fields = employee_fields(payload)
    return EmployeeRepository.create(store, **fields).to_dict()


@router.put("/employees/{employee_id}")
def update_employee(employee_id: int = Depends(_employee_id), payload: Any = Body(None), store: Store = Depends(get_store)):
    fields = employee_fields(payload)
    return EmployeeRepository.update(store, employee_id, **fields).to_dict()


@router.delete("/employees/{employee_id}")
def delete_employee(employee_id: int = Depends(_employee_id), store: Store = Depends(get_store)):
    EmployeeRepository.delete(store, employee_id)
    return {"message": "Employee deleted", "id": employee_id}


# ============= SHIFT ROUTES =============

@router.get("/shifts")
def list_shifts(
    date: Optional[str] = None,
    employee_id: Optional[str] = None,
    store: Store = Depends(get_store),
):
    """List shifts. ``date`` wins over ``employee_id`` when both are given."""
    shift_filter = parse_shift_filter(date, employee_id)
    return [s.to_dict() for s in ShiftRepository.get_all(store, shift_filter)]


@router.get("/shifts/{shift_id}")
def get_shift(shift_id: int = Depends(_shift_id), store: Store = Depends(get_store)):
    return ShiftRepository.get_by_id(store, shift_id).to_dict()


@router.post("/shifts")
def create_shift(payload: Any = Body(None), store: Store = Depends(get_store)):
    """
    Expected payload:
    {
        "date": "2024-01-01",
        "start_time": "09:00",
        "end_time": "17:00",
        "position": "Barista",
        "employee_id": 3,
        "notes": "Opening"
    }
    """
    fields = shift_fields(payload)
    return ShiftRepository.create(store, **fields).to_dict()


@router.put("/shifts/{shift_id}")
def update_shift(shift_id: int = Depends(_shift_id), payload: Any = Body(None), store: Store = Depends(get_store)):
    fields = shift_fields(payload)
    return ShiftRepository.update(store, shift_id, **fields).to_dict()


@router.delete("/shifts/{shift_id}")
def delete_shift(shift_id: int = Depends(_shift_id), store: Store = Depends(get_store)):
    ShiftRepository.delete(store, shift_id)
    return {"message": "Shift deleted", "id": shift_id}


# ============= ERROR MAPPING =============

async def _roster_error_handler(request: Request, exc: RosterError) -> JSONResponse:
    status = ERROR_STATUS.get(type(exc), 500)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status, content={"error": exc.message})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query"))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"error": "; ".join(parts) or "Invalid request"})


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the API. The store is opened on startup and closed on shutdown."""
    cfg = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(cfg.log_level)
        store = Store(cfg.database.path, echo=cfg.database.echo)
        store.init_database()
        app.state.store = store
        try:
            yield
        finally:
            store.close()

    app = FastAPI(title="Shift Roster API", lifespan=lifespan)
    app.state.config = cfg

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.server.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RosterError, _roster_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    @app.get("/health")
    def health():
        return {"ok": True}

    app.include_router(router, prefix=cfg.server.api_prefix)
    return app


app = create_app()
