from __future__ import annotations

import logging
import traceback
from typing import Any, Dict

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from salesboard.config import load_config
from salesboard.core.filters import build_transaction_query
from salesboard.database import count_transactions, query_transactions
from salesboard.errors import DatasetError
from salesboard.initializer import initialize_database
from salesboard.loaders import get_loader
from salesboard.loaders.base import BaseLoader
from salesboard.metrics import (
    category_chart,
    combined_report,
    price_range_chart,
    sales_statistics,
)

logger = logging.getLogger(__name__)


def _error_response(
    request: Request,
    exc: Exception,
    payload: Dict[str, Any],
    status: int = 500,
) -> JSONResponse:
    body = dict(payload)
    body.setdefault("message", str(exc))
    if request.app.state.config.get("debug"):
        body["details"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return JSONResponse(body, status_code=status)


def _max_per_page(config: Dict[str, Any]) -> int | None:
    value = config.get("max_per_page")
    return None if value in (None, "") else int(value)


def _db_path(request: Request) -> str:
    return str(request.app.state.config["db_path"])


router = APIRouter(prefix="/api")


@router.get("/initialize-database")
def initialize(request: Request):
    config = request.app.state.config
    try:
        loader = request.app.state.loader or get_loader(config["loader"], config)
        count = initialize_database(_db_path(request), str(config["source_url"]), loader)
    except DatasetError as exc:
        logger.exception("Database initialization aborted; existing data kept")
        return _error_response(
            request, exc, {"success": False, "error": "Error initializing database"}, status=502
        )
    except Exception as exc:
        logger.exception("Database initialization failed")
        return _error_response(
            request, exc, {"success": False, "error": "Error initializing database"}
        )
    return {
        "success": True,
        "message": "Database initialized successfully",
        "recordCount": count,
    }


@router.get("/transactions")
def list_transactions(
    request: Request,
    month: str | None = None,
    search: str = "",
    page: str | None = None,
    per_page: str | None = Query(None, alias="perPage"),
):
    config = request.app.state.config
    try:
        query = build_transaction_query(
            month=month,
            search=search,
            page=page,
            per_page=per_page,
            default_per_page=int(config["per_page"]),
            max_per_page=_max_per_page(config),
        )
        return query_transactions(_db_path(request), query).to_dict()
    except Exception as exc:
        logger.exception("Error fetching transactions")
        return _error_response(request, exc, {"error": "Error fetching transactions"})


@router.get("/statistics/{month}")
def statistics(request: Request, month: str):
    try:
        return sales_statistics(_db_path(request), month)
    except Exception as exc:
        logger.exception("Error fetching statistics")
        return _error_response(request, exc, {"error": "Error fetching statistics"})


@router.get("/bar-chart/{month}")
def bar_chart(request: Request, month: str):
    try:
        return price_range_chart(_db_path(request), month)
    except Exception as exc:
        logger.exception("Error fetching bar chart data")
        return _error_response(request, exc, {"error": "Error fetching bar chart data"})


@router.get("/pie-chart/{month}")
def pie_chart(request: Request, month: str):
    try:
        return category_chart(_db_path(request), month)
    except Exception as exc:
        logger.exception("Error fetching pie chart data")
        return _error_response(request, exc, {"error": "Error fetching pie chart data"})


@router.get("/combined-data/{month}")
def combined_data(request: Request, month: str):
    try:
        return combined_report(_db_path(request), month)
    except Exception as exc:
        logger.exception("Error fetching combined data")
        return _error_response(request, exc, {"error": "Error fetching combined data"})


def create_app(config: Dict[str, Any] | None = None, loader: BaseLoader | None = None) -> FastAPI:
    """Create the dashboard API.

    Args:
        config: Settings as returned by ``load_config``; loaded from the
            environment when omitted.
        loader: Snapshot loader used by ``/api/initialize-database``. Defaults
            to the one named by ``config["loader"]``.
    """
    config = config or load_config()
    app = FastAPI(title="Salesboard API", version="0.1.0")
    app.state.config = config
    app.state.loader = loader

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.get("cors_origins") or []),
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(router)

    @app.get("/health")
    def health(request: Request):
        try:
            return {"status": "ok", "recordCount": count_transactions(_db_path(request))}
        except Exception as exc:
            logger.exception("Health check failed")
            return _error_response(request, exc, {"status": "error"})

    return app
