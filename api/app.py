import os, time, logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field
from prometheus_client import (
    Counter,
    Histogram,
    CollectorRegistry,
    generate_latest,
    CONTENT_TYPE_LATEST,
)

from Arrange.constants import VERSION
from Arrange.diagnostics import ContractViolation
from Arrange.orchestrator import arrange_room
from Arrange.params import ArrangeConfig, FurnitureItem, LayoutResult, Room
from Arrange.room_defaults import ROOM_DEFAULTS, default_room
from evaluation.scoring import score_layout
from render.render_svg import render_layout_svg, svg_to_data_url

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("arrange_api")

# Simple API key auth
API_KEYS = set(filter(None, os.environ.get("API_KEYS", "testkey").split(",")))


def _get_api_key(request: Request) -> str:
    api_key = request.headers.get("X-API-Key")
    if not api_key or api_key not in API_KEYS:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Invalid API key"},
        )
    return api_key


# Prometheus metrics
PROM_REGISTRY = CollectorRegistry()
REQUEST_COUNT = Counter(
    "request_total", "Total HTTP requests", ["method", "endpoint", "http_status"],
    registry=PROM_REGISTRY,
)
REQUEST_LATENCY = Histogram(
    "request_latency_seconds", "Latency of HTTP requests", ["endpoint"],
    registry=PROM_REGISTRY,
)
ERROR_COUNT = Counter(
    "request_errors_total", "Total HTTP errors",
    registry=PROM_REGISTRY,
)
FALLBACK_COUNT = Counter(
    "arrange_fallback_total", "Layouts produced by the fallback planner",
    registry=PROM_REGISTRY,
)


class Metadata(BaseModel):
    processing_time: float


class ArrangeRequest(BaseModel):
    room: Optional[Room] = None
    room_type: Optional[str] = Field(default=None, description="Use the default shell for this room type")
    furniture: List[FurnitureItem]
    # Raw proposer output; malformed entries are reported, not rejected
    placements: Optional[List[Dict[str, Any]]] = None
    config: Optional[ArrangeConfig] = None
    preferences: Dict[str, Any] = Field(default_factory=dict)
    include_svg: bool = False
    color_scheme: str = Field(default="default", pattern="^(default|monochrome|pastel|bold)$")


class ArrangeResponse(BaseModel):
    layout: LayoutResult
    usedFallback: bool
    evaluation: Dict[str, Any]
    svg_data_url: Optional[str] = None
    version: str = VERSION
    metadata: Metadata


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None
    metadata: Metadata


app = FastAPI(title="Furniture Arrangement API", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start_time = time.perf_counter()
    request.state.start_time = start_time
    try:
        response = await call_next(request)
        status_code = response.status_code
    except Exception as exc:
        status_code = 500
        ERROR_COUNT.inc()
        logger.exception("Unhandled exception during request: %s", exc)
        raise
    finally:
        duration = time.perf_counter() - start_time
        endpoint = request.url.path
        REQUEST_COUNT.labels(request.method, endpoint, status_code).inc()
        REQUEST_LATENCY.labels(endpoint).observe(duration)
        logger.info(
            "%s %s -> %s in %.3fs",
            request.method,
            endpoint,
            status_code,
            duration,
        )
    return response


def _elapsed(request: Request) -> float:
    return time.perf_counter() - getattr(request.state, "start_time", time.perf_counter())


@app.get("/health")
def health():
    return {"ok": True, "version": VERSION}


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    logger.warning("HTTPException %s: %s", exc.status_code, exc.detail)
    detail = exc.detail
    if isinstance(detail, dict):
        content = dict(detail)
    else:
        content = {"code": "error", "message": str(detail)}
    content["metadata"] = {"processing_time": _elapsed(request)}
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(ContractViolation)
async def contract_violation_handler(request: Request, exc: ContractViolation):
    logger.warning("Contract violation: %s", exc)
    return JSONResponse(
        status_code=422,
        content={
            "code": "contract_violation",
            "message": str(exc),
            "metadata": {"processing_time": _elapsed(request)},
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={
            "code": "internal_error",
            "message": "Internal server error",
            "metadata": {"processing_time": _elapsed(request)},
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Validation error: %s", exc)
    return JSONResponse(
        status_code=422,
        content={
            "code": "validation_error",
            "message": "Invalid request",
            "details": exc.errors(),
            "metadata": {"processing_time": _elapsed(request)},
        },
    )


@app.get("/metrics")
def metrics():
    return Response(generate_latest(PROM_REGISTRY), media_type=CONTENT_TYPE_LATEST)


@app.get("/room-defaults/{room_type}", response_model=Room, responses={404: {"model": ErrorResponse}})
def room_defaults(room_type: str, api_key: str = Depends(_get_api_key)):
    if room_type not in ROOM_DEFAULTS:
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": f"Unknown room type {room_type}"},
        )
    return default_room(room_type)


@app.post(
    "/arrange",
    response_model=ArrangeResponse,
    responses={
        500: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
    },
)
def arrange(
    request: Request,
    req: ArrangeRequest,
    api_key: str = Depends(_get_api_key),
):
    room = req.room
    if room is None:
        if not req.room_type:
            raise ContractViolation("Either room or room_type is required")
        if req.room_type not in ROOM_DEFAULTS:
            raise ContractViolation(f"Unknown room type {req.room_type}")
        room = default_room(req.room_type)

    config = req.config or ArrangeConfig.from_env()
    proposer = None
    if req.placements is not None:
        proposed = list(req.placements)
        proposer = lambda _room, _items: proposed  # noqa: E731

    result, used_fallback = arrange_room(room, req.furniture, proposer=proposer, config=config)
    if used_fallback:
        FALLBACK_COUNT.inc()

    evaluation = score_layout(
        result,
        req.furniture,
        room,
        preferences=req.preferences,
        min_clearance=config.min_clearance,
    )

    svg_data_url = None
    if req.include_svg:
        svg = render_layout_svg(result, room, req.furniture, color_scheme=req.color_scheme)
        svg_data_url = svg_to_data_url(svg)

    return ArrangeResponse(
        layout=result,
        usedFallback=used_fallback,
        evaluation=evaluation,
        svg_data_url=svg_data_url,
        metadata=Metadata(processing_time=_elapsed(request)),
    )

