"""
FastAPI Application - Main Entry Point

REST API for the multi-exchange order fulfillment engine.
"""

import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from cryptofill.config import get_settings
from cryptofill.core.fulfillment_engine import FulfillmentEngine
from cryptofill.services.exchange_registry import ExchangeRegistry
from cryptofill.services.order_service import OrderService
from cryptofill.utils.exceptions import (
    BaseFulfillmentException,
    ExchangeNotFoundException,
    InvalidOrderException,
    InvalidOrderSideException,
    ValidationException
)
from cryptofill.utils.logger import get_logger

# Import routers
from cryptofill.api.routes import orders, exchanges
from cryptofill.api.models import HealthResponse, ErrorResponse

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Global instances
registry: ExchangeRegistry = None
order_service: OrderService = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Loads the exchange snapshots and wires the services into the routers.
    Instances already assigned to the module globals are kept.
    """
    logger.info("=" * 80)
    logger.info("Starting Crypto Order Fulfillment API")
    logger.info("=" * 80)

    global registry, order_service

    if registry is None:
        logger.info(f"Loading exchange data from {settings.exchange_files}")
        registry = ExchangeRegistry()
        registry.load_from_files(settings.exchange_files)

    if order_service is None:
        engine_logger = get_logger(
            log_level=settings.log_level,
            log_dir=settings.log_dir or None,
            use_json=settings.log_json,
        )
        order_service = OrderService(registry, FulfillmentEngine(engine_logger), settings)

    orders.set_order_service(order_service)
    exchanges.set_registry(registry)

    logger.info(f"{len(registry)} exchanges registered")
    logger.info("API startup complete!")
    logger.info("Swagger UI available at: /docs")
    logger.info("=" * 80)

    yield

    logger.info("API shutdown complete!")


# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    description="""
    Simulates filling a buy or sell order against the standing orders of
    several exchanges, each limited by its own crypto and fiat balance.

    ## Endpoints
    * **POST /api/v1/orders**: Fulfill an order and return the fill report
    * **GET /api/v1/exchanges**: List exchange snapshots
    * **GET /api/v1/exchanges/{exchange_id}**: Get one exchange snapshot
    """,
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag each request with an id and log it with its duration."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    client = request.client.host if request.client else "unknown"
    started = time.perf_counter()

    logger.info(f"Request [{request_id}]: {request.method} {request.url.path} from {client}")
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f"Response [{request_id}]: {response.status_code} in {elapsed_ms:.1f}ms")

    response.headers["X-Request-ID"] = request_id
    return response


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def _error_response(status_code: int, error: str, message: str, detail: str = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            message=message,
            detail=detail,
            timestamp=datetime.now(timezone.utc)
        ).model_dump(mode='json')
    )


# Most specific class first; the first isinstance match wins
ERROR_STATUS = (
    (ValidationException, status.HTTP_422_UNPROCESSABLE_ENTITY, "ValidationError"),
    (InvalidOrderSideException, status.HTTP_400_BAD_REQUEST, None),
    (InvalidOrderException, status.HTTP_400_BAD_REQUEST, None),
    (ExchangeNotFoundException, status.HTTP_404_NOT_FOUND, None),
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors."""
    logger.warning(f"Validation error [{_request_id(request)}]: {exc.errors()}")
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "ValidationError",
        "Request validation failed",
        str(exc.errors()),
    )


@app.exception_handler(BaseFulfillmentException)
async def fulfillment_exception_handler(request: Request, exc: BaseFulfillmentException):
    """Map domain exceptions raised outside the routers to error responses."""
    for exc_type, status_code, error in ERROR_STATUS:
        if isinstance(exc, exc_type):
            break
    else:
        status_code, error = status.HTTP_500_INTERNAL_SERVER_ERROR, None

    logger.warning(f"{type(exc).__name__} [{_request_id(request)}]: {exc.message}")
    return _error_response(
        status_code,
        error or type(exc).__name__,
        exc.message,
        str(exc.details) if exc.details else None,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions."""
    request_id = _request_id(request)
    logger.error(f"Unhandled exception [{request_id}]: {str(exc)}", exc_info=True)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "InternalServerError",
        "An internal error occurred",
        "Contact support with request ID: " + request_id,
    )


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Check API health and order service statistics"
)
async def health_check() -> HealthResponse:
    stats = order_service.get_statistics() if order_service else {}

    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=settings.api_version,
        exchanges_loaded=len(registry) if registry is not None else 0,
        order_service=stats
    )


# Include routers
app.include_router(orders.router)
app.include_router(exchanges.router)


@app.get("/", tags=["root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.api_title,
        "version": settings.api_version,
        "status": "operational",
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "cryptofill.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        reload=False,
        log_level=settings.log_level.lower()
    )
