"""
Shoe Store FastAPI Application
Main application entry point
"""

import time
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from shoestore import __version__
from shoestore.api.v1 import api_v1_router
from shoestore.core.config import settings
from shoestore.core.exceptions import (
    ShoeStoreException,
    general_exception_handler,
    http_exception_handler,
    shoestore_exception_handler,
)
from shoestore.core.logging_config import get_logger, set_request_id, setup_logging
from shoestore.core.monitoring import PerformanceMonitor

setup_logging()
logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def resolve_request_id(request: Request) -> str:
    """
    Caller supplied X-Request-ID, else the API Gateway request id when running
    under Lambda, else a fresh UUID
    """
    header_value: Optional[str] = request.headers.get(REQUEST_ID_HEADER)
    if header_value:
        return header_value

    event = request.scope.get("aws.event") or {}
    gateway_request_id = (event.get("requestContext") or {}).get("requestId")
    if gateway_request_id:
        return gateway_request_id

    return str(uuid.uuid4())


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Shoe product catalog CRUD/search and payment intents",
    version=__version__,
)

# =============================================================================
# MIDDLEWARE CONFIGURATION
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", REQUEST_ID_HEADER],
    expose_headers=[REQUEST_ID_HEADER]
)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Bind a request id to the logging context and echo it back"""
    request_id = resolve_request_id(request)
    request.state.request_id = request_id
    set_request_id(request_id)

    start_time = time.perf_counter()
    response = await call_next(request)
    duration = (time.perf_counter() - start_time) * 1000

    response.headers[REQUEST_ID_HEADER] = request_id
    PerformanceMonitor.log_api_call(request.url.path, request.method, duration, response.status_code)
    return response


# =============================================================================
# ERROR HANDLERS
# =============================================================================

app.add_exception_handler(ShoeStoreException, shoestore_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# =============================================================================
# ROUTER INCLUSION
# =============================================================================

app.include_router(api_v1_router)

logger.info(f"{settings.PROJECT_NAME} v{__version__} initialized ({settings.ENVIRONMENT})")
