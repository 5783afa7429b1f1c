# backend/app/main.py
"""
BookAPro API application.

Wires logging, middleware, error handlers and the /api routers together.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from .core.config import is_running_tests, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .errors import register_error_handlers
from .middleware.prometheus_middleware import METRICS_PATH, PrometheusMiddleware
from .monitoring.prometheus_metrics import prometheus_metrics
from .routes.v1 import admin, auth, bookings, coaches, health, messages, reviews, students

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")
    if is_running_tests():
        logger.info("Running under pytest (test mode active)")
    yield
    logger.info(f"{BRAND_NAME} API shutting down...")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)
logger.info("CORS allow_origins=%s allow_credentials=%s", settings.cors_origins, True)

if settings.prometheus_enabled:
    app.add_middleware(PrometheusMiddleware)

api = APIRouter(prefix="/api")
api.include_router(health.router)
api.include_router(auth.router, prefix="/auth")
api.include_router(coaches.router, prefix="/coaches")
api.include_router(students.router, prefix="/students")
api.include_router(bookings.router, prefix="/bookings")
api.include_router(messages.router, prefix="/messages")
api.include_router(reviews.router, prefix="/reviews")
api.include_router(admin.router, prefix="/admin")
app.include_router(api)


@app.get(METRICS_PATH, include_in_schema=False)
def metrics_endpoint() -> Response:
    """Prometheus exposition of the application registry."""
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
    )
