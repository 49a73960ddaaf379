import os

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api.delivery.exceptions import DeliveryError
from app.core.exception_handlers import (
    delivery_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.utils.logger import logger
from app.utils.prometheus_metrics import PrometheusMiddleware
from app.config.settings import CORS_ORIGINS, CORS_ALLOW_ALL, BASE_URL as SETTINGS_BASE_URL, ENABLE_DOCS

# ───────────────────────────
# Routers
# ───────────────────────────
from app.api.delivery.router.router import api_delivery
from app.api.monitoring.router import router as monitoring_router, router_public as monitoring_public_router

BASE_URL = SETTINGS_BASE_URL or os.getenv("BASE_URL", "http://localhost:8000")

# ───────────────────────────
# FastAPI instance
# ───────────────────────────
app = FastAPI(
    title="Storefront Delivery API",
    version="1.0.0",
    description="Delivery zones, zone regions and pincode serviceability for the storefront and back office",
    docs_url=("/swagger" if ENABLE_DOCS else None),
    redoc_url=("/redoc" if ENABLE_DOCS else None),
    openapi_url=("/openapi.json" if ENABLE_DOCS else None),
    servers=[{"url": BASE_URL, "description": "Environment base URL"}],
    redirect_slashes=False,
)

# ───────────────────────────
# Global exception handlers
# ───────────────────────────
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(DeliveryError, delivery_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# ───────────────────────────
# Middlewares
# Executed in REVERSE order of registration (last added runs first)
# ───────────────────────────
app.add_middleware(PrometheusMiddleware)

# - CORS_ALLOW_ALL=true => allow_origins=["*"], allow_credentials=False
# - otherwise CORS_ORIGINS (falls back to ["*"]); credentials only with explicit origins
if CORS_ALLOW_ALL:
    allowed_origins = ["*"]
    allow_credentials = False
else:
    allowed_origins = CORS_ORIGINS or ["*"]
    allow_credentials = bool(CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ───────────────────────────
# Routers
# ───────────────────────────
app.include_router(api_delivery)
app.include_router(monitoring_public_router)
app.include_router(monitoring_router)


# ───────────────────────────
# Startup
# ───────────────────────────
@app.on_event("startup")
def startup():
    from app.database.init_db import initialize_database

    logger.info("Starting API and database...")
    initialize_database()
    logger.info("API started.")


@app.on_event("shutdown")
def shutdown():
    logger.info("Shutting down API...")


@app.get("/ping", tags=["Health"])
def ping():
    """Liveness check."""
    return {"ok": True}
