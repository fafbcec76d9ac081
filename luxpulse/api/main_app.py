"""LuxPulse HTTP API: lifespan, error mapping, routers and health."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import APIRouter, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from luxpulse.api.domain.exceptions import APIException
from luxpulse.api.infrastructure.container import get_container, init_container
from luxpulse.api.infrastructure.logging import LoggingContext, configure_structured_logging
from luxpulse.api.infrastructure.seed import seed_demo_estate
from luxpulse.api.routers import control, estate, evidence, incidents, rules, telemetry
from luxpulse.config import AppConfig

SERVICE_NAME = "luxpulse-api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store, seed it if configured, and close it on shutdown."""
    # Initialize configuration
    config = AppConfig()
    configure_structured_logging(config.logging)

    # Startup
    logger.info("🚀 Starting LuxPulse API...")

    # Initialize API container
    api_config = {
        "database": {
            "url": config.database.url,
            "async_url": config.database.async_url,
        },
        "worker": {
            "deterministic_ids": config.worker.deterministic_ids,
        },
    }
    init_container(api_config)
    container = get_container()

    db = container.database()
    db.create_all()
    logger.info(f"✓ Store ready at {config.database.path}")

    if config.api.seed_demo_data:
        async with db.get_async_session() as session:
            await seed_demo_estate(session)

    logger.info(f"✓ {len(container.rule_engine().enabled_rules)} rules enabled")
    logger.info("✓ API ready")

    yield

    # Shutdown
    logger.info("🛑 Shutting down API...")
    await db.close()


_app_config = AppConfig()

# Create FastAPI app
app = FastAPI(
    title=_app_config.api.title,
    description="Facilities monitoring for commercial lighting estates",
    version=_app_config.api.version,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def correlation_context(request: Request, call_next):
    """Tag every log line of a request with its correlation id."""
    with LoggingContext(correlation_id=request.headers.get("x-correlation-id", "-")):
        return await call_next(request)


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message, "details": exc.details})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are client errors (400); nothing has been written."""
    logger.warning(f"Rejected {request.method} {request.url.path}: {len(exc.errors())} validation errors")
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": jsonable_encoder(exc.errors())},
    )


# Include routers
v1 = APIRouter(prefix=_app_config.api.prefix)
v1.include_router(estate.router)
v1.include_router(incidents.router)
v1.include_router(control.router)
v1.include_router(rules.router)
v1.include_router(telemetry.router)
v1.include_router(evidence.router)
app.include_router(v1)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": _app_config.api.title,
        "version": _app_config.api.version,
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "ok": True,
        "service": SERVICE_NAME,
        "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=_app_config.api.host, port=_app_config.api.port)
