from contextlib import asynccontextmanager

import fastapi
import fastapi_swagger_dark as fsd
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from src.core.configs import settings
from src.core.exceptions import ZooApiError
from src.routes import (
    animals_router,
    audit_logs_router,
    dashboard_router,
    enclosures_router,
    feeding_schedules_router,
    inventory_router,
    medical_records_router,
    notifications_router,
    species_router,
    users_router,
)
from src.routes.deps import get_stores
from src.routes.errors import error_response
from src.services.seed import seed_demo_data
from src.utils.logging import get_logger, setup_logging

setup_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.seed_demo_data:
        seed_demo_data(get_stores())
    logger.info(f"{settings.app_name} started with {settings.storage_backend} storage")
    yield


# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description=settings.description,
    version=settings.version,
    docs_url=None,
    redoc_url=settings.redoc_url,
    lifespan=lifespan,
)

# CORS middleware; the browser client sends the token cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

router = fastapi.APIRouter()
fsd.install(router)
app.include_router(router)

for routers in [
    inventory_router,
    animals_router,
    enclosures_router,
    species_router,
    medical_records_router,
    feeding_schedules_router,
    notifications_router,
    users_router,
    audit_logs_router,
    dashboard_router,
]:
    app.include_router(routers)


@app.exception_handler(ZooApiError)
async def zoo_api_error_handler(request: Request, exc: ZooApiError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    # A body that is not JSON at all is a server-side parse failure
    if any(error.get("type") == "json_invalid" for error in errors):
        logger.error(f"{request.method} {request.url.path} received malformed JSON")
        return error_response(500, "Internal server error", "Malformed JSON body")

    details = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        details.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    logger.warning(f"{request.method} {request.url.path} rejected: {details}")
    return error_response(400, "; ".join(details) or "Invalid request")


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=settings.app_name,
        version=settings.version,
        description=settings.description,
        routes=app.routes,
    )
    components = openapi_schema.setdefault("components", {})
    security_schemes = components.setdefault("securitySchemes", {})
    security_schemes["BearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
    }
    openapi_schema["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi


@app.get("/")
async def root(request: Request):
    """Root endpoint"""
    return {
        "message": "Welcome to the Zoo Operations API",
        "version": settings.version,
        "docs": settings.docs_url,
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": settings.app_name}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.main:app", host="0.0.0.0", port=5003, reload=True)
