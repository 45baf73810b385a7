"""
Model Catalog: FastAPI Application Entry Point

This module exposes the read-only query surface over the model registry:
- /health: Health check endpoint
- /config: Non-sensitive configuration values
- /models/{category}: Status of every registered model in a category
- /models/{category}/by-provider: The same statuses grouped by provider
- /models/{category}/resolve: Resolve a model name with feature query

The application uses a lifespan context manager to:
1. Load configuration and configure logging
2. Derive provider configs from the configured credentials
3. Register every configured provider into the process-wide registry
"""

from contextlib import asynccontextmanager
import logging
import time

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from model_catalog import __version__
from model_catalog.config import Settings, configure_logging, get_settings
from model_catalog.errors import (
    AmbiguousModelError,
    FeatureValidationError,
    ModelLookupError,
    UnknownCategoryError,
    UnknownFeatureError,
)
from model_catalog.providers import auto_config, register_providers
from model_catalog.registry.catalog import ModelRegistry, get_model_registry
from model_catalog.schemas.catalog import (
    ComponentHealth,
    ErrorCodes,
    ErrorResponse,
    HealthResponse,
    ModelListResponse,
    ModelsByProviderResponse,
    ResolveResponse,
    status_entry,
)

logger = logging.getLogger(__name__)

_start_time: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler for startup/shutdown events.

    On startup:
    - Loads configuration from environment
    - Configures logging
    - Registers every provider with configured credentials

    On shutdown:
    - Logs shutdown message
    """
    settings = get_settings()
    configure_logging(settings)

    logger.info("=" * 60)
    logger.info("Model Catalog starting up...")
    logger.info("=" * 60)
    logger.info(f"Listing cache TTL: {settings.fetch_cache_ttl_seconds}s")
    logger.info(f"Probe timeout: {settings.probe_timeout_seconds}s")
    logger.info(f"Debug mode: {'enabled' if settings.debug else 'disabled'}")

    configs = auto_config(settings)
    if not configs:
        logger.warning("No provider credentials configured; the catalog starts empty")

    registry = get_model_registry()
    registered = await register_providers(registry, configs)
    for name, category in registry.categories().items():
        logger.info(f"  - {name}: {len(category)} models")

    global _start_time
    _start_time = time.time()

    logger.info("=" * 60)
    logger.info(f"Model Catalog ready with providers: {', '.join(registered) or 'none'}")

    yield  # Application runs here

    logger.info("Model Catalog shutting down...")


app = FastAPI(
    title="Model Catalog",
    description="Category-scoped AI model catalog and selection engine",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


@app.get("/")
async def root():
    """
    Root endpoint with API information.
    """
    return {
        "name": "Model Catalog",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "config": "/config",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check registry status and registered providers.",
)
async def health_check(registry: ModelRegistry = Depends(get_model_registry)):
    """
    Health check endpoint for monitoring and orchestration.

    The service is degraded when no model is registered in any category.
    """
    components = [
        ComponentHealth(
            name=name,
            status="healthy",
            message=f"{len(category)} models registered",
        )
        for name, category in registry.categories().items()
    ]
    total = sum(len(category) for category in registry.categories().values())
    uptime = time.time() - _start_time if _start_time > 0 else 0.0

    return HealthResponse(
        status="healthy" if total else "degraded",
        version=__version__,
        providers=list(registry.providers),
        components=components,
        uptime_seconds=uptime,
    )


@app.get("/config")
async def show_config(settings: Settings = Depends(get_settings)):
    """
    Returns non-sensitive configuration values.

    API keys are SecretStr and are NOT exposed in this endpoint.
    """
    return {
        "fetcher": {
            "cache_ttl_seconds": settings.fetch_cache_ttl_seconds,
            "probe_timeout_seconds": settings.probe_timeout_seconds,
        },
        "openai_compatible": {
            "base_url": settings.openai_compatible_base_url,
        },
        "server": {
            "host": settings.host,
            "port": settings.port,
            "debug": settings.debug,
        },
        "logging": {
            "level": settings.log_level,
        },
        "api_keys_configured": {
            "openai": settings.openai_api_key is not None,
            "groq": settings.groq_api_key is not None,
            "deepseek": settings.deepseek_api_key is not None,
            "openrouter": settings.openrouter_api_key is not None,
        },
    }


@app.get(
    "/models/{category}",
    response_model=ModelListResponse,
    responses={404: {"model": ErrorResponse}},
    summary="List models",
)
async def list_models(category: str, registry: ModelRegistry = Depends(get_model_registry)):
    """
    Status of every registered model in a category.

    Probes run on every call; their results are cached per provider by
    the provider's listing fetcher.
    """
    statuses = await registry.category(category).all_statuses()
    return ModelListResponse(
        category=category,
        models={key: status_entry(status) for key, status in statuses.items()},
        total_models=len(statuses),
    )


@app.get(
    "/models/{category}/by-provider",
    response_model=ModelsByProviderResponse,
    responses={404: {"model": ErrorResponse}},
    summary="List models grouped by provider",
)
async def list_models_by_provider(
    category: str, registry: ModelRegistry = Depends(get_model_registry)
):
    grouped = await registry.category(category).models_by_provider()
    return ModelsByProviderResponse(
        category=category,
        models_by_provider={
            provider: {key: status_entry(status) for key, status in statuses.items()}
            for provider, statuses in grouped.items()
        },
    )


@app.get(
    "/models/{category}/resolve",
    response_model=ResolveResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Resolve a model name",
)
async def resolve_model(
    category: str,
    name: str = Query(
        ...,
        min_length=1,
        description="providerDisplayName:modelId with optional ?feature=value query",
        examples=["OpenAI:gpt-5?websearch", "groq:llama-3.1-8b-*"],
    ),
    registry: ModelRegistry = Depends(get_model_registry),
):
    """
    Resolve a name, with wildcards and feature query, to exactly one model.

    Returns:
        - key: The registry key the name resolved to
        - model_spec: Declarative attributes of the model
        - features: Typed feature values parsed from the query
    """
    spec, features = registry.category(category).resolve_spec(name)
    return ResolveResponse(
        category=category,
        name=name,
        key=spec.key,
        model_spec=spec.describe(),
        features=features,
    )


def _error_response(status_code: int, code: str, message: str, field: str | None = None) -> JSONResponse:
    error = {"code": code, "message": message}
    if field is not None:
        error["field"] = field
    return JSONResponse(status_code=status_code, content={"error": error})


@app.exception_handler(ModelLookupError)
async def lookup_exception_handler(request: Request, exc: ModelLookupError) -> JSONResponse:
    """Map unknown, ambiguous or undeclared names to 404."""
    match exc:
        case UnknownCategoryError():
            code = ErrorCodes.UNKNOWN_CATEGORY
        case AmbiguousModelError():
            code = ErrorCodes.AMBIGUOUS_MODEL
        case UnknownFeatureError():
            code = ErrorCodes.UNKNOWN_FEATURE
        case _:
            code = ErrorCodes.MODEL_NOT_FOUND
    return _error_response(404, code, exc.message)


@app.exception_handler(FeatureValidationError)
async def feature_exception_handler(request: Request, exc: FeatureValidationError) -> JSONResponse:
    return _error_response(422, ErrorCodes.INVALID_FEATURE, exc.message, exc.feature)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors.

    Returns a consistent error response format with the first validation
    error's details for client-side error handling.
    """
    errors = exc.errors()
    first_error = errors[0] if errors else {}

    return _error_response(
        422,
        ErrorCodes.VALIDATION_ERROR,
        first_error.get("msg", "Validation failed"),
        ".".join(str(loc) for loc in first_error.get("loc", [])),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        return JSONResponse(status_code=exc.status_code, content={"error": detail})
    return _error_response(exc.status_code, "HTTP_ERROR", str(detail))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Logs the full exception for debugging and returns a generic error
    response to avoid leaking implementation details.
    """
    logger.exception("Unhandled exception")
    return _error_response(500, ErrorCodes.INTERNAL_ERROR, "An unexpected error occurred")
