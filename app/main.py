from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
from app.api import health, products
from app.config import Settings, settings as default_settings
from app.core.errors import StoreError, register_exception_handlers
from app.core.generation import DescriptionGenerator, get_generator
from app.core.logging import LoggingMiddleware, get_logger, setup_logging
from app.core.metrics import MetricsMiddleware, get_metrics
from app.core.rate_limiter import configure_rate_limits, limiter, rate_limit_handler
from app.db.database import QueryGateway, build_engine

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    gateway: Optional[QueryGateway] = None,
    generator: Optional[DescriptionGenerator] = None,
) -> FastAPI:
    """Build the application.

    The database gateway and the description generator are created here (or
    passed in) and stored on ``app.state``; request handlers receive them
    through dependencies.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan event handler"""
        logger.info("Starting Smart Inventory API...")

        app.state.gateway = gateway or QueryGateway(build_engine(settings))
        app.state.generator = generator or get_generator(settings)

        if app.state.gateway.check_connection():
            logger.info("Successfully connected to the database")

        try:
            app.state.gateway.create_tables()
            logger.info("products table was successfully checked/created")
        except StoreError as e:
            logger.error("Error creating database table", error=e.message)

        logger.info("Application startup complete")

        yield

        logger.info("Shutting down application...")
        if gateway is None:
            app.state.gateway.dispose()

    app = FastAPI(
        lifespan=lifespan,
        title=settings.project_name,
        version="1.0.0",
        description="Smart Inventory - product catalogue with AI-generated descriptions",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc"
    )

    # Add middlewares
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    if settings.enable_metrics:
        app.add_middleware(MetricsMiddleware)
        app.add_api_route("/metrics", get_metrics, methods=["GET"], tags=["monitoring"])

    # Errors and rate limiting
    register_exception_handlers(app)
    configure_rate_limits(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

    # Include routers
    app.include_router(
        products.router,
        prefix=f"{settings.api_prefix}/products",
        tags=["products"]
    )

    app.include_router(
        health.router,
        prefix=settings.api_prefix,
        tags=["health"]
    )

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "Smart Inventory API",
            "version": "1.0.0",
            "docs": f"{settings.api_prefix}/docs",
            "metrics": "/metrics" if settings.enable_metrics else None
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=default_settings.port)
