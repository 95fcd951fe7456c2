import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from resume_assets import __version__
from resume_assets.core.config import get_settings
from resume_assets.core.container import get_container
from resume_assets.core.logging import configure_logging
from resume_assets.infrastructure.database.session import dispose_engine, init_db
from resume_assets.interfaces.http import create_api_router
from resume_assets.interfaces.http import metrics
from resume_assets.interfaces.http.metrics import PrometheusMiddleware
from resume_assets.interfaces.http.middleware import CorrelationIdMiddleware
from resume_assets.interfaces.http.routers import health
from resume_assets.modules.assets.exceptions import AssetError

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.logging.level)
    await init_db()
    container = get_container()
    await container.startup()
    yield
    await container.shutdown()
    await dispose_engine()


async def asset_error_handler(request: Request, exc: AssetError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.project_name,
        description="Image asset uploads and print data for the resume editor",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    app.add_exception_handler(AssetError, asset_error_handler)

    app.include_router(health.router)
    app.include_router(metrics.router)
    app.include_router(create_api_router(settings.api_prefix))

    return app


app = create_app()
