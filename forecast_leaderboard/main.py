"""
Entry point de la API
"""

import logging
import re
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware

from forecast_leaderboard.core.config import get_settings
from forecast_leaderboard.core.logging_config import configure_logging
from forecast_leaderboard.database import Database, create_indexes

from forecast_leaderboard.controllers.health_controller import router as health_router
from forecast_leaderboard.controllers.leaderboard_controller import router as leaderboard_router
from forecast_leaderboard.controllers.leaderboard_views_controller import router as leaderboard_views_router

settings = get_settings()
logger = logging.getLogger(__name__)

# Parse CORS origins
CORS_ORIGINS = [origin.strip() for origin in settings.cors_origins.split(",")]
CORS_ORIGIN_REGEX = re.compile(r"https://.*\.vercel\.app") if settings.app_env == "production" else None


def route_methods(app: FastAPI) -> str:
    """Methods exposed by the registered routes, plus OPTIONS for preflight."""
    methods = {"OPTIONS"}
    for route in app.routes:
        methods.update(getattr(route, "methods", None) or ())
    methods.discard("HEAD")
    return ", ".join(sorted(methods))


def is_allowed_origin(origin: str) -> bool:
    """Check if origin is allowed by explicit list or regex pattern."""
    if not origin:
        return False
    if origin in CORS_ORIGINS:
        return True
    if CORS_ORIGIN_REGEX and CORS_ORIGIN_REGEX.match(origin):
        return True
    return False


class CORSMiddleware(BaseHTTPMiddleware):
    """
    CORS middleware that answers OPTIONS preflight before routing.

    The leaderboard query parameters are validated by FastAPI, so a preflight
    reaching the router would fail with 400.
    """

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin", "")

        if request.method == "OPTIONS":
            if is_allowed_origin(origin):
                return Response(
                    status_code=200,
                    headers={
                        "Access-Control-Allow-Origin": origin,
                        "Access-Control-Allow-Methods": route_methods(request.app),
                        "Access-Control-Allow-Headers": "Content-Type, Accept, Origin, X-Requested-With",
                        "Access-Control-Allow-Credentials": "true",
                        "Access-Control-Max-Age": "86400",  # Cache preflight 24h
                    }
                )
            return Response(status_code=403, content="Origin not allowed")

        response = await call_next(request)

        if is_allowed_origin(origin):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)
    await Database.connect()
    await create_indexes()
    logger.info("Forecast Leaderboard API started (env=%s)", settings.app_env)
    yield
    await Database.disconnect()

# Creo la app
app = FastAPI(
    title="Forecast Leaderboard API",
    description="Leaderboards de predicciones calculados en tiempo real",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(CORSMiddleware)

# Agrego todos los routers de los controllers al app
app.include_router(health_router)
app.include_router(leaderboard_router)
app.include_router(leaderboard_views_router)


@app.get("/")
async def root():
    # Endpoint raíz, sirve para verificar que la API está levantada
    return {
        "name": "Forecast Leaderboard API",
        "version": "1.0.0",
        "docs": "/docs"  # Link a la documentación interactiva de Swagger
    }
