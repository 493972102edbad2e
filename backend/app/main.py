"""
FastAPI application entry point.

Settings load environment variables from .env files on import, so they are
read before the app is created.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config.settings import settings
from app.routers.chat import get_agent_executor, get_search_engine
from app.routers.chat import router as chat_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the catalog and the agent once, before the first request."""
    stats = get_search_engine().stats()
    executor = get_agent_executor()
    mode = "gateway-assisted" if executor.check_health()["llm"].get("configured") else "deterministic"
    logger.info(
        f"Starting {settings.app_name} {settings.app_version}: "
        f"{stats['total_products']} products, {stats['total_symptoms']} symptoms, {mode} mode"
    )
    yield
    logger.info("Shutting down")


app = FastAPI(
    title=settings.app_name,
    description="Chat assistant for refrigerator and dishwasher parts",
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins,
    allow_credentials=settings.allow_credentials,
    allow_methods=settings.allow_methods,
    allow_headers=settings.allow_headers,
)

app.include_router(chat_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the failure; the client only sees a generic message."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Liveness only; /api/v1/health reports agent and catalog state."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
