"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .database import init_db, close_db
from .exceptions import StoreError
from .routers import status_router, history_router, checks_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("Starting UptimeBoard")

    await init_db()
    logger.info("Database initialized")

    yield

    await close_db()
    logger.info("Shutdown complete")


async def store_error_handler(request: Request, exc: StoreError):
    """Report database failures as 503 so the caller can retry the cycle."""
    logger.error(f"Store error on {request.url.path}: {exc} ({exc.__cause__})")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="UptimeBoard",
        description="Monitor state, check history and status notifications",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS middleware for the dashboard frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StoreError, store_error_handler)

    app.include_router(status_router)
    app.include_router(history_router)
    app.include_router(checks_router)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.web_port)
