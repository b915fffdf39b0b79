"""API routers."""
from .status import router as status_router
from .history import router as history_router
from .checks import router as checks_router

__all__ = ["status_router", "history_router", "checks_router"]
