"""API routes."""

from timesheet_tracker.api.routes.auth import router as auth_router
from timesheet_tracker.api.routes.entries import router as entries_router
from timesheet_tracker.api.routes.health import router as health_router
from timesheet_tracker.api.routes.manager import router as manager_router

__all__ = ["auth_router", "entries_router", "health_router", "manager_router"]
