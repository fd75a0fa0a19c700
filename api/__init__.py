"""
API Module
FastAPI routers for the SmartAid application
"""

from api.users import router as users_router
from api.medications import router as medications_router
from api.logs import router as logs_router
from api.notifications import router as notifications_router
from api.caregivers import router as caregivers_router
from api.surveys import router as surveys_router

from api.deps import (
    get_db,
    get_current_user_id,
    services,
)


__all__ = [
    # Routers
    "users_router",
    "medications_router",
    "logs_router",
    "notifications_router",
    "caregivers_router",
    "surveys_router",
    # Dependencies
    "get_db",
    "get_current_user_id",
    "services",
]


def include_routers(app, prefix: str = "/api/v1"):
    """
    Include all API routers in the FastAPI app

    Usage:
        from api import include_routers
        include_routers(app)
    """
    app.include_router(users_router, prefix=prefix)
    app.include_router(medications_router, prefix=prefix)
    app.include_router(logs_router, prefix=prefix)
    app.include_router(notifications_router, prefix=prefix)
    app.include_router(caregivers_router, prefix=prefix)
    app.include_router(surveys_router, prefix=prefix)
