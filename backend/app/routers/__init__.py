"""Org Portal - API Routers"""
from .auth import router as auth_router
from .events import router as events_router
from .deadlines import router as deadlines_router
from .appeals import router as appeals_router
from .submissions import router as submissions_router
from .notifications import router as notifications_router
from .accounts import router as accounts_router

__all__ = [
    "auth_router",
    "events_router",
    "deadlines_router",
    "appeals_router",
    "submissions_router",
    "notifications_router",
    "accounts_router",
]
