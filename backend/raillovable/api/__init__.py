# API Routes
from .projects import router as projects_router
from .chat import router as chat_router
from .events import router as events_router
from .settings import router as settings_router

__all__ = [
    "projects_router",
    "chat_router",
    "events_router",
    "settings_router",
]
