"""Route handlers for the Web API."""

from companion.web.routes.ask import router as ask_router
from companion.web.routes.health import router as health_router
from companion.web.routes.learning import router as learning_router
from companion.web.routes.notes import router as notes_router
from companion.web.routes.progress import router as progress_router

__all__ = [
    "ask_router",
    "health_router",
    "learning_router",
    "notes_router",
    "progress_router",
]
