"""API routes."""

from turma.api.auth import router as auth_router
from turma.api.internal import router as internal_router
from turma.api.messages import channels_router, messages_router
from turma.api.notifications import router as notifications_router
from turma.api.projects import router as projects_router
from turma.api.quotations import router as quotations_router
from turma.api.tasks import router as tasks_router
from turma.api.teams import router as teams_router

__all__ = [
    "auth_router",
    "channels_router",
    "internal_router",
    "messages_router",
    "notifications_router",
    "projects_router",
    "quotations_router",
    "tasks_router",
    "teams_router",
]
