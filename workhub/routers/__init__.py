"""API routers package.

Each router handles one resource of the Workspace > Project > Task hierarchy.
"""

from .auth import router as auth_router
from .members import router as members_router
from .projects import router as projects_router
from .tasks import router as tasks_router
from .workspaces import router as workspaces_router

__all__ = [
    "auth_router",
    "members_router",
    "projects_router",
    "tasks_router",
    "workspaces_router",
]
