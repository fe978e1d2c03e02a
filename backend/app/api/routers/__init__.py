from fastapi import APIRouter

from app.api.routers.auth import router as auth_router
from app.api.routers.boards import router as boards_router
from app.api.routers.cards import router as cards_router
from app.api.routers.lists import router as lists_router
from app.api.routers.members import router as members_router
from app.api.routers.projects import router as projects_router
from app.api.routers.tags import router as tags_router
from app.api.routers.tasks import router as tasks_router


api_router = APIRouter()
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(members_router, prefix="/members", tags=["members"])
api_router.include_router(projects_router, prefix="/projects", tags=["projects"])
api_router.include_router(boards_router, prefix="/boards", tags=["boards"])
api_router.include_router(lists_router, prefix="/lists", tags=["lists"])
api_router.include_router(cards_router, prefix="/cards", tags=["cards"])
api_router.include_router(tasks_router, prefix="/tasks", tags=["tasks"])
api_router.include_router(tags_router, prefix="/tags", tags=["tags"])
