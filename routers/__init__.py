# routers/__init__.py

from fastapi import APIRouter

from .auth import router as auth_router
from .enterprises import router as enterprises_router
from .members import router as members_router

from .water import router as water_router
from .tasks import router as tasks_router, unified_router as unified_tasks_router
from .equipment import router as equipment_router
from .documents import router as documents_router
from .structural import router as structural_router
from .suppliers import router as suppliers_router

from .health import router as health_router


# Every router, in registration order
api_router = APIRouter()

api_router.include_router(auth_router)

# Enterprise shell + admin panel
api_router.include_router(enterprises_router)
api_router.include_router(members_router)

# Modules
api_router.include_router(water_router)
api_router.include_router(unified_tasks_router)
api_router.include_router(tasks_router)
api_router.include_router(equipment_router)
api_router.include_router(documents_router)
api_router.include_router(structural_router)
api_router.include_router(suppliers_router)

api_router.include_router(health_router)

__all__ = ["api_router"]
