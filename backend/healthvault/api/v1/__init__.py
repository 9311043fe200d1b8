"""
API v1 routes aggregation.
"""

from fastapi import APIRouter
from healthvault.api.v1.auth import router as auth_router
from healthvault.api.v1.health_id import router as health_id_router
from healthvault.api.v1.emergency import router as emergency_router
from healthvault.api.v1.records import router as records_router
from healthvault.api.v1.reminders import router as reminders_router

router = APIRouter(prefix="/v1")

# Include sub-routers
router.include_router(auth_router)
router.include_router(health_id_router)
router.include_router(emergency_router)
router.include_router(records_router)
router.include_router(reminders_router)
