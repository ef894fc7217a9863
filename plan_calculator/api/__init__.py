"""
API routes for the returns calculator.
"""

from fastapi import APIRouter

from plan_calculator.api import calculations

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
