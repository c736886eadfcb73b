"""API v1 routes"""
from fastapi import APIRouter
from budget_undo.api.v1 import (
    budgets,
    history,
)

api_router = APIRouter()

# Include route modules
api_router.include_router(budgets.router)
api_router.include_router(history.router)
