"""Dependencies for route handlers"""
from typing import Annotated

from fastapi import Depends, Request

from budget_undo.services.history_store import HistoryStore
from budget_undo.services.tracked_client import TrackedYNABClient
from budget_undo.services.ynab_client import BudgetAPI


def get_history_store(request: Request) -> HistoryStore:
    """History store created at startup"""
    return request.app.state.history_store


def get_ynab_client(request: Request) -> BudgetAPI:
    """Untracked API client, used for corrective undo calls"""
    return request.app.state.ynab_client


def get_tracked_client(request: Request) -> TrackedYNABClient:
    """API client that records every write"""
    return request.app.state.tracked_client


HistoryStoreDep = Annotated[HistoryStore, Depends(get_history_store)]
YNABClientDep = Annotated[BudgetAPI, Depends(get_ynab_client)]
TrackedClientDep = Annotated[TrackedYNABClient, Depends(get_tracked_client)]
