"""Service layer: remote API client, history log and undo"""
from budget_undo.services import (
    ynab_client,
    history_store,
    inverse_ops,
    tracked_client,
    history_service,
)

__all__ = [
    "ynab_client",
    "history_store",
    "inverse_ops",
    "tracked_client",
    "history_service",
]
