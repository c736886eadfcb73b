"""Exceptions raised by the history layer and the remote API client"""
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from budget_undo.schemas.history import HistoryEntry


class HistoryError(Exception):
    """Base class for history errors"""


class HistoryEntryNotFound(HistoryError, LookupError):
    """No history entry has the requested id"""

    def __init__(self, entry_id: str) -> None:
        super().__init__(f"History entry not found: {entry_id}")
        self.entry_id = entry_id


class UndoError(HistoryError):
    """Undo was rejected; the entry status is left untouched"""


class YNABAPIError(Exception):
    """Remote budgeting API returned an error or could not be reached"""

    def __init__(
        self,
        status_code: int | None,
        detail: str,
        error_id: str | None = None,
    ) -> None:
        if status_code is None:
            message = f"YNAB API error: {detail}"
        else:
            message = f"YNAB API error ({status_code}): {detail}"
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail
        self.error_id = error_id


class PayeeNotFound(YNABAPIError):
    """Payee is missing from the budget's payee list"""

    def __init__(self, payee_id: str) -> None:
        super().__init__(404, f"Payee not found: {payee_id}", error_id="404.2")
        self.payee_id = payee_id


class HistoryRecordError(HistoryError):
    """A write succeeded remotely but its history entry could not be saved"""

    def __init__(self, result: Any, entry: "HistoryEntry") -> None:
        super().__init__(f"Could not record {entry.operation} entry {entry.id}; the change was applied")
        self.result = result
        self.entry = entry
