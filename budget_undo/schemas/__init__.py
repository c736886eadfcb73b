"""Pydantic schemas for the budgeting API and the history log"""
from budget_undo.schemas.ynab import (
    ClearedStatus,
    FlagColor,
    AccountType,
    ScheduledFrequency,
    TransactionCreate,
    TransactionUpdate,
    ScheduledTransactionCreate,
    ScheduledTransactionUpdate,
    AccountCreate,
    CategoryBudgetUpdate,
    PayeeUpdate,
    Transaction,
    ScheduledTransaction,
    Account,
    Category,
    Payee,
)
from budget_undo.schemas.history import (
    HistoryEntryId,
    HistoryEntryStatus,
    OperationType,
    StoredTransactionState,
    StoredScheduledTransactionState,
    CreateTransactionEntry,
    UpdateTransactionEntry,
    DeleteTransactionEntry,
    CreateScheduledTransactionEntry,
    UpdateScheduledTransactionEntry,
    DeleteScheduledTransactionEntry,
    CreateAccountEntry,
    UpdateCategoryBudgetEntry,
    UpdatePayeeEntry,
    HistoryEntry,
    HistoryListResponse,
    UndoResponse,
    new_history_entry_id,
    is_undoable,
)


__all__ = [
    "ClearedStatus",
    "FlagColor",
    "AccountType",
    "ScheduledFrequency",
    "TransactionCreate",
    "TransactionUpdate",
    "ScheduledTransactionCreate",
    "ScheduledTransactionUpdate",
    "AccountCreate",
    "CategoryBudgetUpdate",
    "PayeeUpdate",
    "Transaction",
    "ScheduledTransaction",
    "Account",
    "Category",
    "Payee",
    "HistoryEntryId",
    "HistoryEntryStatus",
    "OperationType",
    "StoredTransactionState",
    "StoredScheduledTransactionState",
    "CreateTransactionEntry",
    "UpdateTransactionEntry",
    "DeleteTransactionEntry",
    "CreateScheduledTransactionEntry",
    "UpdateScheduledTransactionEntry",
    "DeleteScheduledTransactionEntry",
    "CreateAccountEntry",
    "UpdateCategoryBudgetEntry",
    "UpdatePayeeEntry",
    "HistoryEntry",
    "HistoryListResponse",
    "UndoResponse",
    "new_history_entry_id",
    "is_undoable",
]
