"""Inverse operations - turn a history entry into the call that reverses it.

Each handler issues exactly one call against the budgeting API and never
touches the history log; recording the outcome is up to the caller.
"""
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from budget_undo.core.exceptions import UndoError
from budget_undo.schemas.history import (
    CreateAccountEntry,
    CreateScheduledTransactionEntry,
    CreateTransactionEntry,
    DeleteScheduledTransactionEntry,
    DeleteTransactionEntry,
    HistoryEntry,
    HistoryEntryStatus,
    OperationType,
    StoredScheduledTransactionState,
    StoredTransactionState,
    UpdateCategoryBudgetEntry,
    UpdatePayeeEntry,
    UpdateScheduledTransactionEntry,
    UpdateTransactionEntry,
)
from budget_undo.schemas.ynab import (
    ScheduledTransactionCreate,
    ScheduledTransactionUpdate,
    TransactionCreate,
    TransactionUpdate,
)
from budget_undo.services.ynab_client import BudgetAPI


logger = logging.getLogger(__name__)


def _replay_fields(state: StoredTransactionState | StoredScheduledTransactionState) -> dict[str, Any]:
    """
    Snapshot fields to send back, without the resource id.

    A stored ``None`` is left out, so the field is "not provided" rather
    than explicitly cleared.
    """
    return state.model_dump(exclude={"id"}, exclude_none=True)


def to_transaction_create(state: StoredTransactionState) -> TransactionCreate:
    """Payload that re-creates a deleted transaction from its snapshot"""
    return TransactionCreate(**_replay_fields(state))


def to_transaction_update(state: StoredTransactionState) -> TransactionUpdate:
    """Payload that puts a transaction back to its snapshot"""
    return TransactionUpdate(**_replay_fields(state))


def to_scheduled_transaction_create(state: StoredScheduledTransactionState) -> ScheduledTransactionCreate:
    """Payload that re-creates a deleted scheduled transaction from its snapshot"""
    return ScheduledTransactionCreate(**_replay_fields(state))


def to_scheduled_transaction_update(state: StoredScheduledTransactionState) -> ScheduledTransactionUpdate:
    """Payload that puts a scheduled transaction back to its snapshot"""
    return ScheduledTransactionUpdate(**_replay_fields(state))


async def _undo_create_transaction(client: BudgetAPI, entry: CreateTransactionEntry) -> None:
    await client.delete_transaction(entry.budget_id, entry.created_id)


async def _undo_update_transaction(client: BudgetAPI, entry: UpdateTransactionEntry) -> None:
    await client.update_transaction(
        entry.budget_id,
        entry.transaction_id,
        to_transaction_update(entry.before_state),
    )


async def _undo_delete_transaction(client: BudgetAPI, entry: DeleteTransactionEntry) -> None:
    # The re-created transaction gets a new id
    await client.create_transaction(entry.budget_id, to_transaction_create(entry.before_state))


async def _undo_create_scheduled_transaction(
    client: BudgetAPI,
    entry: CreateScheduledTransactionEntry,
) -> None:
    await client.delete_scheduled_transaction(entry.budget_id, entry.created_id)


async def _undo_update_scheduled_transaction(
    client: BudgetAPI,
    entry: UpdateScheduledTransactionEntry,
) -> None:
    await client.update_scheduled_transaction(
        entry.budget_id,
        entry.scheduled_transaction_id,
        to_scheduled_transaction_update(entry.before_state),
    )


async def _undo_delete_scheduled_transaction(
    client: BudgetAPI,
    entry: DeleteScheduledTransactionEntry,
) -> None:
    await client.create_scheduled_transaction(
        entry.budget_id,
        to_scheduled_transaction_create(entry.before_state),
    )


async def _undo_create_account(client: BudgetAPI, entry: CreateAccountEntry) -> None:
    raise UndoError("Cannot undo account creation: YNAB API does not support account deletion")


async def _undo_update_category_budget(client: BudgetAPI, entry: UpdateCategoryBudgetEntry) -> None:
    await client.update_category_budget(
        entry.budget_id,
        entry.month,
        entry.category_id,
        entry.before_budgeted,
    )


async def _undo_update_payee(client: BudgetAPI, entry: UpdatePayeeEntry) -> None:
    await client.update_payee(entry.budget_id, entry.payee_id, entry.before_name)


UNDO_HANDLERS: dict[OperationType, Callable[[BudgetAPI, Any], Awaitable[None]]] = {
    OperationType.CREATE_TRANSACTION: _undo_create_transaction,
    OperationType.UPDATE_TRANSACTION: _undo_update_transaction,
    OperationType.DELETE_TRANSACTION: _undo_delete_transaction,
    OperationType.CREATE_SCHEDULED_TRANSACTION: _undo_create_scheduled_transaction,
    OperationType.UPDATE_SCHEDULED_TRANSACTION: _undo_update_scheduled_transaction,
    OperationType.DELETE_SCHEDULED_TRANSACTION: _undo_delete_scheduled_transaction,
    OperationType.CREATE_ACCOUNT: _undo_create_account,
    OperationType.UPDATE_CATEGORY_BUDGET: _undo_update_category_budget,
    OperationType.UPDATE_PAYEE: _undo_update_payee,
}

_missing = set(OperationType) - set(UNDO_HANDLERS)
if _missing:
    raise RuntimeError(f"No undo handler for: {sorted(op.value for op in _missing)}")


def check_undo_allowed(entry: HistoryEntry) -> None:
    """
    Reject entries whose undo may not be attempted.

    Raises:
        UndoError: If the entry was already undone or a previous undo failed
    """
    if entry.status == HistoryEntryStatus.UNDONE:
        raise UndoError("Entry has already been undone")
    if entry.status == HistoryEntryStatus.UNDO_FAILED:
        raise UndoError("Previous undo attempt failed")


async def execute_undo(client: BudgetAPI, entry: HistoryEntry) -> None:
    """
    Issue the call that reverses ``entry``.

    Raises:
        UndoError: If the entry cannot be undone; no call is made
        YNABAPIError: If the corrective call fails
    """
    check_undo_allowed(entry)
    handler = UNDO_HANDLERS[OperationType(entry.operation)]
    logger.info("Undoing %s entry %s", entry.operation, entry.id)
    await handler(client, entry)
