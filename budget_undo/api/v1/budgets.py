"""Budget write endpoints - every successful call is recorded in the history"""
import logging
from collections.abc import Awaitable
from datetime import date
from typing import TypeVar

from fastapi import APIRouter, HTTPException, Response, status

from budget_undo.core.deps import TrackedClientDep
from budget_undo.core.exceptions import HistoryRecordError, YNABAPIError
from budget_undo.schemas.ynab import (
    Account,
    AccountCreate,
    Category,
    CategoryBudgetUpdate,
    Payee,
    PayeeUpdate,
    ScheduledTransaction,
    ScheduledTransactionCreate,
    ScheduledTransactionUpdate,
    Transaction,
    TransactionCreate,
    TransactionUpdate,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/budgets/{budget_id}", tags=["budgets"])

HISTORY_DEGRADED_HEADER = "X-History-Degraded"

T = TypeVar("T")


def _remote_error(e: YNABAPIError) -> HTTPException:
    if e.status_code == status.HTTP_404_NOT_FOUND:
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.detail)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.detail)


async def _tracked(call: Awaitable[T], response: Response) -> T:
    """
    Await a tracked write.

    If only the history entry failed to save, the write still counts as done:
    its result is returned and the response is flagged with
    X-History-Degraded.
    """
    try:
        return await call
    except HistoryRecordError as e:
        logger.warning("%s", e)
        response.headers[HISTORY_DEGRADED_HEADER] = "true"
        return e.result
    except YNABAPIError as e:
        raise _remote_error(e)


@router.post("/transactions", response_model=Transaction, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    budget_id: str,
    data: TransactionCreate,
    client: TrackedClientDep,
    response: Response,
):
    """Create a new transaction"""
    return await _tracked(client.create_transaction(budget_id, data), response)


@router.patch("/transactions/{transaction_id}", response_model=Transaction)
async def update_transaction(
    budget_id: str,
    transaction_id: str,
    data: TransactionUpdate,
    client: TrackedClientDep,
    response: Response,
):
    """Update transaction; only provided fields change"""
    return await _tracked(client.update_transaction(budget_id, transaction_id, data), response)


@router.delete("/transactions/{transaction_id}", response_model=Transaction)
async def delete_transaction(
    budget_id: str,
    transaction_id: str,
    client: TrackedClientDep,
    response: Response,
):
    """Delete transaction"""
    return await _tracked(client.delete_transaction(budget_id, transaction_id), response)


@router.post(
    "/scheduled_transactions",
    response_model=ScheduledTransaction,
    status_code=status.HTTP_201_CREATED,
)
async def create_scheduled_transaction(
    budget_id: str,
    data: ScheduledTransactionCreate,
    client: TrackedClientDep,
    response: Response,
):
    """Create a new scheduled transaction"""
    return await _tracked(client.create_scheduled_transaction(budget_id, data), response)


@router.patch(
    "/scheduled_transactions/{scheduled_transaction_id}",
    response_model=ScheduledTransaction,
)
async def update_scheduled_transaction(
    budget_id: str,
    scheduled_transaction_id: str,
    data: ScheduledTransactionUpdate,
    client: TrackedClientDep,
    response: Response,
):
    """Update scheduled transaction"""
    return await _tracked(
        client.update_scheduled_transaction(budget_id, scheduled_transaction_id, data),
        response,
    )


@router.delete(
    "/scheduled_transactions/{scheduled_transaction_id}",
    response_model=ScheduledTransaction,
)
async def delete_scheduled_transaction(
    budget_id: str,
    scheduled_transaction_id: str,
    client: TrackedClientDep,
    response: Response,
):
    """Delete scheduled transaction"""
    return await _tracked(
        client.delete_scheduled_transaction(budget_id, scheduled_transaction_id),
        response,
    )


@router.post("/accounts", response_model=Account, status_code=status.HTTP_201_CREATED)
async def create_account(
    budget_id: str,
    data: AccountCreate,
    client: TrackedClientDep,
    response: Response,
):
    """Create a new account (cannot be undone)"""
    return await _tracked(client.create_account(budget_id, data), response)


@router.patch("/months/{month}/categories/{category_id}", response_model=Category)
async def update_category_budget(
    budget_id: str,
    month: date,
    category_id: str,
    data: CategoryBudgetUpdate,
    client: TrackedClientDep,
    response: Response,
):
    """Set the budgeted amount of a category for a month"""
    return await _tracked(
        client.update_category_budget(budget_id, month, category_id, data.budgeted),
        response,
    )


@router.patch("/payees/{payee_id}", response_model=Payee)
async def update_payee(
    budget_id: str,
    payee_id: str,
    data: PayeeUpdate,
    client: TrackedClientDep,
    response: Response,
):
    """Rename a payee"""
    return await _tracked(client.update_payee(budget_id, payee_id, data.name), response)
