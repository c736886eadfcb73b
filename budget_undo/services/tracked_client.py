"""Tracked client - records a history entry for every successful write."""
import logging
from datetime import date
from decimal import Decimal

from budget_undo.core.exceptions import HistoryRecordError, PayeeNotFound
from budget_undo.schemas.history import (
    CreateAccountEntry,
    CreateScheduledTransactionEntry,
    CreateTransactionEntry,
    DeleteScheduledTransactionEntry,
    DeleteTransactionEntry,
    HistoryEntry,
    StoredScheduledTransactionState,
    StoredTransactionState,
    UpdateCategoryBudgetEntry,
    UpdatePayeeEntry,
    UpdateScheduledTransactionEntry,
    UpdateTransactionEntry,
)
from budget_undo.schemas.ynab import (
    Account,
    AccountCreate,
    Category,
    Payee,
    ScheduledTransaction,
    ScheduledTransactionCreate,
    ScheduledTransactionUpdate,
    Transaction,
    TransactionCreate,
    TransactionUpdate,
)
from budget_undo.services.history_store import HistoryStore
from budget_undo.services.ynab_client import BudgetAPI


logger = logging.getLogger(__name__)


def to_stored_transaction_state(transaction: Transaction) -> StoredTransactionState:
    """Snapshot the mutable fields of a transaction"""
    return StoredTransactionState(
        id=transaction.id,
        account_id=transaction.account_id,
        date=transaction.date,
        amount=transaction.amount,
        payee_id=transaction.payee_id,
        payee_name=transaction.payee_name,
        category_id=transaction.category_id,
        memo=transaction.memo,
        cleared=transaction.cleared,
        approved=transaction.approved,
        flag_color=transaction.flag_color,
    )


def to_stored_scheduled_transaction_state(
    scheduled_transaction: ScheduledTransaction,
) -> StoredScheduledTransactionState:
    """Snapshot the mutable fields of a scheduled transaction"""
    return StoredScheduledTransactionState(
        id=scheduled_transaction.id,
        account_id=scheduled_transaction.account_id,
        date=scheduled_transaction.date_next,
        amount=scheduled_transaction.amount,
        payee_id=scheduled_transaction.payee_id,
        payee_name=scheduled_transaction.payee_name,
        category_id=scheduled_transaction.category_id,
        memo=scheduled_transaction.memo,
        flag_color=scheduled_transaction.flag_color,
        frequency=scheduled_transaction.frequency,
    )


class TrackedYNABClient:
    """
    Wraps the write calls of a budgeting API client.

    Prior state is read before each update or delete. A failed write is
    propagated and nothing is recorded. If recording fails after a
    successful write, HistoryRecordError carries the write's result, since
    the remote change stands.
    """

    def __init__(self, client: BudgetAPI, history_store: HistoryStore) -> None:
        self.client = client
        self.history_store = history_store

    async def _record(self, entry: HistoryEntry, result) -> None:
        try:
            await self.history_store.add(entry)
        except OSError as e:
            logger.error("Could not record %s entry for budget %s: %s", entry.operation, entry.budget_id, e)
            raise HistoryRecordError(result, entry) from e
        logger.info("Recorded %s entry %s for budget %s", entry.operation, entry.id, entry.budget_id)

    # Transactions

    async def create_transaction(self, budget_id: str, data: TransactionCreate) -> Transaction:
        result = await self.client.create_transaction(budget_id, data)

        entry = CreateTransactionEntry(budget_id=budget_id, created_id=result.id)
        await self._record(entry, result)
        return result

    async def update_transaction(
        self,
        budget_id: str,
        transaction_id: str,
        data: TransactionUpdate,
    ) -> Transaction:
        before = await self.client.get_transaction(budget_id, transaction_id)
        before_state = to_stored_transaction_state(before)

        result = await self.client.update_transaction(budget_id, transaction_id, data)

        entry = UpdateTransactionEntry(
            budget_id=budget_id,
            transaction_id=transaction_id,
            before_state=before_state,
        )
        await self._record(entry, result)
        return result

    async def delete_transaction(self, budget_id: str, transaction_id: str) -> Transaction:
        before = await self.client.get_transaction(budget_id, transaction_id)
        before_state = to_stored_transaction_state(before)

        result = await self.client.delete_transaction(budget_id, transaction_id)

        entry = DeleteTransactionEntry(
            budget_id=budget_id,
            transaction_id=transaction_id,
            before_state=before_state,
        )
        await self._record(entry, result)
        return result

    # Scheduled transactions

    async def create_scheduled_transaction(
        self,
        budget_id: str,
        data: ScheduledTransactionCreate,
    ) -> ScheduledTransaction:
        result = await self.client.create_scheduled_transaction(budget_id, data)

        entry = CreateScheduledTransactionEntry(budget_id=budget_id, created_id=result.id)
        await self._record(entry, result)
        return result

    async def update_scheduled_transaction(
        self,
        budget_id: str,
        scheduled_transaction_id: str,
        data: ScheduledTransactionUpdate,
    ) -> ScheduledTransaction:
        before = await self.client.get_scheduled_transaction(budget_id, scheduled_transaction_id)
        before_state = to_stored_scheduled_transaction_state(before)

        result = await self.client.update_scheduled_transaction(
            budget_id, scheduled_transaction_id, data
        )

        entry = UpdateScheduledTransactionEntry(
            budget_id=budget_id,
            scheduled_transaction_id=scheduled_transaction_id,
            before_state=before_state,
        )
        await self._record(entry, result)
        return result

    async def delete_scheduled_transaction(
        self,
        budget_id: str,
        scheduled_transaction_id: str,
    ) -> ScheduledTransaction:
        before = await self.client.get_scheduled_transaction(budget_id, scheduled_transaction_id)
        before_state = to_stored_scheduled_transaction_state(before)

        result = await self.client.delete_scheduled_transaction(budget_id, scheduled_transaction_id)

        entry = DeleteScheduledTransactionEntry(
            budget_id=budget_id,
            scheduled_transaction_id=scheduled_transaction_id,
            before_state=before_state,
        )
        await self._record(entry, result)
        return result

    # Accounts

    async def create_account(self, budget_id: str, data: AccountCreate) -> Account:
        result = await self.client.create_account(budget_id, data)

        entry = CreateAccountEntry(
            budget_id=budget_id,
            created_id=result.id,
            can_undo=False,
        )
        await self._record(entry, result)
        return result

    # Categories

    async def update_category_budget(
        self,
        budget_id: str,
        month: date,
        category_id: str,
        budgeted: Decimal,
    ) -> Category:
        before = await self.client.get_category(budget_id, category_id, month=month)
        before_budgeted = before.budgeted

        result = await self.client.update_category_budget(budget_id, month, category_id, budgeted)

        entry = UpdateCategoryBudgetEntry(
            budget_id=budget_id,
            category_id=category_id,
            month=month,
            before_budgeted=before_budgeted,
        )
        await self._record(entry, result)
        return result

    # Payees

    async def update_payee(self, budget_id: str, payee_id: str, name: str) -> Payee:
        # No single-payee read exists, so look it up in the full list
        payees = await self.client.list_payees(budget_id)
        payee = next((p for p in payees if p.id == payee_id), None)
        if payee is None:
            raise PayeeNotFound(payee_id)
        before_name = payee.name

        result = await self.client.update_payee(budget_id, payee_id, name)

        entry = UpdatePayeeEntry(
            budget_id=budget_id,
            payee_id=payee_id,
            before_name=before_name,
        )
        await self._record(entry, result)
        return result
