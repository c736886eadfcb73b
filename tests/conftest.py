"""Shared fixtures: a recording fake of the budgeting API and a temp history store"""
import itertools
from datetime import date
from decimal import Decimal

import pytest

from budget_undo.core.exceptions import YNABAPIError
from budget_undo.schemas.ynab import (
    Account,
    Category,
    ClearedStatus,
    FlagColor,
    Payee,
    ScheduledFrequency,
    ScheduledTransaction,
    Transaction,
)
from budget_undo.services.history_store import HistoryStore


BUDGET_ID = "budget-123"


def make_transaction(**overrides) -> Transaction:
    data = {
        "id": "transaction-789",
        "date": date(2025, 1, 1),
        "amount": Decimal("-5.00"),
        "account_id": "account-456",
        "payee_id": "payee-def",
        "payee_name": None,
        "category_id": "category-abc",
        "memo": None,
        "cleared": ClearedStatus.CLEARED,
        "approved": True,
        "flag_color": None,
    }
    data.update(overrides)
    return Transaction(**data)


def make_scheduled_transaction(**overrides) -> ScheduledTransaction:
    data = {
        "id": "scheduled-321",
        "date_first": date(2025, 2, 1),
        "date_next": date(2025, 3, 1),
        "frequency": ScheduledFrequency.MONTHLY,
        "amount": Decimal("-1200.00"),
        "account_id": "account-456",
        "payee_id": "payee-rent",
        "payee_name": "Landlord",
        "category_id": "category-rent",
        "memo": "Rent",
        "flag_color": FlagColor.BLUE,
    }
    data.update(overrides)
    return ScheduledTransaction(**data)


class FakeBudgetAPI:
    """In-memory stand-in for YNABClient that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()
        self.fail_status: int | None = 500
        self.transaction = make_transaction()
        self.scheduled_transaction = make_scheduled_transaction()
        self.category = Category(id="category-abc", name="Groceries", budgeted=Decimal("500"))
        self.payees = [
            Payee(id="payee-def", name="Corner Shop"),
            Payee(id="payee-ghi", name="Gym"),
        ]
        self._ids = itertools.count(1)

    def _call(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise YNABAPIError(self.fail_status, f"{name} failed")

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def _new_id(self, prefix: str) -> str:
        return f"{prefix}-new-{next(self._ids)}"

    async def create_transaction(self, budget_id, data):
        self._call("create_transaction", budget_id, data)
        return make_transaction(id=self._new_id("transaction"), **data.model_dump(exclude_unset=True))

    async def update_transaction(self, budget_id, transaction_id, data):
        self._call("update_transaction", budget_id, transaction_id, data)
        return self.transaction.model_copy(update=data.model_dump(exclude_unset=True))

    async def delete_transaction(self, budget_id, transaction_id):
        self._call("delete_transaction", budget_id, transaction_id)
        return self.transaction.model_copy(update={"deleted": True})

    async def get_transaction(self, budget_id, transaction_id):
        self._call("get_transaction", budget_id, transaction_id)
        return self.transaction

    async def create_scheduled_transaction(self, budget_id, data):
        self._call("create_scheduled_transaction", budget_id, data)
        fields = data.model_dump(exclude_unset=True)
        fields["date_next"] = fields.pop("date")
        return make_scheduled_transaction(id=self._new_id("scheduled"), **fields)

    async def update_scheduled_transaction(self, budget_id, scheduled_transaction_id, data):
        self._call("update_scheduled_transaction", budget_id, scheduled_transaction_id, data)
        return self.scheduled_transaction

    async def delete_scheduled_transaction(self, budget_id, scheduled_transaction_id):
        self._call("delete_scheduled_transaction", budget_id, scheduled_transaction_id)
        return self.scheduled_transaction.model_copy(update={"deleted": True})

    async def get_scheduled_transaction(self, budget_id, scheduled_transaction_id):
        self._call("get_scheduled_transaction", budget_id, scheduled_transaction_id)
        return self.scheduled_transaction

    async def create_account(self, budget_id, data):
        self._call("create_account", budget_id, data)
        return Account(id=self._new_id("account"), name=data.name, type=data.type, balance=data.balance)

    async def update_category_budget(self, budget_id, month, category_id, budgeted):
        self._call("update_category_budget", budget_id, month, category_id, budgeted)
        return self.category.model_copy(update={"budgeted": budgeted})

    async def get_category(self, budget_id, category_id, month=None):
        self._call("get_category", budget_id, category_id, month)
        return self.category

    async def update_payee(self, budget_id, payee_id, name):
        self._call("update_payee", budget_id, payee_id, name)
        return Payee(id=payee_id, name=name)

    async def list_payees(self, budget_id):
        self._call("list_payees", budget_id)
        return list(self.payees)


@pytest.fixture
def fake_api() -> FakeBudgetAPI:
    return FakeBudgetAPI()


@pytest.fixture
def history_file(tmp_path):
    return tmp_path / "history" / "history.json"


@pytest.fixture
def store(history_file) -> HistoryStore:
    return HistoryStore(history_file)
