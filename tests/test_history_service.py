"""Tests for undo orchestration and status transitions"""
import asyncio
import json
from datetime import date
from decimal import Decimal

import httpx
import pytest

from budget_undo.core.exceptions import HistoryEntryNotFound, UndoError, YNABAPIError
from budget_undo.schemas.history import (
    CreateAccountEntry,
    CreateTransactionEntry,
    HistoryEntryStatus,
    UpdateCategoryBudgetEntry,
)
from budget_undo.schemas.ynab import TransactionUpdate
from budget_undo.services import history_service
from budget_undo.services.tracked_client import TrackedYNABClient
from budget_undo.services.ynab_client import YNABClient

from conftest import BUDGET_ID


@pytest.mark.asyncio
async def test_undo_marks_entry_undone(store, fake_api, history_file):
    entry = CreateTransactionEntry(budget_id=BUDGET_ID, created_id="tx-1")
    await store.add(entry)

    updated = await history_service.undo_entry(store, fake_api, entry.id)

    assert updated.status == HistoryEntryStatus.UNDONE
    assert fake_api.calls == [("delete_transaction", BUDGET_ID, "tx-1")]
    assert json.loads(history_file.read_text())[0]["status"] == "undone"


@pytest.mark.asyncio
async def test_second_undo_is_rejected_without_calls(store, fake_api):
    entry = CreateTransactionEntry(budget_id=BUDGET_ID, created_id="tx-1")
    await store.add(entry)
    await history_service.undo_entry(store, fake_api, entry.id)
    fake_api.calls.clear()

    with pytest.raises(UndoError):
        await history_service.undo_entry(store, fake_api, entry.id)

    assert fake_api.calls == []
    assert store.get(entry.id).status == HistoryEntryStatus.UNDONE


@pytest.mark.asyncio
async def test_failed_undo_marks_entry_undo_failed_and_reraises(store, fake_api):
    entry = CreateTransactionEntry(budget_id=BUDGET_ID, created_id="tx-1")
    await store.add(entry)
    fake_api.fail_on.add("delete_transaction")

    with pytest.raises(YNABAPIError):
        await history_service.undo_entry(store, fake_api, entry.id)

    assert store.get(entry.id).status == HistoryEntryStatus.UNDO_FAILED

    # no automatic retry
    fake_api.fail_on.clear()
    fake_api.calls.clear()
    with pytest.raises(UndoError, match="Previous undo attempt failed"):
        await history_service.undo_entry(store, fake_api, entry.id)
    assert fake_api.calls == []


@pytest.mark.asyncio
async def test_concurrent_undos_of_one_entry_issue_one_call(store, fake_api):
    entry = CreateTransactionEntry(budget_id=BUDGET_ID, created_id="tx-1")
    await store.add(entry)
    delete_transaction = fake_api.delete_transaction

    async def slow_delete(budget_id, transaction_id):
        await asyncio.sleep(0.01)
        return await delete_transaction(budget_id, transaction_id)

    fake_api.delete_transaction = slow_delete

    results = await asyncio.gather(
        history_service.undo_entry(store, fake_api, entry.id),
        history_service.undo_entry(store, fake_api, entry.id),
        return_exceptions=True,
    )

    assert results[0].status == HistoryEntryStatus.UNDONE
    assert isinstance(results[1], UndoError)
    assert fake_api.call_names() == ["delete_transaction"]
    assert store.get(entry.id).status == HistoryEntryStatus.UNDONE


@pytest.mark.asyncio
async def test_unreadable_corrective_response_marks_undo_failed(store):
    entry = CreateTransactionEntry(budget_id=BUDGET_ID, created_id="tx-1")
    await store.add(entry)
    client = YNABClient(
        token="t",
        base_url="https://api.example.test/v1",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>gateway</html>")),
    )

    with pytest.raises(YNABAPIError):
        await history_service.undo_entry(store, client, entry.id)

    assert store.get(entry.id).status == HistoryEntryStatus.UNDO_FAILED
    await client.aclose()


@pytest.mark.asyncio
async def test_account_creation_undo_leaves_status(store, fake_api):
    entry = CreateAccountEntry(budget_id=BUDGET_ID, created_id="account-1")
    await store.add(entry)

    with pytest.raises(UndoError):
        await history_service.undo_entry(store, fake_api, entry.id)

    assert store.get(entry.id).status == HistoryEntryStatus.SUCCESS
    assert fake_api.calls == []


@pytest.mark.asyncio
async def test_undo_unknown_entry_raises_not_found(store, fake_api):
    with pytest.raises(HistoryEntryNotFound):
        await history_service.undo_entry(store, fake_api, "missing")

    assert fake_api.calls == []


@pytest.mark.asyncio
async def test_category_budget_undo_sends_exact_amount(store, fake_api):
    entry = UpdateCategoryBudgetEntry(
        budget_id=BUDGET_ID,
        category_id="category-abc",
        month=date(2025, 1, 1),
        before_budgeted=Decimal("500"),
    )
    await store.add(entry)

    await history_service.undo_entry(store, fake_api, entry.id)

    assert fake_api.calls == [
        ("update_category_budget", BUDGET_ID, date(2025, 1, 1), "category-abc", Decimal("500")),
    ]


@pytest.mark.asyncio
async def test_tracked_update_then_undo_restores_snapshot(store, fake_api):
    tracked = TrackedYNABClient(fake_api, store)
    await tracked.update_transaction(BUDGET_ID, "transaction-789", TransactionUpdate(memo="Changed"))
    [entry] = store.get_all()
    fake_api.calls.clear()

    await history_service.undo_entry(store, fake_api, entry.id)

    [(name, budget_id, transaction_id, payload)] = fake_api.calls
    assert name == "update_transaction"
    assert transaction_id == "transaction-789"
    assert payload.amount == Decimal("-5.00")
    assert "memo" not in payload.model_dump(exclude_unset=True)


@pytest.mark.asyncio
async def test_list_history_filters_and_limits(store):
    for budget_id, created_id in [("b1", "tx-1"), ("b2", "tx-2"), ("b1", "tx-3")]:
        await store.add(CreateTransactionEntry(budget_id=budget_id, created_id=created_id))

    assert [e.created_id for e in history_service.list_history(store)] == ["tx-3", "tx-2", "tx-1"]
    assert [e.created_id for e in history_service.list_history(store, budget_id="b1")] == ["tx-3", "tx-1"]
    assert [e.created_id for e in history_service.list_history(store, limit=1)] == ["tx-3"]


def test_get_entry_raises_for_unknown_id(store):
    with pytest.raises(HistoryEntryNotFound):
        history_service.get_entry(store, "missing")
