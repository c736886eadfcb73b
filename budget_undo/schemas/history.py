"""History entry schemas.

An entry records one successful mutation against the budgeting API together
with what is needed to reverse it. Entries form a closed union keyed by
``operation``; only ``status`` changes after creation.
"""
import uuid
from datetime import date as Date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, NewType, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from budget_undo.schemas.ynab import ClearedStatus, FlagColor, ScheduledFrequency


HistoryEntryId = NewType("HistoryEntryId", str)


def new_history_entry_id() -> HistoryEntryId:
    """Mint a fresh, never reused entry id."""
    return HistoryEntryId(str(uuid.uuid4()))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HistoryEntryStatus(str, Enum):
    """Lifecycle of an entry: success -> undone | undo_failed"""
    SUCCESS = "success"
    UNDONE = "undone"
    UNDO_FAILED = "undo_failed"


class OperationType(str, Enum):
    """Mutations recorded in the history"""
    CREATE_TRANSACTION = "create_transaction"
    UPDATE_TRANSACTION = "update_transaction"
    DELETE_TRANSACTION = "delete_transaction"
    CREATE_SCHEDULED_TRANSACTION = "create_scheduled_transaction"
    UPDATE_SCHEDULED_TRANSACTION = "update_scheduled_transaction"
    DELETE_SCHEDULED_TRANSACTION = "delete_scheduled_transaction"
    CREATE_ACCOUNT = "create_account"
    UPDATE_CATEGORY_BUDGET = "update_category_budget"
    UPDATE_PAYEE = "update_payee"


class StoredTransactionState(BaseModel):
    """Transaction fields captured before an update or delete"""
    model_config = ConfigDict(frozen=True)

    id: str
    account_id: str
    date: Date
    amount: Decimal
    payee_id: str | None = None
    payee_name: str | None = None
    category_id: str | None = None
    memo: str | None = None
    cleared: ClearedStatus | None = None
    approved: bool | None = None
    flag_color: FlagColor | None = None


class StoredScheduledTransactionState(BaseModel):
    """Scheduled transaction fields captured before an update or delete"""
    model_config = ConfigDict(frozen=True)

    id: str
    account_id: str
    date: Date
    amount: Decimal
    payee_id: str | None = None
    payee_name: str | None = None
    category_id: str | None = None
    memo: str | None = None
    flag_color: FlagColor | None = None
    frequency: ScheduledFrequency | None = None


class BaseHistoryEntry(BaseModel):
    """Fields shared by every entry"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: HistoryEntryId = Field(default_factory=new_history_entry_id)
    timestamp: datetime = Field(default_factory=_utcnow)
    budget_id: str
    status: HistoryEntryStatus = HistoryEntryStatus.SUCCESS


class CreateTransactionEntry(BaseHistoryEntry):
    operation: Literal["create_transaction"] = "create_transaction"
    created_id: str


class UpdateTransactionEntry(BaseHistoryEntry):
    operation: Literal["update_transaction"] = "update_transaction"
    transaction_id: str
    before_state: StoredTransactionState


class DeleteTransactionEntry(BaseHistoryEntry):
    operation: Literal["delete_transaction"] = "delete_transaction"
    transaction_id: str
    before_state: StoredTransactionState


class CreateScheduledTransactionEntry(BaseHistoryEntry):
    operation: Literal["create_scheduled_transaction"] = "create_scheduled_transaction"
    created_id: str


class UpdateScheduledTransactionEntry(BaseHistoryEntry):
    operation: Literal["update_scheduled_transaction"] = "update_scheduled_transaction"
    scheduled_transaction_id: str
    before_state: StoredScheduledTransactionState


class DeleteScheduledTransactionEntry(BaseHistoryEntry):
    operation: Literal["delete_scheduled_transaction"] = "delete_scheduled_transaction"
    scheduled_transaction_id: str
    before_state: StoredScheduledTransactionState


class CreateAccountEntry(BaseHistoryEntry):
    """Account creation; the API has no account deletion, so never undoable"""
    operation: Literal["create_account"] = "create_account"
    created_id: str
    can_undo: Literal[False] = False


class UpdateCategoryBudgetEntry(BaseHistoryEntry):
    operation: Literal["update_category_budget"] = "update_category_budget"
    category_id: str
    month: Date
    before_budgeted: Decimal


class UpdatePayeeEntry(BaseHistoryEntry):
    operation: Literal["update_payee"] = "update_payee"
    payee_id: str
    before_name: str


HistoryEntry = Annotated[
    Union[
        CreateTransactionEntry,
        UpdateTransactionEntry,
        DeleteTransactionEntry,
        CreateScheduledTransactionEntry,
        UpdateScheduledTransactionEntry,
        DeleteScheduledTransactionEntry,
        CreateAccountEntry,
        UpdateCategoryBudgetEntry,
        UpdatePayeeEntry,
    ],
    Field(discriminator="operation"),
]

history_entries_adapter = TypeAdapter(list[HistoryEntry])


def is_undoable(entry: BaseHistoryEntry) -> bool:
    """True if the entry may still be reversed."""
    if entry.operation == OperationType.CREATE_ACCOUNT.value:
        return False
    return entry.status == HistoryEntryStatus.SUCCESS


class HistoryListResponse(BaseModel):
    """Schema for a list of history entries, newest first"""
    items: list[HistoryEntry]
    total: int


class UndoResponse(BaseModel):
    """Schema for the result of an undo"""
    entry: HistoryEntry
    message: str
