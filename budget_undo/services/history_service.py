"""History service - listing entries and undoing them"""
import logging

from budget_undo.core.exceptions import HistoryEntryNotFound, YNABAPIError
from budget_undo.schemas.history import HistoryEntry, HistoryEntryStatus
from budget_undo.services.history_store import HistoryStore
from budget_undo.services.inverse_ops import execute_undo
from budget_undo.services.ynab_client import BudgetAPI


logger = logging.getLogger(__name__)


def list_history(
    store: HistoryStore,
    budget_id: str | None = None,
    limit: int | None = None,
) -> list[HistoryEntry]:
    """Entries newest first, optionally for one budget only."""
    if budget_id is None:
        entries = store.get_all()
    else:
        entries = store.get_by_budget(budget_id)
    if limit is not None:
        entries = entries[:limit]
    return entries


def get_entry(store: HistoryStore, entry_id: str) -> HistoryEntry:
    """
    Get entry by id.

    Raises:
        HistoryEntryNotFound: If there is no such entry
    """
    entry = store.get(entry_id)
    if entry is None:
        raise HistoryEntryNotFound(entry_id)
    return entry


async def undo_entry(store: HistoryStore, client: BudgetAPI, entry_id: str) -> HistoryEntry:
    """
    Reverse a recorded mutation and record the outcome.

    Undos of the same entry run one at a time, so the status is read again
    after any earlier undo has recorded its outcome. Rejections (UndoError)
    leave the entry as it is. A failing corrective call marks the entry
    undo_failed and is re-raised.

    Returns:
        HistoryEntry: The entry with status undone
    """
    async with store.undo_lock(entry_id):
        entry = get_entry(store, entry_id)

        try:
            await execute_undo(client, entry)
        except YNABAPIError as e:
            logger.warning("Undo of %s entry %s failed: %s", entry.operation, entry.id, e)
            await store.update_status(entry.id, HistoryEntryStatus.UNDO_FAILED)
            raise

        updated = await store.update_status(entry.id, HistoryEntryStatus.UNDONE)
    logger.info("Undid %s entry %s", entry.operation, entry.id)
    return updated
