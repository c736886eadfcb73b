"""History API endpoints"""
from fastapi import APIRouter, HTTPException, status, Query

from budget_undo.core.deps import HistoryStoreDep, YNABClientDep
from budget_undo.core.exceptions import HistoryEntryNotFound, UndoError, YNABAPIError
from budget_undo.schemas.history import HistoryEntry, HistoryListResponse, UndoResponse
from budget_undo.services import history_service


router = APIRouter(prefix="/history", tags=["history"])


@router.get("", response_model=HistoryListResponse)
async def list_history(
    store: HistoryStoreDep,
    budget_id: str | None = Query(None),
    limit: int | None = Query(None, ge=1, le=1000),
):
    """List recorded writes, newest first"""
    entries = history_service.list_history(store, budget_id=budget_id, limit=limit)
    return HistoryListResponse(items=entries, total=len(entries))


@router.get("/{entry_id}", response_model=HistoryEntry)
async def get_history_entry(entry_id: str, store: HistoryStoreDep):
    """Get history entry by ID"""
    try:
        return history_service.get_entry(store, entry_id)
    except HistoryEntryNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="History entry not found"
        )


@router.post("/{entry_id}/undo", response_model=UndoResponse)
async def undo_history_entry(
    entry_id: str,
    store: HistoryStoreDep,
    client: YNABClientDep,
):
    """Reverse a recorded write"""
    try:
        entry = await history_service.undo_entry(store, client, entry_id)
    except HistoryEntryNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="History entry not found"
        )
    except UndoError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except YNABAPIError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Undo failed: {e.detail}"
        )
    return UndoResponse(entry=entry, message=f"Undid {entry.operation}")


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_history(store: HistoryStoreDep):
    """Remove all history entries"""
    await store.clear()
