"""History store - newest-first, size-bounded log of entries mirrored to one JSON file."""
import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from budget_undo.core.exceptions import HistoryEntryNotFound
from budget_undo.schemas.history import (
    HistoryEntry,
    HistoryEntryId,
    HistoryEntryStatus,
    history_entries_adapter,
)


logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 100


class HistoryStore:
    """
    Single owner of the history log.

    The log is held in memory and rewritten in full on every change. All
    read-modify-write sequences are serialized by one lock, and the file is
    replaced atomically so a failed write keeps the previous file.
    """

    def __init__(self, file_path: str | Path, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.file_path = Path(file_path)
        self.max_entries = max_entries
        self._entries: list[HistoryEntry] = []
        self._lock = asyncio.Lock()
        self._undo_locks: dict[str, asyncio.Lock] = {}

    async def load(self) -> None:
        """
        Replace the in-memory log with the file's contents.

        A missing, unreadable or malformed file yields an empty log.
        """
        async with self._lock:
            self._entries = await asyncio.to_thread(self._read)
        logger.debug("Loaded %d history entries from %s", len(self._entries), self.file_path)

    async def add(self, entry: HistoryEntry) -> None:
        """Prepend an entry, evict the oldest beyond max_entries, persist."""
        async with self._lock:
            entries = [entry, *self._entries][: self.max_entries]
            await self._save(entries)
            self._entries = entries

    def get(self, entry_id: HistoryEntryId | str) -> HistoryEntry | None:
        """Get entry by id, or None"""
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def get_all(self) -> list[HistoryEntry]:
        """All entries, newest first"""
        return list(self._entries)

    def get_by_budget(self, budget_id: str) -> list[HistoryEntry]:
        """Entries for one budget, newest first"""
        return [entry for entry in self._entries if entry.budget_id == budget_id]

    async def update_status(
        self,
        entry_id: HistoryEntryId | str,
        status: HistoryEntryStatus,
    ) -> HistoryEntry:
        """
        Set the status of an entry and persist.

        Raises:
            HistoryEntryNotFound: If no entry has that id
        """
        async with self._lock:
            for index, existing in enumerate(self._entries):
                if existing.id == entry_id:
                    break
            else:
                raise HistoryEntryNotFound(entry_id)

            updated = existing.model_copy(update={"status": status})
            entries = list(self._entries)
            entries[index] = updated
            await self._save(entries)
            self._entries = entries
        return updated

    def undo_lock(self, entry_id: HistoryEntryId | str) -> asyncio.Lock:
        """Lock held while an entry is being undone, one per entry id"""
        return self._undo_locks.setdefault(entry_id, asyncio.Lock())

    async def clear(self) -> None:
        """Remove all entries and persist."""
        async with self._lock:
            await self._save([])
            self._entries = []

    def _read(self) -> list[HistoryEntry]:
        try:
            content = self.file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.warning("Cannot read history file %s, starting empty: %s", self.file_path, e)
            return []

        try:
            parsed = json.loads(content)
        except ValueError:
            logger.warning("History file %s is not valid JSON, starting empty", self.file_path)
            return []

        if not isinstance(parsed, list):
            logger.warning("History file %s is not a JSON array, starting empty", self.file_path)
            return []

        try:
            return history_entries_adapter.validate_python(parsed)
        except ValidationError as e:
            logger.warning(
                "History file %s has %d invalid entries, starting empty",
                self.file_path,
                e.error_count(),
            )
            return []

    async def _save(self, entries: list[HistoryEntry]) -> None:
        data = history_entries_adapter.dump_json(entries, by_alias=True, indent=2)
        await asyncio.to_thread(self._write, data)

    def _write(self, data: bytes) -> None:
        directory = self.file_path.parent
        directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=directory,
            prefix=f".{self.file_path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, self.file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
