"""Bounded, most-recent-first history of evaluations."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from mini_calc.common.logger import logger
from mini_calc.common.models import HistoryEntry
from mini_calc.storage.storage import JsonStorage


HISTORY_KEY: str = "mini-calc:history"
HISTORY_CAPACITY: int = 100


class HistoryStore(BaseModel):
    """
    Append-bounded log of :class:`HistoryEntry` records.

    Lifecycle:
        - Loaded once from storage when the store is created
        - ``record`` prepends an entry, evicts the oldest beyond ``capacity``
          and persists the list immediately
        - Entries are never edited or deleted otherwise
    """

    model_config = ConfigDict(frozen=True)

    storage: Optional[JsonStorage] = Field(default=None, description="Backing storage, None keeps history in memory")
    capacity: int = Field(default=HISTORY_CAPACITY, ge=1, description="Maximum number of entries kept")

    _entries: List[HistoryEntry] = PrivateAttr(default_factory=list)

    def model_post_init(self, __context) -> None:
        if self.storage is not None:
            self._entries = self._load()

    def _load(self) -> List[HistoryEntry]:
        raw = self.storage.load(HISTORY_KEY, default=[])
        if not isinstance(raw, list):
            logger.warning("📜⚠️ Stored history is not a list, starting empty")
            return []
        entries: List[HistoryEntry] = []
        for item in raw:
            try:
                entries.append(HistoryEntry.model_validate(item))
            except ValidationError as exc:
                logger.warning(f"📜⚠️ Skipping malformed history entry {item!r}: {exc}")
        return entries[: self.capacity]

    def record(self, entry: HistoryEntry) -> None:
        """
        Prepend an entry and truncate the log to ``capacity`` entries.

        :param HistoryEntry entry: Entry to store

        :return: None
        """
        self._entries.insert(0, entry)
        del self._entries[self.capacity :]
        if self.storage is not None:
            self.storage.save(HISTORY_KEY, [e.model_dump() for e in self._entries])

    def list(self, limit: Optional[int] = None) -> List[HistoryEntry]:
        """
        Return entries most recent first, optionally only the first ``limit``.

        :param Optional[int] limit: Maximum number of entries returned

        :return: Copy of the stored entries
        :rtype: List[HistoryEntry]
        """
        if limit is None:
            return list(self._entries)
        return self._entries[: max(limit, 0)]

    def __len__(self) -> int:
        return len(self._entries)
