"""Best-effort JSON key/value storage on the local filesystem."""
import json
from pathlib import Path
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mini_calc.common.logger import logger


_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class JsonStorage(BaseModel):
    """
    Store one JSON document per key inside a data directory.

    Reads return the given default when a record is missing or unreadable.
    Writes are best-effort: a failed write is logged and swallowed, and the
    caller keeps using its in-memory state.
    """

    model_config = ConfigDict(frozen=True)

    directory: Path = Field(..., description="Directory holding the JSON documents")

    def path_for(self, key: str) -> Path:
        """
        Return the file backing a key, e.g. ``mini-calc:history`` -> ``mini-calc_history.json``.

        :param str key: Storage key

        :return: Path of the JSON document
        :rtype: Path
        """
        return self.directory / f"{_UNSAFE_CHARS.sub('_', key)}.json"

    def load(self, key: str, default: Any = None) -> Any:
        """
        Load the document stored under ``key``.

        :param str key: Storage key
        :param default: Value returned when nothing usable is stored

        :return: Decoded JSON document or ``default``
        """
        path = self.path_for(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning(f"💾⚠️ Ignoring unreadable record {key!r} in {path}: {exc}")
            return default

    def save(self, key: str, document: Any) -> bool:
        """
        Write ``document`` under ``key``, replacing any previous content.

        :param str key: Storage key
        :param document: JSON-serializable document

        :return: True when the write succeeded, False when it was dropped
        :rtype: bool
        """
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            logger.error(f"💾❌ Could not save record {key!r} to {path}: {exc}")
            return False
        return True
