# storefront/core/file_store.py
"""
Persistence backends for the flat-file stores (cart sessions, preview drafts).

A backend only knows how to `load()` a JSON-compatible document and `save()`
one back. Stores hold the parsed document in memory and call `save()` after
every mutation.
"""

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class StoreBackend(Protocol):
    def load(self) -> Any | None:
        ...

    def save(self, data: Any) -> None:
        ...


class JsonFileBackend:
    """
    JSON document on local disk.

    - Missing or empty file => None (store starts empty).
    - Unreadable / invalid JSON => logged and treated as empty.
    - save() writes to a temp file in the same directory and renames it
      over the target so readers never see a half-written file.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Any | None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Could not read store file %s: %s", self.path, e)
            return None

        if not raw.strip():
            return None

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Store file %s is not valid JSON, starting empty: %s", self.path, e)
            return None

    def save(self, data: Any) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self.path.name}.", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise


class InMemoryBackend:
    """Backend for tests: keeps a deep copy of the last saved document."""

    def __init__(self, initial: Any | None = None):
        self.data = copy.deepcopy(initial)
        self.save_count = 0

    def load(self) -> Any | None:
        return copy.deepcopy(self.data)

    def save(self, data: Any) -> None:
        self.data = copy.deepcopy(data)
        self.save_count += 1
