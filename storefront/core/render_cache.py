# storefront/core/render_cache.py
"""
Invalidation hook for the storefront/dashboard render cache.

Rendering (and caching) happens outside this service. After a write commits
we record which page paths are stale and notify registered listeners, e.g. a
webhook that tells the frontend to revalidate.
"""

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

Listener = Callable[[list[str]], None]


class RenderCacheInvalidator:
    """Keeps the most recent invalidations and fans them out to listeners."""

    def __init__(self, history_size: int = 200):
        self._history: deque[tuple[datetime, str]] = deque(maxlen=history_size)
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def revalidate(self, paths: Iterable[str]) -> list[str]:
        unique: list[str] = []
        for path in paths:
            path = path.strip()
            if path and path not in unique:
                unique.append(path)
        if not unique:
            return []

        now = datetime.now(timezone.utc)
        for path in unique:
            self._history.append((now, path))

        logger.info("Render cache invalidated: %s", ", ".join(unique))
        for listener in self._listeners:
            listener(unique)
        return unique

    @property
    def recent_paths(self) -> list[str]:
        return [path for _, path in self._history]
