# storefront/repositories/preview_draft_store.py
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from pydantic import ValidationError

from storefront.core.file_store import StoreBackend
from storefront.schemas.product import ProductPreviewDraft, StoredPreviewDraft

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PreviewDraftStore:
    """
    Short-lived snapshots of an in-progress product edit, used by the admin
    "preview before publish" page.

    Drafts are append-only and live for `ttl`. There is no background sweep:
    expired entries are pruned whenever the list is read or written.
    """

    def __init__(
        self,
        backend: StoreBackend,
        ttl: timedelta = timedelta(minutes=20),
        clock: Callable[[], datetime] | None = None,
    ):
        self.backend = backend
        self.ttl = ttl
        self.clock = clock or _utcnow

    def _load(self) -> list[StoredPreviewDraft]:
        raw = self.backend.load()
        if isinstance(raw, dict):
            raw = raw.get("items")
        if not isinstance(raw, list):
            return []

        drafts: list[StoredPreviewDraft] = []
        for entry in raw:
            try:
                drafts.append(StoredPreviewDraft.model_validate(entry))
            except ValidationError:
                logger.warning("Dropping malformed preview draft entry")
        return drafts

    def _save(self, drafts: list[StoredPreviewDraft]) -> None:
        self.backend.save([draft.model_dump(mode="json") for draft in drafts])

    def _prune(self, drafts: list[StoredPreviewDraft]) -> list[StoredPreviewDraft]:
        now = self.clock()
        return [draft for draft in drafts if draft.expires_at > now]

    def create(self, payload: ProductPreviewDraft) -> StoredPreviewDraft:
        drafts = self._prune(self._load())
        stored = StoredPreviewDraft(
            token=str(uuid.uuid4()),
            expires_at=self.clock() + self.ttl,
            payload=payload.model_copy(deep=True),
        )
        drafts.append(stored)
        self._save(drafts)
        return stored

    def get(self, token: Any) -> ProductPreviewDraft | None:
        key = token.strip() if isinstance(token, str) else ""
        if not key:
            return None

        current = self._load()
        live = self._prune(current)
        if len(live) != len(current):
            self._save(live)

        stored = next((draft for draft in live if draft.token == key), None)
        if stored is None:
            return None
        return stored.payload.model_copy(deep=True)
