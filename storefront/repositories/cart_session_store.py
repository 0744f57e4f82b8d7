# storefront/repositories/cart_session_store.py
import logging
import math
import uuid
from datetime import datetime, timezone
from typing import Any, Callable

from storefront.core.file_store import StoreBackend
from storefront.core.money import money
from storefront.schemas.cart import CartItem, CartSession

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_cart_session_id() -> str:
    """Opaque guest cart id, e.g. cart_3f2a...; safe to put in a cookie."""
    return f"cart_{uuid.uuid4().hex}"


def safe_string(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def safe_price(value: Any) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(parsed):
        return 0.0
    return max(0.0, money(parsed))


def safe_quantity(value: Any) -> int:
    """Coerce to an integer >= 1; anything invalid or non-finite becomes 1."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 1
    if not math.isfinite(parsed) or parsed < 1:
        return 1
    return max(1, math.floor(parsed))


def normalize_item(data: dict[str, Any]) -> CartItem | None:
    """Build a CartItem from loose input, or None when id/name/price are unusable."""
    item_id = safe_string(data.get("id"))
    name = safe_string(data.get("name"))
    price = safe_price(data.get("price"))
    if not item_id or not name or price <= 0:
        return None

    image = safe_string(data.get("image"))
    return CartItem(
        id=item_id,
        name=name,
        price=price,
        quantity=safe_quantity(data.get("quantity")),
        image=image or None,
    )


class CartSessionStore:
    """
    Cart sessions keyed by session id, persisted as one JSON document:

        {"sessions": {"<session id>": {"items": [...], "updated_at": "..."}}}

    The document is loaded lazily on first use and saved synchronously after
    every mutation. There is no locking: concurrent writers to the same
    session race and the last save wins.
    """

    def __init__(self, backend: StoreBackend, clock: Clock | None = None):
        self.backend = backend
        self.clock = clock or _utcnow
        self._sessions: dict[str, CartSession] | None = None

    # ---- persistence ----

    def _load(self) -> dict[str, CartSession]:
        raw = self.backend.load()
        sessions: dict[str, CartSession] = {}
        source = raw.get("sessions") if isinstance(raw, dict) else None
        if not isinstance(source, dict):
            return sessions

        for session_id, value in source.items():
            key = safe_string(session_id)
            if not key or not isinstance(value, dict):
                continue
            raw_items = value.get("items")
            items = [
                item
                for item in (
                    normalize_item(entry)
                    for entry in (raw_items if isinstance(raw_items, list) else [])
                    if isinstance(entry, dict)
                )
                if item is not None
            ]
            sessions[key] = CartSession(
                items=items,
                updated_at=self._parse_timestamp(value.get("updated_at")),
            )
        return sessions

    def _parse_timestamp(self, value: Any) -> datetime:
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                pass
        return self.clock()

    @property
    def sessions(self) -> dict[str, CartSession]:
        if self._sessions is None:
            self._sessions = self._load()
        return self._sessions

    def _persist(self) -> None:
        self.backend.save(
            {
                "sessions": {
                    key: session.model_dump(mode="json")
                    for key, session in self.sessions.items()
                }
            }
        )

    def _ensure_session(self, session_id: str) -> CartSession:
        key = safe_string(session_id)
        session = self.sessions.get(key)
        if session is None:
            session = CartSession(items=[], updated_at=self.clock())
            self.sessions[key] = session
            self._persist()
        return session

    def _touch(self, session: CartSession) -> None:
        session.updated_at = self.clock()
        self._persist()

    @staticmethod
    def _copy(items: list[CartItem]) -> list[CartItem]:
        return [item.model_copy() for item in items]

    # ---- public operations ----

    def has_session(self, session_id: str) -> bool:
        return safe_string(session_id) in self.sessions

    def list_items(self, session_id: str) -> list[CartItem]:
        return self._copy(self._ensure_session(session_id).items)

    def add_item(self, session_id: str, data: dict[str, Any]) -> list[CartItem]:
        """
        Add a line or bump an existing one.

        Invalid input leaves the cart untouched. On an existing id the
        quantity is increased and name/price/image take the incoming values.
        """
        session = self._ensure_session(session_id)
        incoming = normalize_item(data)
        if incoming is None:
            return self._copy(session.items)

        existing = next((item for item in session.items if item.id == incoming.id), None)
        if existing:
            existing.quantity += incoming.quantity
            existing.name = incoming.name
            existing.price = incoming.price
            existing.image = incoming.image
        else:
            session.items.append(incoming)

        self._touch(session)
        return self._copy(session.items)

    def update_quantity(self, session_id: str, item_id: str, quantity: Any) -> list[CartItem]:
        session = self._ensure_session(session_id)
        target = next(
            (item for item in session.items if item.id == safe_string(item_id)),
            None,
        )
        if target is None:
            return self._copy(session.items)

        target.quantity = safe_quantity(quantity)
        self._touch(session)
        return self._copy(session.items)

    def remove_item(self, session_id: str, item_id: str) -> list[CartItem]:
        session = self._ensure_session(session_id)
        key = safe_string(item_id)
        if not key:
            return self._copy(session.items)

        session.items = [item for item in session.items if item.id != key]
        self._touch(session)
        return self._copy(session.items)

    def clear(self, session_id: str) -> list[CartItem]:
        session = self._ensure_session(session_id)
        session.items = []
        self._touch(session)
        return []

    def merge(self, source_session_id: str, target_session_id: str) -> list[CartItem]:
        """
        Move every line of `source` into `target` and empty `source`.

        Matching ids add quantities (display fields follow the source line).
        Merging a session into itself is a no-op.
        """
        source_id = safe_string(source_session_id)
        target_id = safe_string(target_session_id)
        if not source_id or not target_id or source_id == target_id:
            return self.list_items(target_id) if target_id else []

        source = self._ensure_session(source_id)
        target = self._ensure_session(target_id)

        if not source.items:
            return self._copy(target.items)

        for line in source.items:
            existing = next((item for item in target.items if item.id == line.id), None)
            if existing:
                existing.quantity += line.quantity
                existing.name = line.name
                existing.price = line.price
                existing.image = line.image
            else:
                target.items.append(line.model_copy())

        merged_count = len(source.items)
        now = self.clock()
        source.items = []
        source.updated_at = now
        target.updated_at = now
        self._persist()

        logger.info(
            "Merged %s cart line(s) from %s into %s", merged_count, source_id, target_id
        )
        return self._copy(target.items)
