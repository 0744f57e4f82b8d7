# storefront/core/dependencies.py
"""
Process-wide stores, built once in the app lifespan and handed to request
handlers through FastAPI dependencies (tests swap them on app.state).
"""

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from fastapi import Request

from storefront.core.config import Settings
from storefront.core.file_store import JsonFileBackend
from storefront.core.render_cache import RenderCacheInvalidator
from storefront.repositories.cart_session_store import CartSessionStore
from storefront.repositories.preview_draft_store import PreviewDraftStore


@dataclass
class AppStores:
    cart: CartSessionStore
    preview_drafts: PreviewDraftStore
    render_cache: RenderCacheInvalidator


def build_stores(settings: Settings) -> AppStores:
    store_dir = Path(settings.STORE_DIR)
    return AppStores(
        cart=CartSessionStore(JsonFileBackend(store_dir / "cart-sessions.json")),
        preview_drafts=PreviewDraftStore(
            JsonFileBackend(store_dir / "product-preview-drafts.json"),
            ttl=timedelta(minutes=settings.PREVIEW_DRAFT_TTL_MINUTES),
        ),
        render_cache=RenderCacheInvalidator(),
    )


def get_stores(request: Request) -> AppStores:
    return request.app.state.stores


def get_cart_store(request: Request) -> CartSessionStore:
    return get_stores(request).cart


def get_preview_store(request: Request) -> PreviewDraftStore:
    return get_stores(request).preview_drafts


def get_render_cache(request: Request) -> RenderCacheInvalidator:
    return get_stores(request).render_cache
