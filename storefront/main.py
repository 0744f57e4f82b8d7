# storefront/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from storefront.core.config import get_settings
from storefront.core.dependencies import build_stores
from storefront.core.exceptions import register_exception_handlers
from storefront.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from storefront.models import user as _user_models  # noqa: F401
from storefront.models import product as _product_models  # noqa: F401
from storefront.models import coupon as _coupon_models  # noqa: F401
from storefront.models import order as _order_models  # noqa: F401
from storefront.models import review as _review_models  # noqa: F401
from storefront.models import notification as _notification_models  # noqa: F401


# Routers
from storefront.routers.admin import router as admin_router
from storefront.routers.auth import router as auth_router
from storefront.routers.cart import router as cart_router
from storefront.routers.checkout import router as checkout_router
from storefront.routers.coupons import router as coupons_router
from storefront.routers.orders import router as orders_router
from storefront.routers.products import (
    admin_router as admin_products_router,
    router as products_router,
)
from storefront.routers.reviews import router as reviews_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Create tables in the record store.
      - Build the file-backed stores (cart sessions, preview drafts) once
        per process, unless already provided on app.state.

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("Startup: preparing record store at %s", settings.DATABASE_URL.split("@")[-1])
    try:
        create_db_and_tables()
        logger.info("Startup: tables verified.")
    except Exception:
        logger.exception("Startup: database initialisation failed")
        raise

    if getattr(app.state, "stores", None) is None:
        app.state.stores = build_stores(settings)
        logger.info("Startup: file stores under %s", settings.STORE_DIR)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)


# --- CORS configuration ---
# Cookies carry the session, so credentials must be allowed.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API prefix, e.g. /api
app.include_router(cart_router, prefix=settings.API_PREFIX)
app.include_router(checkout_router, prefix=settings.API_PREFIX)
app.include_router(coupons_router, prefix=settings.API_PREFIX)
app.include_router(products_router, prefix=settings.API_PREFIX)
app.include_router(admin_products_router, prefix=settings.API_PREFIX)
app.include_router(reviews_router, prefix=settings.API_PREFIX)
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(orders_router, prefix=settings.API_PREFIX)
app.include_router(admin_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "storefront-backend"}
