import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from storefront.core.auth import ADMIN_COOKIE_NAME
from storefront.core.dependencies import AppStores
from storefront.core.file_store import InMemoryBackend
from storefront.core.render_cache import RenderCacheInvalidator
from storefront.core.security import create_session_token
from storefront.database import get_session
from storefront.main import app
from storefront.models.coupon import Coupon
from storefront.models.product import Product
from storefront.repositories.cart_session_store import CartSessionStore
from storefront.repositories.preview_draft_store import PreviewDraftStore


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="stores")
def stores_fixture():
    return AppStores(
        cart=CartSessionStore(InMemoryBackend()),
        preview_drafts=PreviewDraftStore(InMemoryBackend()),
        render_cache=RenderCacheInvalidator(),
    )


@pytest.fixture(name="client")
def client_fixture(session, stores):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    app.state.stores = stores
    # No `with`: the lifespan (real database, real files) is not run.
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
    app.state.stores = None


def login_as(client: TestClient, username: str, role: str) -> None:
    client.cookies.set(ADMIN_COOKIE_NAME, create_session_token(username, role))


@pytest.fixture
def make_product(session):
    def _make(**overrides) -> Product:
        data = dict(
            name="Classic Tee",
            slug="classic-tee",
            category="Apparel",
            price=30.0,
            stock=10,
            publish_status="Published",
        )
        data.update(overrides)
        product = Product(**data)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_coupon(session):
    def _make(**overrides) -> Coupon:
        data = dict(code="SAVE10", type="percent", value=10, min_subtotal=0, is_active=True)
        data.update(overrides)
        coupon = Coupon(**data)
        session.add(coupon)
        session.commit()
        session.refresh(coupon)
        return coupon

    return _make
