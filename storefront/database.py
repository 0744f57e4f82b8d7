# storefront/database.py
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlmodel import SQLModel, create_engine, Session

from storefront.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Record store connection
#
# - SQLite (default): file under STORE_DIR, check_same_thread off because
#   FastAPI runs sync endpoints in a threadpool.
# - Postgres: sslmode=require is appended when not already present.
# ---------------------------------------------------------

db_url = settings.DATABASE_URL
url = make_url(db_url)

connect_args: dict = {}
if url.get_backend_name() == "sqlite":
    connect_args["check_same_thread"] = False
    if url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
elif url.get_backend_name() == "postgresql" and "sslmode=" not in db_url:
    db_url = db_url + ("&" if "?" in db_url else "?") + "sslmode=require"

engine = create_engine(
    db_url,
    echo=False,        # set to True if you want to debug SQL queries
    pool_pre_ping=True,
    connect_args=connect_args,
)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
