# storefront/repositories/product_repo.py
import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from storefront.models.product import Product


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_by_slug(self, session: Session, slug: str) -> Product | None:
        stmt = select(Product).where(Product.slug == slug)
        return session.exec(stmt).first()

    def get_by_name_ci(self, session: Session, name: str) -> Product | None:
        """Case-insensitive exact name match."""
        stmt = select(Product).where(func.lower(Product.name) == name.strip().lower())
        return session.exec(stmt).first()

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        only_published: bool = True,
    ) -> list[Product]:
        stmt = select(Product).where(Product.trashed_at.is_(None))
        if only_published:
            stmt = stmt.where(Product.publish_status == "Published")
        stmt = stmt.order_by(Product.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def list_all_published(self, session: Session) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.trashed_at.is_(None), Product.publish_status == "Published")
            .order_by(Product.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def add_no_commit(self, session: Session, product: Product) -> Product:
        """Insert inside a larger unit of work (checkout)."""
        session.add(product)
        session.flush()
        return product
