# storefront/repositories/order_repo.py
import uuid

from sqlmodel import Session, select

from storefront.models.order import Order, Sale


class OrderRepository:
    """
    Data access layer for orders and sales.

    NOTE:
      - create_order / create_sale only flush; checkout writes several orders
        plus a sale and the service calls session.commit() once.
    """

    # ---- Orders ----

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def list_all(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        stmt = select(Order).order_by(Order.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def create_order(self, session: Session, order: Order) -> Order:
        """
        Insert an Order without committing, but ensure id is populated.
        """
        session.add(order)
        session.flush()
        return order

    def update_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.commit()
        session.refresh(order)
        return order

    # ---- Sales ----

    def list_sales(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Sale]:
        stmt = select(Sale).order_by(Sale.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def create_sale(self, session: Session, sale: Sale) -> Sale:
        session.add(sale)
        session.flush()
        return sale
