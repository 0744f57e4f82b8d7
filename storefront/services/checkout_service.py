# storefront/services/checkout_service.py
import logging
import math
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlmodel import Session

from storefront.core.auth import AuthState
from storefront.core.config import get_settings
from storefront.core.exceptions import BadRequestException, DuplicateAccountException
from storefront.core.money import allocate_discount, money, to_decimal
from storefront.core.render_cache import RenderCacheInvalidator
from storefront.models.order import Order, Sale
from storefront.models.product import Product
from storefront.models.user import User
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.checkout import CheckoutRequest, CheckoutResponse
from storefront.services.coupon_service import CouponService
from storefront.services.notification_service import NotificationService
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService, split_full_name

logger = logging.getLogger(__name__)
settings = get_settings()

# Pages whose rendered output depends on orders, sales, coupons or stock.
CHECKOUT_PATHS = (
    "/dashboard",
    "/dashboard/orders",
    "/dashboard/sales",
    "/dashboard/coupons",
    "/dashboard/customers",
    "/dashboard/users",
    "/shop",
    "/checkout",
)

STUB_PRODUCT_STOCK = 999
STUB_PRODUCT_CATEGORY = "Uncategorized"


@dataclass(frozen=True)
class CheckoutLine:
    id: str
    name: str
    price: float
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return to_decimal(self.price) * self.quantity

    def snapshot(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
        }


def _as_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _as_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def parse_lines(raw_items: list[Any]) -> tuple[CheckoutLine, ...]:
    """
    Keep lines with an id, a name and a positive price. Quantity is floored
    to an integer >= 1. The result is frozen: subtotal and discount
    allocation are both computed from this exact order.
    """
    lines: list[CheckoutLine] = []
    for row in raw_items:
        if not isinstance(row, dict):
            continue
        line_id = _as_text(row.get("id"))
        name = _as_text(row.get("name"))
        price = money(_as_number(row.get("price")))
        quantity = max(1, math.floor(_as_number(row.get("quantity"))))
        if line_id and name and price > 0:
            lines.append(CheckoutLine(id=line_id, name=name, price=price, quantity=quantity))
    return tuple(lines)


@dataclass
class CustomerDetails:
    name: str
    email: str
    phone: str
    address: str
    city: str

    def is_complete(self) -> bool:
        return all((self.name, self.email, self.phone, self.address, self.city))

    def apply_account(self, user: User) -> None:
        """Account fields win wherever the account has a value."""
        full_name = f"{user.name} {user.surname}".strip()
        self.name = full_name or self.name
        self.email = user.email or self.email
        self.phone = user.phone or self.phone
        self.address = user.address or self.address
        self.city = user.city or self.city


class CheckoutService:
    """
    Turns a submitted cart into orders.

    Steps:
      1. Validate customer details and parse the lines (400 on failure).
      2. Guests asking for an account must send a long enough password.
      3. Subtotal from the parsed lines.
      4. Apply the coupon (coupon errors are 400s).
      5. Create the guest's account if asked (duplicate e-mail => 400).
      6. Total = max(0, subtotal - discount).
      7. Split the discount across lines.
      8. One Paid Order per line (product resolved or stubbed, stock
         decremented, staff notified).
      9. One Sale for the whole checkout.
     10. Commit, then invalidate the dashboard / shop render cache.
     11. Return the summary.

    Everything in steps 8-9 is committed together. Account creation in
    step 5 commits on its own, so a failure after it leaves the account in
    place without orders.
    """

    def __init__(
        self,
        coupons: CouponService | None = None,
        users: UserService | None = None,
        notifications: NotificationService | None = None,
        products: ProductService | None = None,
        product_repo: ProductRepository | None = None,
        order_repo: OrderRepository | None = None,
    ):
        self.coupons = coupons or CouponService()
        self.notifications = notifications or NotificationService()
        self.users = users or UserService(notifications=self.notifications)
        self.products = products or ProductService()
        self.product_repo = product_repo or ProductRepository()
        self.order_repo = order_repo or OrderRepository()

    def checkout(
        self,
        session: Session,
        payload: CheckoutRequest,
        auth: AuthState,
        render_cache: RenderCacheInvalidator,
    ) -> CheckoutResponse:
        account = (
            self.users.get_active_by_username(session, auth.username)
            if auth.is_authenticated
            else None
        )

        details = CustomerDetails(
            name=payload.customer_name,
            email=payload.email,
            phone=payload.phone,
            address=payload.address,
            city=payload.city,
        )
        if account is not None:
            details.apply_account(account)

        # 1) customer details + lines
        lines = parse_lines(payload.items)
        if not details.is_complete() or not lines:
            raise BadRequestException("Checkout details are incomplete.")

        # 2) account password
        wants_account = payload.create_account and not auth.is_authenticated
        if wants_account and len(payload.password) < settings.PASSWORD_MIN_LENGTH:
            raise BadRequestException(
                f"Password must be at least {settings.PASSWORD_MIN_LENGTH} "
                "characters to create an account."
            )

        # 3) subtotal
        line_subtotals = [line.subtotal for line in lines]
        subtotal = money(sum(line_subtotals, Decimal("0")))

        # 4) coupon (CouponError is a 400)
        application = self.coupons.apply_coupon(session, payload.coupon_code, subtotal)
        discount = min(subtotal, money(application.discount))
        coupon_code = application.coupon.code if application.coupon else None

        # 5) account
        if wants_account:
            first_name, surname = split_full_name(details.name)
            account = self.users.create_account(
                session,
                name=first_name,
                surname=surname,
                email=details.email,
                password=payload.password,
                role="Customer",
                source="Checkout",
                phone=details.phone,
                city=details.city,
                address=details.address,
            )
            if account is None:
                raise DuplicateAccountException()

        # 6-7) totals
        total = max(0.0, money(subtotal - discount))
        allocations = allocate_discount(discount, line_subtotals)

        # 8-9) orders + sale, one commit
        user_id = account.id if account is not None else None
        try:
            for line, line_discount in zip(lines, allocations):
                product = self._resolve_product(session, line)
                order = self.order_repo.create_order(
                    session,
                    Order(
                        customer=details.name,
                        user_id=user_id,
                        product_id=product.id,
                        quantity=line.quantity,
                        total=max(0.0, money(line.subtotal - to_decimal(line_discount))),
                        discount=line_discount,
                        coupon_code=coupon_code,
                        status="Paid",
                        items=[line.snapshot()],
                    ),
                )
                product.stock = max(0, product.stock - line.quantity)
                session.add(product)

                if settings.NOTIFY_ADMIN_PAID_ORDER:
                    self.notifications.add(
                        session,
                        type="Order",
                        title="New order",
                        message=f"{order.id} from {order.customer}",
                        href=f"/dashboard/orders/{order.id}",
                    )

            self.order_repo.create_sale(
                session,
                Sale(
                    source="Website Checkout",
                    amount=total,
                    created_at=datetime.now(timezone.utc).date(),
                ),
            )
            session.commit()
        except Exception:
            session.rollback()
            logger.exception("Checkout failed while writing orders for %s", details.email)
            raise

        logger.info(
            "Checkout complete: %s line(s), subtotal=%.2f discount=%.2f total=%.2f coupon=%s",
            len(lines),
            subtotal,
            discount,
            total,
            coupon_code or "-",
        )

        # 10) cache
        render_cache.revalidate(CHECKOUT_PATHS)

        # 11) summary
        return CheckoutResponse(
            success=True,
            order_count=len(lines),
            subtotal=subtotal,
            discount=discount,
            total=total,
            coupon_code=coupon_code,
        )

    def _resolve_product(self, session: Session, line: CheckoutLine) -> Product:
        """
        By id, then by case-insensitive name; otherwise a published stub
        product so the order always has something to point at.
        """
        try:
            product = self.product_repo.get_by_id(session, uuid.UUID(line.id))
        except ValueError:
            product = None
        if product is not None:
            return product

        product = self.product_repo.get_by_name_ci(session, line.name)
        if product is not None:
            return product

        stub = Product(
            name=line.name,
            slug=self.products.make_slug(session, line.name),
            category=STUB_PRODUCT_CATEGORY,
            price=line.price,
            stock=STUB_PRODUCT_STOCK,
            publish_status="Published",
        )
        logger.info("Created stub product %r for checkout line %s", line.name, line.id)
        return self.product_repo.add_no_commit(session, stub)
