"""Order service layer (Use Cases).

``OrderGateway`` is the boundary of order placement:

1. structural validation of the request (nothing is read yet);
2. delivery pricing and server-side total;
3. ``OrderValidator`` for fast, read-only stock feedback;
4. ``OrderCommitter`` for the atomic re-check + create + decrement.

Every outcome is returned as a ``PlacementResult``.  Domain errors keep
their specific message; anything else is logged in full and reported
with the generic failure message.  No path other than a successful
commit touches stock.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Sequence

import structlog
from django.conf import settings

from modules.catalog.constants import DeliveryType
from modules.catalog.exceptions import (
    CityNotFound,
    DeliveryDeskNotFound,
    DeliverySelectionError,
)
from modules.catalog.repositories.django_repository import (
    CatalogDjangoRepository,
    InventoryDjangoStore,
)
from modules.catalog.services import CatalogService
from modules.orders.committer import OrderCommitter
from modules.orders.constants import TOTAL_TOLERANCE
from modules.orders.dtos import PlacementResult
from modules.orders.exceptions import (
    InvalidDeliverySelection,
    MissingRequiredField,
    OrderError,
    OrderNotFound,
    TotalMismatch,
    UnknownUser,
)
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.validator import OrderValidator

if TYPE_CHECKING:
    from modules.orders.dtos import PlaceOrderDTO, ValidationLineDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

_CENT = Decimal("0.01")


class OrderGateway:
    """Application service for placing and validating orders."""

    def __init__(
        self,
        order_repository: IOrderRepository,
        catalog_service: CatalogService,
        validator: OrderValidator,
        committer: OrderCommitter,
        verify_client_total: bool = True,
    ) -> None:
        self._order_repo = order_repository
        self._catalog = catalog_service
        self._validator = validator
        self._committer = committer
        self._verify_client_total = verify_client_total

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def place_order(self, command: PlaceOrderDTO) -> PlacementResult:
        """Validate, price and commit an order request."""
        log = logger.bind(
            line_count=len(command.lines),
            delivery_type=command.delivery_type,
        )
        log.info("order.placement_started")

        try:
            self._check_structure(command)
            total = self._compute_total(command)
            outcome = self._validator.validate(command.lines)
            if not outcome.accepted:
                raise outcome.rejections[0]
            order = self._committer.commit(command, total)
        except OrderError as exc:
            log.info("order.rejected", code=exc.code, reason=exc.message)
            return PlacementResult.rejected(exc)
        except Exception:
            log.exception("order.placement_failed")
            return PlacementResult.failed()

        log.info("order.placed", order_id=str(order.id), total=str(order.total))
        return PlacementResult.placed(order)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def validate_order(self, lines: Sequence[ValidationLineDTO]) -> PlacementResult:
        """Read-only availability check for a set of lines.

        Reports every failing line, not just the first.
        """
        if not lines:
            return PlacementResult.rejected(MissingRequiredField("orderItems"))
        outcome = self._validator.validate(lines)
        if outcome.accepted:
            return PlacementResult.available()
        return PlacementResult.rejected(*outcome.rejections)

    def get_order(self, order_id: str) -> Order:
        """Retrieve a committed order.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_structure(self, command: PlaceOrderDTO) -> None:
        if not command.delivery_type:
            raise MissingRequiredField("deliveryType")
        if command.delivery_city_id is None:
            raise MissingRequiredField("deliveryCityId")
        if not command.lines:
            raise MissingRequiredField("orderItems")
        if command.delivery_type not in DeliveryType.values:
            raise InvalidDeliverySelection(
                f"Unknown delivery type '{command.delivery_type}'.",
                field="deliveryType",
            )
        if command.delivery_type == DeliveryType.HOME and not command.address.strip():
            raise MissingRequiredField("address")
        if command.delivery_type == DeliveryType.DESK and command.delivery_desk_id is None:
            raise MissingRequiredField("deliveryDeskId")
        if command.user_id is not None and not self._order_repo.user_exists(
            command.user_id
        ):
            raise UnknownUser(command.user_id)

    def _compute_total(self, command: PlaceOrderDTO) -> Decimal:
        """Sum of line prices plus the delivery fee, verified against the client."""
        try:
            fee = self._catalog.delivery_fee(
                command.delivery_type,
                command.delivery_city_id,
                command.delivery_desk_id,
            )
        except CityNotFound as exc:
            raise InvalidDeliverySelection(str(exc), field="deliveryCityId") from exc
        except DeliveryDeskNotFound as exc:
            raise InvalidDeliverySelection(str(exc), field="deliveryDeskId") from exc
        except DeliverySelectionError as exc:
            raise InvalidDeliverySelection(str(exc), field="deliveryType") from exc

        subtotal = sum((line.price * line.quantity for line in command.lines), Decimal("0"))
        total = (subtotal + fee).quantize(_CENT, rounding=ROUND_HALF_UP)

        if (
            self._verify_client_total
            and command.total is not None
            and abs(command.total - total) > TOTAL_TOLERANCE
        ):
            raise TotalMismatch(submitted=command.total, computed=total)
        return total


class OrderReportService:
    """Read-only aggregates for the back-office dashboard."""

    def __init__(self, order_repository: IOrderRepository) -> None:
        self._order_repo = order_repository

    def orders_by_status(self) -> List[Dict[str, Any]]:
        return self._order_repo.count_by_status()

    def top_ordered_products(self, limit: int) -> List[Dict[str, Any]]:
        return self._order_repo.top_ordered_products(limit)

    def top_sold_products(self, limit: int) -> List[Dict[str, Any]]:
        return self._order_repo.top_sold_products(limit)


def build_order_gateway() -> OrderGateway:
    """Wire an ``OrderGateway`` with the Django repositories and settings."""
    catalog_repository = CatalogDjangoRepository()
    order_repository = OrderDjangoRepository()
    return OrderGateway(
        order_repository=order_repository,
        catalog_service=CatalogService(repository=catalog_repository),
        validator=OrderValidator(catalog_repository=catalog_repository),
        committer=OrderCommitter(
            order_repository=order_repository,
            inventory_store=InventoryDjangoStore(),
            lock_timeout_ms=settings.ORDER_LOCK_TIMEOUT_MS,
        ),
        verify_client_total=settings.ORDER_VERIFY_CLIENT_TOTAL,
    )
