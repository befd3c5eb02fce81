"""Order Committer: the single write path for orders and stock.

``commit`` runs one ``transaction.atomic`` block that

1. row-locks every referenced product (primary-key order) and re-checks
   stock under the lock;
2. creates the order and its items with the prices from the request;
3. decrements each product with a conditional update
   (``stock >= quantity``);
4. commits.

A domain error raised anywhere inside the block rolls the whole block
back; storage errors are wrapped in ``CommitFailed`` after rollback.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Dict, Optional
from uuid import UUID

import structlog
from django.db import DatabaseError, connection, transaction

from modules.orders.exceptions import CommitFailed, InsufficientStock, ProductNotFound
from modules.orders.validator import aggregate_quantities

if TYPE_CHECKING:
    from modules.catalog.dtos import ProductSnapshotDTO
    from modules.catalog.repositories.interfaces import IInventoryStore
    from modules.orders.dtos import PlaceOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderCommitter:
    """Creates an order and reserves its stock atomically.

    Receives repositories via constructor injection (DIP).
    ``lock_timeout_ms`` bounds how long a commit may wait on a contended
    product row (PostgreSQL only; other backends use their own timeout).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        inventory_store: IInventoryStore,
        lock_timeout_ms: Optional[int] = None,
    ) -> None:
        self._order_repo = order_repository
        self._inventory = inventory_store
        self._lock_timeout_ms = lock_timeout_ms

    def commit(self, command: PlaceOrderDTO, total: Decimal) -> Order:
        """Persist ``command`` as a new order priced at ``total``.

        Raises:
            ProductNotFound: a product vanished before the commit.
            InsufficientStock: stock is lower than requested at commit time.
            CommitFailed: the storage layer failed; nothing was written.
        """
        requested = aggregate_quantities(command.lines)
        log = logger.bind(product_count=len(requested), total=str(total))
        log.info("order.commit_started")

        try:
            with transaction.atomic():
                self._apply_lock_timeout()
                locked = self._inventory.lock_for_update(requested.keys())
                self._check_locked_stock(requested, locked)

                order = self._order_repo.create(
                    {
                        "total": total,
                        "delivery_type": command.delivery_type,
                        "delivery_city_id": command.delivery_city_id,
                        "delivery_desk_id": command.delivery_desk_id,
                        "address": command.address,
                        "client_note": command.client_note,
                        "user_id": command.user_id,
                        "items": [
                            {
                                "product_id": line.product_id,
                                "quantity": line.quantity,
                                "size": line.size,
                                "price": line.price,
                            }
                            for line in command.lines
                        ],
                    }
                )

                for product_id in sorted(requested):
                    self._decrement(product_id, requested[product_id], locked)
        except (InsufficientStock, ProductNotFound) as exc:
            log.info("order.commit_rejected", code=exc.code, reason=exc.message)
            raise
        except DatabaseError as exc:
            log.exception("order.commit_failed", error_type=type(exc).__name__)
            raise CommitFailed() from exc

        log.info(
            "order.committed",
            order_id=str(order.id),
            order_number=order.order_number,
        )
        return order

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _apply_lock_timeout(self) -> None:
        if not self._lock_timeout_ms or connection.vendor != "postgresql":
            return
        with connection.cursor() as cursor:
            cursor.execute(f"SET LOCAL lock_timeout = {int(self._lock_timeout_ms)}")

    def _check_locked_stock(
        self,
        requested: Dict[UUID, int],
        locked: Dict[UUID, ProductSnapshotDTO],
    ) -> None:
        for product_id in sorted(requested):
            snapshot = locked.get(product_id)
            if snapshot is None:
                raise ProductNotFound(product_id)
            if snapshot.stock < requested[product_id]:
                raise InsufficientStock(
                    product_id=product_id,
                    product_name=snapshot.name,
                    available=snapshot.stock,
                    requested=requested[product_id],
                )

    def _decrement(
        self,
        product_id: UUID,
        quantity: int,
        locked: Dict[UUID, ProductSnapshotDTO],
    ) -> None:
        if self._inventory.decrement_if_available(product_id, quantity):
            logger.info(
                "order.stock_reserved",
                product_id=str(product_id),
                quantity=quantity,
            )
            return

        available = self._inventory.available(product_id)
        if available is None:
            raise ProductNotFound(product_id)
        raise InsufficientStock(
            product_id=product_id,
            product_name=locked[product_id].name,
            available=available,
            requested=quantity,
        )
