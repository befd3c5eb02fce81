"""Order Validator: read-only availability check.

Gives the shopper fast feedback before any transaction is opened.  The
result is only a snapshot: stock can change between this check and the
commit, which is why ``OrderCommitter`` checks again under row locks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List, Protocol, Tuple
from uuid import UUID

import structlog

from modules.orders.exceptions import InsufficientStock, OrderError, ProductNotFound

if TYPE_CHECKING:
    from modules.catalog.dtos import ProductSnapshotDTO
    from modules.catalog.repositories.interfaces import ICatalogRepository

logger = structlog.get_logger(__name__)


class _Line(Protocol):
    product_id: UUID
    quantity: int


def aggregate_quantities(lines: Iterable[_Line]) -> Dict[UUID, int]:
    """Total requested quantity per product, in first-seen order.

    Two lines for the same product (e.g. different sizes) draw on the
    same stock, so they are checked and decremented together.
    """
    requested: Dict[UUID, int] = {}
    for line in lines:
        requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity
    return requested


@dataclass(frozen=True)
class ValidationOutcome:
    snapshots: Dict[UUID, ProductSnapshotDTO] = field(default_factory=dict)
    rejections: Tuple[OrderError, ...] = ()

    @property
    def accepted(self) -> bool:
        return not self.rejections


class OrderValidator:
    """Checks requested quantities against a stock snapshot.

    Receives the Catalog Reader via constructor injection.  Has no side
    effects: calling ``validate`` twice without a commit in between
    returns the same outcome.
    """

    def __init__(self, catalog_repository: ICatalogRepository) -> None:
        self._catalog = catalog_repository

    def validate(self, lines: Iterable[_Line]) -> ValidationOutcome:
        requested = aggregate_quantities(lines)
        snapshots = self._catalog.get_snapshots(requested.keys())

        rejections: List[OrderError] = []
        for product_id, quantity in requested.items():
            snapshot = snapshots.get(product_id)
            if snapshot is None:
                rejections.append(ProductNotFound(product_id))
            elif snapshot.stock < quantity:
                rejections.append(
                    InsufficientStock(
                        product_id=product_id,
                        product_name=snapshot.name,
                        available=snapshot.stock,
                        requested=quantity,
                    )
                )

        logger.info(
            "order.validated",
            product_count=len(requested),
            rejected=len(rejections),
        )
        return ValidationOutcome(snapshots=snapshots, rejections=tuple(rejections))
