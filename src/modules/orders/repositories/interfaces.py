"""Order repository interface.

Declares what the order use-cases need: the read-back by primary key,
creation of the aggregate with its items, the user look-up used to
validate ``userId``, and the read-only aggregates behind the back-office
reports.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from modules.orders.models import Order


class IOrderRepository(ABC):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes its OrderItem children.  ``create`` must
    persist both or neither.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items.

        ``data`` must include ``total``, ``delivery_type``,
        ``delivery_city_id`` and ``items`` (list of dicts with
        ``product_id``, ``quantity``, ``size``, ``price``), and optionally
        ``delivery_desk_id``, ``address``, ``client_note``, ``user_id``.
        """

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[Order]:
        """Retrieve an order with prefetched items."""

    @abstractmethod
    def user_exists(self, user_id: int) -> bool:
        """Whether a user with this primary key exists."""

    @abstractmethod
    def count_by_status(self) -> List[Dict[str, Any]]:
        """Order counts grouped by (fulfillment_status, delivery_status)."""

    @abstractmethod
    def top_ordered_products(self, limit: int) -> List[Dict[str, Any]]:
        """Products appearing in the most orders."""

    @abstractmethod
    def top_sold_products(self, limit: int) -> List[Dict[str, Any]]:
        """Products with the highest total quantity sold."""
