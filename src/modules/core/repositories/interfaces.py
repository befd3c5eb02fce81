"""Generic repository interface (Dependency Inversion Principle).

Provides ``IReadRepository[T]``, the base abstract class that the
domain-specific repository interfaces extend.  Service-layer code
depends on this abstraction, never on Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class IReadRepository(ABC, Generic[T]):
    """Base generic read contract.

    Type parameter ``T`` represents the entity managed by the
    repository (e.g. ``Product``).  Writes are exposed by the
    concrete interfaces only where a use-case needs them.
    """

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[T]:
        """Retrieve an entity by its primary key, ``None`` if missing."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Any:
        """List entities with optional ORM look-ups."""
