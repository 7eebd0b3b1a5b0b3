"""Product catalog port (abstract interface).

The orders service never owns prices; it asks a catalog for the current
price of each product when an order is created. Adapters:
- StaticCatalog for development and testing
- HttpCatalog for a remote catalog service
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from orders.shared.money import Money


@dataclass(frozen=True)
class CatalogProduct:
    """A product as quoted by the catalog."""

    id: str
    name: str
    price: Money


class ProductCatalog(ABC):
    """Abstract product catalog interface."""

    @abstractmethod
    def find_by_id(self, product_id: str) -> CatalogProduct | None:
        """Return the product, or ``None`` if the catalog does not know it.

        Raises ``CatalogUnavailable`` when the catalog cannot be consulted.
        """
        ...

    @abstractmethod
    def list_all(self) -> list[CatalogProduct]:
        """Return every product the catalog offers."""
        ...
