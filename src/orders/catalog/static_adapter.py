"""In-memory product catalog for development and testing.

Seeded with a small café menu priced in KRW unless products are given.
"""

from orders.catalog.port import CatalogProduct, ProductCatalog
from orders.shared.money import Money

ESPRESSO_ID = "0f0b9c0a-0d58-4a37-9882-5e39f68d3c0d"
CAFE_LATTE_ID = "7c070b25-92f7-4e72-9db9-8a1ab3f8ea9a"
CHEESECAKE_ID = "9e21dc36-d4dd-4a1b-8d42-7a4f7a4ed5bd"

# (id, name, amount, currency)
DEFAULT_PRODUCTS = (
    (ESPRESSO_ID, "Espresso", 2500, "KRW"),
    (CAFE_LATTE_ID, "Cafe Latte", 4500, "KRW"),
    (CHEESECAKE_ID, "New York Cheesecake", 6500, "KRW"),
)


class StaticCatalog(ProductCatalog):
    """Fixed list of products held in memory."""

    def __init__(self, products: list[CatalogProduct] | None = None) -> None:
        self._products: dict[str, CatalogProduct] | None = None
        if products is not None:
            self._products = {product.id: product for product in products}
        self.lookups: list[str] = []

    def _catalog(self) -> dict[str, CatalogProduct]:
        # Money is a domain value object; build the defaults on first use
        if self._products is None:
            self._products = {
                product_id: CatalogProduct(id=product_id, name=name, price=Money.of(amount, currency))
                for product_id, name, amount, currency in DEFAULT_PRODUCTS
            }
        return self._products

    def add(self, product: CatalogProduct) -> None:
        self._catalog()[product.id] = product

    def find_by_id(self, product_id: str) -> CatalogProduct | None:
        self.lookups.append(product_id)
        return self._catalog().get(product_id)

    def list_all(self) -> list[CatalogProduct]:
        return list(self._catalog().values())
