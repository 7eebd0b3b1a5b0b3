"""Product catalog backed by the catalog service's HTTP API.

``GET {base_url}/products`` lists products and ``GET {base_url}/products/{id}``
fetches one. Products are JSON objects shaped as
``{"id", "name", "price": {"amount", "currency"}}``.
"""

import requests
import structlog
from protean.exceptions import ValidationError
from requests.utils import quote

from orders.catalog.port import CatalogProduct, ProductCatalog
from orders.exceptions import CatalogUnavailable
from orders.shared.money import Money

logger = structlog.get_logger(__name__)


class HttpCatalog(ProductCatalog):
    def __init__(self, base_url: str, timeout: float = 5.0, session: requests.Session | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            return self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Catalog service unreachable", url=url, error=str(exc))
            raise CatalogUnavailable(f"Unable to reach catalog service at {url}") from exc

    @staticmethod
    def _to_product(data: dict) -> CatalogProduct:
        try:
            price = data["price"]
            return CatalogProduct(
                id=str(data["id"]),
                name=data["name"],
                price=Money.of(price["amount"], price["currency"]),
            )
        except (KeyError, TypeError, ValidationError) as exc:
            logger.warning("Catalog service returned a malformed product", product=data, error=str(exc))
            raise CatalogUnavailable("Catalog service returned a malformed product") from exc

    @staticmethod
    def _json(response: requests.Response):
        try:
            return response.json()
        except ValueError as exc:
            raise CatalogUnavailable("Catalog service returned a non-JSON body") from exc

    def _check(self, response: requests.Response) -> None:
        if not response.ok:
            logger.warning(
                "Catalog service responded with an error",
                url=response.url,
                status_code=response.status_code,
            )
            raise CatalogUnavailable(f"Catalog service responded with {response.status_code}")

    def find_by_id(self, product_id: str) -> CatalogProduct | None:
        response = self._get(f"/products/{quote(str(product_id), safe='')}")
        if response.status_code == 404:
            return None
        self._check(response)
        return self._to_product(self._json(response))

    def list_all(self) -> list[CatalogProduct]:
        response = self._get("/products")
        self._check(response)
        return [self._to_product(item) for item in self._json(response)]
