"""Product catalog factory.

Provides get_catalog() / set_catalog() to swap implementations:
- HttpCatalog when CATALOG_SERVICE_URL is configured
- StaticCatalog otherwise (development and testing)
"""

from orders.catalog.http_adapter import HttpCatalog
from orders.catalog.port import CatalogProduct, ProductCatalog
from orders.catalog.static_adapter import StaticCatalog
from orders.config import load_settings

__all__ = [
    "CatalogProduct",
    "HttpCatalog",
    "ProductCatalog",
    "StaticCatalog",
    "get_catalog",
    "reset_catalog",
    "set_catalog",
]

_current_catalog: ProductCatalog | None = None


def get_catalog() -> ProductCatalog:
    """Return the current product catalog, building the configured default."""
    global _current_catalog
    if _current_catalog is None:
        settings = load_settings()
        if settings.catalog_service_url:
            _current_catalog = HttpCatalog(settings.catalog_service_url, timeout=settings.catalog_timeout_seconds)
        else:
            _current_catalog = StaticCatalog()
    return _current_catalog


def set_catalog(catalog: ProductCatalog) -> None:
    """Override the active product catalog (useful for tests)."""
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    """Reset to the configured default catalog."""
    global _current_catalog
    _current_catalog = None
