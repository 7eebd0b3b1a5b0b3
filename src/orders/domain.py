"""Orders bounded context: order lifecycle, catalog pricing, and payment outcomes.

Orders are placed against an externally owned product catalog, confirmed or
cancelled by payment events arriving from the payments service, and announced
to other services through the outbound event envelope.
"""

from protean.domain import Domain

from orders.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
orders = Domain(name="orders")
