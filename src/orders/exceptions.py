"""Errors raised by the orders domain.

Client-caused failures subclass Protean's ``ValidationError`` so they surface
the same way the framework's own field validation does; a missing order
subclasses ``ObjectNotFoundError``. ``CatalogUnavailable`` marks a collaborator
outage and is never swallowed.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class InvalidOrder(ValidationError):
    """Order creation request rejected: bad user id, items, product or price."""


class InvalidTransition(ValidationError):
    """The order's current status does not allow the requested change."""


class CurrencyMismatch(ValidationError):
    """Money arithmetic attempted across two currencies."""


class OrderNotFound(ObjectNotFoundError):
    """No order with the given id belongs to the given user."""


class CatalogUnavailable(Exception):
    """The product catalog could not be reached or answered with an error."""
