"""Product domain exceptions.

Raised by the Service Layer.  Every failure of a product operation
surfaces as exactly one of two kinds; the API layer (Views) maps
``ProductNotFound`` to 404 and ``ProductBadRequest`` to 400.
"""

from __future__ import annotations


class ProductError(Exception):
    """Base class for product operation failures."""


class ProductNotFound(ProductError):
    """The requested product ID does not resolve to a stored product."""

    def __init__(self, id: str) -> None:
        super().__init__(f"Product with ID {id} not found")
        self.id = id


class ProductBadRequest(ProductError):
    """Any other failure: constraint violation, connectivity, bad input.

    Carries a fixed per-operation message; the underlying store error
    is chained as ``__cause__``.
    """
