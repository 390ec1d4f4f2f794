"""Product repository interface.

Extends ``IRepository[Product]`` with the case-insensitive name
search used by the keyword search endpoint.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def search_by_name(self, keyword: str) -> List[Product]:
        """Products whose name contains ``keyword``, ignoring case."""
