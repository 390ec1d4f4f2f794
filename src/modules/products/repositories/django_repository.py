"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Missing rows follow the Null Object pattern: look-ups return ``None``
instead of raising, and the Service Layer decides how to report a
missing entity.  Database and model validation errors are left to
propagate.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Product]:
        """List products in default ordering, optionally filtered and windowed.

        Examples of valid filters::

            {"name__icontains": "widget"}
            {"price__lte": Decimal("10.00")}
        """
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        if limit is not None:
            queryset = queryset[offset : offset + limit]
        elif offset:
            queryset = queryset[offset:]
        return list(queryset)

    def count(self) -> int:
        return Product.objects.count()

    def search_by_name(self, keyword: str) -> List[Product]:
        return self.list({"name__icontains": keyword})

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Validate and persist (create or update) a product.

        Raises:
            ValidationError: if the instance violates a column constraint.
        """
        entity.full_clean()
        entity.save()
        return entity

    @transaction.atomic
    def delete(self, id: str) -> Optional[Product]:
        """Delete a product by ID.

        Returns the deleted instance with its ID intact, or ``None`` if
        no product exists with the given ID.
        """
        product = self.get_by_id(id)
        if not product:
            return None
        pk = product.pk
        product.delete()
        # Django clears the pk of deleted instances.
        product.pk = pk
        return product
