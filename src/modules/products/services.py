"""Product service layer (Use Cases).

Orchestrates the Product operations, delegating persistence to the
injected ``IProductRepository``.

Every failure leaves this layer as one of two kinds:

- ``ProductNotFound``: the ID given to an update or delete does not
  resolve to a product.
- ``ProductBadRequest``: any store error, with a fixed per-operation
  message and the original error chained.

Store errors are caught only around repository calls; the not-found
check sits outside those handlers.  ``get_product`` reports a missing
product as ``ProductBadRequest``.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from modules.products.dtos import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    ProductOutputDTO,
    ProductPageDTO,
)
from modules.products.exceptions import ProductBadRequest, ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

STORE_ERRORS = (DatabaseError, ValidationError)


@contextmanager
def _store_call(message: str, event: str, **context) -> Iterator[None]:
    """Translate store errors raised inside the block into ``ProductBadRequest``."""
    try:
        yield
    except STORE_ERRORS as exc:
        logger.warning(event, error=str(exc), **context)
        raise ProductBadRequest(message) from exc


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(self, dto: CreateProductDTO) -> Product:
        """Insert a new product.

        Raises:
            ProductBadRequest: on any store error.
        """
        with _store_call("Failed to create product", "product.create_failed"):
            with transaction.atomic():
                product = self._repo.save(Product(**dto.model_dump()))
        logger.info("product.created", product_id=str(product.id))
        return product

    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Apply the supplied fields to an existing product.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductBadRequest: on any store error.
        """
        message = "Failed to update product"
        product = self._require(id, message)

        with _store_call(message, "product.update_failed", product_id=str(id)):
            with transaction.atomic():
                for field, value in dto.changes().items():
                    setattr(product, field, value)
                product = self._repo.save(product)
        logger.info("product.updated", product_id=str(id))
        return product

    def delete_product(self, id: str) -> Product:
        """Delete a product and return its last state.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductBadRequest: on any store error.
        """
        message = "Failed to delete product"
        self._require(id, message)

        with _store_call(message, "product.delete_failed", product_id=str(id)):
            with transaction.atomic():
                deleted = self._repo.delete(id)
        # Removed concurrently between the check and the delete.
        if deleted is None:
            raise ProductNotFound(id)
        logger.info("product.deleted", product_id=str(id))
        return deleted

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(
        self,
        page: Optional[int] = DEFAULT_PAGE,
        limit: Optional[int] = DEFAULT_LIMIT,
        base_url: Optional[str] = None,
    ) -> ProductPageDTO:
        """Return one page of products, or all of them.

        A falsy ``page`` or ``limit`` (``0`` / ``None``) bypasses
        pagination and returns the whole collection.  Otherwise the
        window ``[(page - 1) * limit, page * limit)`` is returned along
        with the total count and, when ``base_url`` is given and more
        rows remain, a link to the next page.

        Raises:
            ProductBadRequest: on any store error.
        """
        with _store_call("Failed to fetch products", "product.list_failed"):
            if not page or not limit:
                products = self._repo.list()
                return ProductPageDTO(data=self._to_output(products))

            page, limit = int(page), int(limit)
            skip = (page - 1) * limit
            products = self._repo.list(offset=skip, limit=limit)
            total = self._repo.count()

        next_page = page + 1 if page * limit < total else None
        next_link = None
        if next_page and base_url:
            next_link = f"{base_url}?page={next_page}&limit={limit}"

        logger.info("product.listed", page=page, limit=limit, total=total)
        return ProductPageDTO(
            data=self._to_output(products),
            paginated=True,
            total=total,
            next_link=next_link,
        )

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        A missing product is reported like any other failure of this
        operation: ``ProductBadRequest`` chained from ``ProductNotFound``.

        Raises:
            ProductBadRequest: if the product does not exist or on any
                store error.
        """
        message = "Failed to fetch product"
        try:
            product = self._require(id, message)
        except ProductNotFound as exc:
            logger.warning("product.fetch_failed", product_id=str(id), error=str(exc))
            raise ProductBadRequest(message) from exc
        logger.info("product.retrieved", product_id=str(id))
        return product

    def search_products(self, keyword: str) -> List[Product]:
        """Products whose name contains ``keyword``, ignoring case.

        Raises:
            ProductBadRequest: on any store error.
        """
        with _store_call(
            "Failed to search products", "product.search_failed", keyword=keyword
        ):
            return self._repo.search_by_name(keyword)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require(self, id: str, message: str) -> Product:
        with _store_call(message, "product.lookup_failed", product_id=str(id)):
            product = self._repo.get_by_id(id)
        if product is None:
            raise ProductNotFound(id)
        return product

    @staticmethod
    def _to_output(products: List[Product]) -> List[ProductOutputDTO]:
        return [ProductOutputDTO.from_entity(product) for product in products]
