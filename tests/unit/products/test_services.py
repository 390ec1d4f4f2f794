"""Unit tests for ProductService.

Covers:
- create_product: happy path, store and validation failures, log event.
- list_products: pagination window, next link, bypass, store failure.
- get_product: happy path, missing product, store failure.
- update_product: happy path, partial update, not found, store failure.
- delete_product: happy path, not found, store failure.
- search_products: delegation, store failure.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError, OperationalError

from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import ProductBadRequest, ProductNotFound
from modules.products.services import ProductService

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_repo():
    return MagicMock()


@pytest.fixture()
def service(mock_repo):
    return ProductService(repository=mock_repo)


# ===========================================================================
# create_product
# ===========================================================================


class TestCreateProduct:
    def test_success(self, service, mock_repo):
        mock_repo.save.side_effect = lambda p: p

        dto = CreateProductDTO(name="Widget", price=Decimal("19.99"))
        product = service.create_product(dto)

        assert product.name == "Widget"
        assert product.price == Decimal("19.99")
        assert product.id is not None
        mock_repo.save.assert_called_once()

    def test_store_error_raises_bad_request(self, service, mock_repo):
        mock_repo.save.side_effect = IntegrityError("constraint failed")

        dto = CreateProductDTO(name="Widget", price=Decimal("19.99"))
        with pytest.raises(ProductBadRequest, match="Failed to create product") as exc:
            service.create_product(dto)

        assert isinstance(exc.value.__cause__, IntegrityError)

    def test_validation_error_raises_bad_request(self, service, mock_repo):
        mock_repo.save.side_effect = DjangoValidationError({"price": "too many digits"})

        dto = CreateProductDTO(name="Widget", price=Decimal("19.99"))
        with pytest.raises(ProductBadRequest, match="Failed to create product") as exc:
            service.create_product(dto)

        assert isinstance(exc.value.__cause__, DjangoValidationError)

    def test_success_logs_created_event(self, service, mock_repo, caplog):
        mock_repo.save.side_effect = lambda p: p

        with caplog.at_level(logging.INFO, logger="modules.products.services"):
            service.create_product(CreateProductDTO(name="Widget", price=Decimal("1.00")))

        messages = [r.getMessage() for r in caplog.records]
        assert sum("product.created" in m for m in messages) == 1


# ===========================================================================
# list_products
# ===========================================================================


class TestListProducts:
    def test_second_page_window_and_next_link(self, service, mock_repo, make_product):
        mock_repo.list.return_value = [make_product(name=n) for n in "ABC"]
        mock_repo.count.return_value = 10

        page = service.list_products(2, 3, base_url="http://testserver/api/v1/products/")

        mock_repo.list.assert_called_once_with(offset=3, limit=3)
        assert page.paginated is True
        assert page.total == 10
        assert len(page.data) == 3
        assert page.next_link == "http://testserver/api/v1/products/?page=3&limit=3"

    def test_defaults_to_first_page_of_three(self, service, mock_repo):
        mock_repo.list.return_value = []
        mock_repo.count.return_value = 0

        service.list_products()

        mock_repo.list.assert_called_once_with(offset=0, limit=3)

    def test_last_page_has_no_next_link(self, service, mock_repo):
        mock_repo.list.return_value = []
        mock_repo.count.return_value = 9

        page = service.list_products(3, 3, base_url="http://x/products/")

        assert page.next_link is None

    def test_no_next_link_without_base_url(self, service, mock_repo):
        mock_repo.list.return_value = []
        mock_repo.count.return_value = 10

        page = service.list_products(1, 3)

        assert page.next_link is None
        assert page.to_payload()["nextLink"] is None

    def test_string_arguments_are_coerced(self, service, mock_repo):
        mock_repo.list.return_value = []
        mock_repo.count.return_value = 10

        page = service.list_products("2", "4", base_url="http://x/p/")

        mock_repo.list.assert_called_once_with(offset=4, limit=4)
        assert page.next_link == "http://x/p/?page=3&limit=4"

    @pytest.mark.parametrize("page,limit", [(0, 3), (2, 0), (None, 3), (1, None)])
    def test_falsy_page_or_limit_bypasses_pagination(
        self, service, mock_repo, make_product, page, limit
    ):
        mock_repo.list.return_value = [make_product(name=n) for n in "ABCDE"]

        result = service.list_products(page, limit, base_url="http://x/p/")

        mock_repo.list.assert_called_once_with()
        mock_repo.count.assert_not_called()
        assert result.paginated is False
        assert len(result.data) == 5
        assert set(result.to_payload()) == {"data"}

    def test_store_error_raises_bad_request(self, service, mock_repo):
        mock_repo.list.side_effect = OperationalError("database is locked")

        with pytest.raises(ProductBadRequest, match="Failed to fetch products"):
            service.list_products(1, 3)

    def test_count_error_raises_bad_request(self, service, mock_repo):
        mock_repo.list.return_value = []
        mock_repo.count.side_effect = DatabaseError("gone")

        with pytest.raises(ProductBadRequest, match="Failed to fetch products"):
            service.list_products(1, 3)


# ===========================================================================
# get_product
# ===========================================================================


class TestGetProduct:
    def test_success(self, service, mock_repo, make_product):
        existing = make_product()
        mock_repo.get_by_id.return_value = existing

        product = service.get_product(str(existing.id))

        assert product.id == existing.id

    def test_not_found_raises_bad_request(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None

        with pytest.raises(ProductBadRequest, match="Failed to fetch product") as exc:
            service.get_product("missing-id")

        assert isinstance(exc.value.__cause__, ProductNotFound)
        assert str(exc.value.__cause__) == "Product with ID missing-id not found"

    def test_store_error_raises_bad_request(self, service, mock_repo):
        mock_repo.get_by_id.side_effect = OperationalError("down")

        with pytest.raises(ProductBadRequest, match="Failed to fetch product"):
            service.get_product("some-id")


# ===========================================================================
# update_product
# ===========================================================================


class TestUpdateProduct:
    def test_success(self, service, mock_repo, make_product):
        existing = make_product()
        original_id = existing.id
        mock_repo.get_by_id.return_value = existing
        mock_repo.save.side_effect = lambda p: p

        product = service.update_product(str(existing.id), UpdateProductDTO(name="Gizmo"))

        assert product.name == "Gizmo"
        assert product.id == original_id
        mock_repo.save.assert_called_once()

    def test_partial_update_preserves_other_fields(self, service, mock_repo, make_product):
        existing = make_product(description="Original desc")
        mock_repo.get_by_id.return_value = existing
        mock_repo.save.side_effect = lambda p: p

        dto = UpdateProductDTO(price=Decimal("39.99"))
        product = service.update_product(str(existing.id), dto)

        assert product.price == Decimal("39.99")
        assert product.description == "Original desc"
        assert product.name == "Widget"

    def test_not_found_raises(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None

        with pytest.raises(ProductNotFound, match="ghost-id"):
            service.update_product("ghost-id", UpdateProductDTO(name="Ghost"))

        mock_repo.save.assert_not_called()

    def test_store_error_raises_bad_request(self, service, mock_repo, make_product):
        mock_repo.get_by_id.return_value = make_product()
        mock_repo.save.side_effect = DatabaseError("write failed")

        with pytest.raises(ProductBadRequest, match="Failed to update product"):
            service.update_product("some-id", UpdateProductDTO(name="X"))


# ===========================================================================
# delete_product
# ===========================================================================


class TestDeleteProduct:
    def test_success_returns_deleted_product(self, service, mock_repo, make_product):
        existing = make_product()
        mock_repo.get_by_id.return_value = existing
        mock_repo.delete.return_value = existing

        deleted = service.delete_product(str(existing.id))

        assert deleted is existing
        mock_repo.delete.assert_called_once_with(str(existing.id))

    def test_not_found_raises(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None

        with pytest.raises(ProductNotFound, match="ghost-id"):
            service.delete_product("ghost-id")

        mock_repo.delete.assert_not_called()

    def test_vanished_before_delete_raises_not_found(self, service, mock_repo, make_product):
        mock_repo.get_by_id.return_value = make_product()
        mock_repo.delete.return_value = None

        with pytest.raises(ProductNotFound):
            service.delete_product("raced-id")

    def test_store_error_raises_bad_request(self, service, mock_repo, make_product):
        mock_repo.get_by_id.return_value = make_product()
        mock_repo.delete.side_effect = IntegrityError("fk")

        with pytest.raises(ProductBadRequest, match="Failed to delete product"):
            service.delete_product("some-id")


# ===========================================================================
# search_products
# ===========================================================================


class TestSearchProducts:
    def test_delegates_to_repo(self, service, mock_repo, make_product):
        match = make_product(name="Red Shirt")
        mock_repo.search_by_name.return_value = [match]

        result = service.search_products("shirt")

        assert result == [match]
        mock_repo.search_by_name.assert_called_once_with("shirt")

    def test_store_error_raises_bad_request(self, service, mock_repo):
        mock_repo.search_by_name.side_effect = DatabaseError("boom")

        with pytest.raises(ProductBadRequest, match="Failed to search products"):
            service.search_products("shirt")
