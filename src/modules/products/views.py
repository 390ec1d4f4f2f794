"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.
Domain exceptions are caught and translated into HTTP status codes:
``ProductNotFound`` becomes 404, ``ProductBadRequest``, DTO
validation errors and non-object request bodies become 400.  The view never swallows generic
exceptions.
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.products.dtos import CreateProductDTO, PageQueryDTO, UpdateProductDTO
from modules.products.exceptions import ProductBadRequest, ProductNotFound
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import (
    ErrorSerializer,
    ProductPageSerializer,
    ProductSerializer,
)
from modules.products.services import ProductService


def _detail(exc: Exception, code: int) -> Response:
    return Response({"detail": str(exc)}, status=code)


def _object_body_error(request: Request) -> Response | None:
    if isinstance(request.data, dict):
        return None
    return Response(
        {"detail": "Request body must be a JSON object."},
        status=status.HTTP_400_BAD_REQUEST,
    )


class ProductViewSet(GenericViewSet):
    """ViewSet for Product CRUD operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    All ORM access goes through the service/repository layer;
    ``queryset`` is declared only for schema generation.
    """

    queryset = Product.objects.all()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    # ------------------------------------------------------------------
    # List / Search / Retrieve
    # ------------------------------------------------------------------

    @extend_schema(
        parameters=[
            OpenApiParameter(
                "page",
                OpenApiTypes.INT,
                OpenApiParameter.QUERY,
                description="1-based page number (default 1). 0 returns every product.",
            ),
            OpenApiParameter(
                "limit",
                OpenApiTypes.INT,
                OpenApiParameter.QUERY,
                description="Page size (default 3). 0 returns every product.",
            ),
        ],
        responses={200: ProductPageSerializer, 400: ErrorSerializer},
    )
    def list(self, request: Request) -> Response:
        """GET /api/v1/products/?page=&limit="""
        try:
            query = PageQueryDTO.from_query(request.query_params)
        except PydanticValidationError as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)

        try:
            page = self._service.list_products(
                page=query.page,
                limit=query.limit,
                base_url=request.build_absolute_uri(request.path),
            )
        except ProductBadRequest as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)
        return Response(page.to_payload())

    @extend_schema(
        parameters=[
            OpenApiParameter(
                "keyword",
                OpenApiTypes.STR,
                OpenApiParameter.QUERY,
                description="Case-insensitive substring of the product name.",
            ),
        ],
        responses={200: ProductSerializer(many=True), 400: ErrorSerializer},
    )
    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request: Request) -> Response:
        """GET /api/v1/products/search/?keyword="""
        keyword = request.query_params.get("keyword", "")
        try:
            products = self._service.search_products(keyword)
        except ProductBadRequest as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)
        return Response(ProductSerializer(products, many=True).data)

    @extend_schema(responses={200: ProductSerializer, 400: ErrorSerializer})
    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductBadRequest as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    @extend_schema(
        request=ProductSerializer,
        responses={201: ProductSerializer, 400: ErrorSerializer},
    )
    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        error = _object_body_error(request)
        if error is not None:
            return error
        data = request.data

        try:
            dto = CreateProductDTO(
                name=data.get("name"),
                price=data.get("price"),
                description=data.get("description") or "",
            )
        except (PydanticValidationError, ValueError) as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)

        try:
            product = self._service.create_product(dto)
        except ProductBadRequest as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)

        out = ProductSerializer(product)
        return Response(out.data, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=ProductSerializer(partial=True),
        responses={
            200: ProductSerializer,
            400: ErrorSerializer,
            404: ErrorSerializer,
        },
    )
    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/

        Both verbs apply a partial update: omitted fields are unchanged.
        """
        error = _object_body_error(request)
        if error is not None:
            return error
        data = request.data

        try:
            dto = UpdateProductDTO(
                name=data.get("name"),
                price=data.get("price"),
                description=data.get("description"),
            )
        except (PydanticValidationError, ValueError) as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)

        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound as exc:
            return _detail(exc, status.HTTP_404_NOT_FOUND)
        except ProductBadRequest as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)

        return Response(ProductSerializer(product).data)

    @extend_schema(
        request=ProductSerializer(partial=True),
        responses={
            200: ProductSerializer,
            400: ErrorSerializer,
            404: ErrorSerializer,
        },
    )
    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    @extend_schema(
        responses={
            200: ProductSerializer,
            400: ErrorSerializer,
            404: ErrorSerializer,
        }
    )
    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/

        Responds with the deleted product's data.
        """
        try:
            product = self._service.delete_product(pk)
        except ProductNotFound as exc:
            return _detail(exc, status.HTTP_404_NOT_FOUND)
        except ProductBadRequest as exc:
            return _detail(exc, status.HTTP_400_BAD_REQUEST)
        return Response(ProductSerializer(product).data)
