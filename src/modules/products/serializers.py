"""Product DRF serializers for API output and schema generation.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema_serializer
from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read/write serializer for the Product resource."""

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


@extend_schema_serializer(many=False)
class ProductPageSerializer(serializers.Serializer):
    """Shape of the listing payload, used for the OpenAPI schema only.

    ``total`` and ``nextLink`` are omitted when pagination is bypassed.
    """

    data = ProductSerializer(many=True)
    total = serializers.IntegerField(required=False)
    nextLink = serializers.CharField(required=False, allow_null=True)


class ErrorSerializer(serializers.Serializer):
    detail = serializers.CharField()
