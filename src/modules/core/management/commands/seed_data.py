from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.products.models import Product

CATALOG = [
    ("Red Shirt", "Cotton t-shirt, red", Decimal("19.90")),
    ("Blue Shirt", "Cotton t-shirt, blue", Decimal("19.90")),
    ("Denim Jeans", "Slim fit", Decimal("59.90")),
    ("Wool Sweater", "Knitted, grey", Decimal("79.00")),
    ("Rain Jacket", "Waterproof shell", Decimal("129.00")),
    ("Running Shoes", "Lightweight trainers", Decimal("99.90")),
    ("Leather Belt", "Brown, adjustable", Decimal("29.90")),
    ("Baseball Cap", "One size", Decimal("14.90")),
    ("Wool Socks", "Pack of three", Decimal("12.50")),
    ("Canvas Tote", "Reusable shopping bag", Decimal("9.90")),
]


class Command(BaseCommand):
    help = "Seed the database with a small demo product catalog."

    def handle(self, *args, **options):
        self.stdout.write("Creating products...")
        created = 0
        for name, description, price in CATALOG:
            _, was_created = Product.objects.get_or_create(
                name=name,
                defaults={"description": description, "price": price},
            )
            created += int(was_created)
        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: products={created} created, "
                f"{len(CATALOG) - created} already present"
            )
        )
