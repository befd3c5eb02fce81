from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from modules.catalog.constants import DeliveryType
from modules.catalog.models import Category, City, DeliveryDesk, Product
from modules.orders.dtos import OrderLineDTO, PlaceOrderDTO
from modules.orders.models import Order
from modules.orders.services import build_order_gateway

SAMPLE_ORDER_NOTE = "Please handle with care."

WILAYAS = [
    "Adrar", "Chlef", "Laghouat", "Oum El Bouaghi", "Batna", "Béjaïa", "Biskra",
    "Béchar", "Blida", "Bouira", "Tamanrasset", "Tébessa", "Tlemcen", "Tiaret",
    "Tizi Ouzou", "Algiers", "Djelfa", "Jijel", "Sétif", "Saïda", "Skikda",
    "Sidi Bel Abbès", "Annaba", "Guelma", "Constantine", "Médéa", "Mostaganem",
    "M'Sila", "Mascara", "Ouargla", "Oran", "El Bayadh", "Illizi",
    "Bordj Bou Arréridj", "Boumerdès", "El Tarf", "Tindouf", "Tissemsilt",
    "El Oued", "Khenchela", "Souk Ahras", "Tipaza", "Mila", "Aïn Defla", "Naâma",
    "Aïn Témouchent", "Ghardaïa", "Relizane", "Timimoun", "Bordj Badji Mokhtar",
    "Ouled Djellal", "Béni Abbès", "Touggourt", "Djanet", "El M'Ghair", "El Menia",
]  # fmt: skip

PRODUCTS = [
    {
        "reference": "HEAD-BT-001",
        "name": "Wireless Bluetooth Headphones",
        "category": "Electronics",
        "description": "High-fidelity sound with noise-cancellation.",
        "price": Decimal("99.99"),
        "stock": 50,
        "sizes": ["N/A"],
    },
    {
        "reference": "TSHIRT-M-002",
        "name": "Men's Casual T-Shirt",
        "category": "Apparel",
        "description": "Comfortable 100% cotton t-shirt for everyday wear.",
        "price": Decimal("19.99"),
        "old_price": Decimal("25.00"),
        "is_sale": True,
        "stock": 120,
        "sizes": ["S", "M", "L", "XL"],
    },
    {
        "reference": "BOOK-PY-003",
        "name": "Django in 7 Days",
        "category": "Books",
        "description": "A practical guide to building web APIs.",
        "price": Decimal("35.00"),
        "stock": 75,
        "sizes": ["N/A"],
    },
    {
        "reference": "COFFEE-DELUXE-004",
        "name": "Deluxe Coffee Machine",
        "category": "Home Goods",
        "description": "Brew professional-grade coffee at home.",
        "price": Decimal("249.99"),
        "stock": 3,
        "sizes": ["N/A"],
    },
]


def _fee(low: int, high: int) -> Decimal:
    return Decimal(str(round(random.uniform(low, high), 2)))


class Command(BaseCommand):
    help = "Seed database with catalog, delivery zones and a sample order."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding storefront data...")

        products = self._seed_products()
        cities, desks = self._seed_delivery_zones()
        orders_created = self._seed_sample_order()

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"products={len(products)}, "
                f"cities={cities}, "
                f"desks={desks}, "
                f"orders={orders_created}"
            )
        )

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        for data in PRODUCTS:
            defaults = dict(data)
            category, _ = Category.objects.get_or_create(name=defaults.pop("category"))
            product, _ = Product.objects.get_or_create(
                reference=defaults.pop("reference"),
                defaults={**defaults, "category": category},
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_delivery_zones(self) -> tuple[int, int]:
        self.stdout.write("Creating cities and delivery desks...")
        desk_count = 0
        for name in WILAYAS:
            city, _ = City.objects.get_or_create(
                name=name, defaults={"home_fee": _fee(400, 800)}
            )
            for i in range(1, random.randint(2, 3) + 1):
                DeliveryDesk.objects.get_or_create(
                    city=city,
                    name=f"{name} Desk {i}",
                    defaults={"desk_fee": _fee(200, 400)},
                )
                desk_count += 1
        self.stdout.write(self.style.SUCCESS("Creating cities and delivery desks... Done!"))
        return len(WILAYAS), desk_count

    def _seed_sample_order(self) -> int:
        """Place one desk-pickup order through the gateway (reserves stock)."""
        if Order.objects.filter(client_note=SAMPLE_ORDER_NOTE).exists():
            self.stdout.write(self.style.WARNING("Sample order already exists."))
            return 0

        User = get_user_model()
        customer, created = User.objects.get_or_create(
            username="customer", defaults={"email": "customer@example.com"}
        )
        if created:
            customer.set_unusable_password()
            customer.save(update_fields=["password"])

        product = Product.objects.get(reference="TSHIRT-M-002")
        city = City.objects.get(name="Algiers")
        desk = city.delivery_desks.order_by("name").first()

        result = build_order_gateway().place_order(
            PlaceOrderDTO(
                delivery_type=DeliveryType.DESK,
                delivery_city_id=city.id,
                delivery_desk_id=desk.id,
                client_note=SAMPLE_ORDER_NOTE,
                user_id=customer.pk,
                lines=[
                    OrderLineDTO(
                        product_id=product.id,
                        quantity=2,
                        size="M",
                        price=product.price,
                    )
                ],
            )
        )
        if not result.ok:
            raise CommandError(f"Sample order failed: {result.message}")
        self.stdout.write(
            self.style.SUCCESS(f"Sample order {result.order_number} placed.")
        )
        return 1
