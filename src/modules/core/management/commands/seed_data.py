from __future__ import annotations

import random
from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.accounts.dtos import RegisterDTO
from modules.accounts.models import User
from modules.accounts.services import AuthService
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO
from modules.orders.views import build_order_service
from modules.products.models import Category, Product
from modules.stores.constants import MemberRole
from modules.stores.models import Store, StoreMember

OWNER_EMAIL = "owner@demo.local"
COURIER_EMAIL = "courier@demo.local"
STORE_LAT, STORE_LNG = 40.4168, -3.7038

CATALOG = [
    ("Pizzas", "Margherita", Decimal("9.50")),
    ("Pizzas", "Diavola", Decimal("11.00")),
    ("Pizzas", "Quattro Formaggi", Decimal("12.00")),
    ("Starters", "Garlic Bread", Decimal("4.50")),
    ("Starters", "Bruschetta", Decimal("5.00")),
    ("Drinks", "Water", Decimal("1.50")),
    ("Drinks", "Lemonade", Decimal("2.80")),
]

# Where each seeded order ends up, walked through the real transitions.
LIFECYCLE = [
    [],
    [OrderStatus.CONFIRMED],
    [OrderStatus.PREPARING, OrderStatus.READY],
    [OrderStatus.PREPARING, OrderStatus.READY, OrderStatus.ON_THE_WAY],
    [OrderStatus.PREPARING, OrderStatus.READY, OrderStatus.ON_THE_WAY, OrderStatus.DELIVERED],
]


class Command(BaseCommand):
    help = "Seed database with a demo store, catalog, staff and orders."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=12)

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        store = self._seed_store()
        courier = self._seed_courier(store)
        products = self._seed_catalog(store)
        orders_created = self._seed_orders(store, courier, products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"store={store.slug}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_store(self) -> Store:
        existing = Store.objects.filter(owner__email=OWNER_EMAIL).first()
        if existing:
            return existing

        self.stdout.write("Registering demo store...")
        registration = AuthService().register(
            RegisterDTO(
                name="Demo Owner",
                email=OWNER_EMAIL,
                password="demo1234",
                phone="600000000",
                store_name="Demo Pizzeria",
                store_address="Puerta del Sol 1, Madrid",
                store_latitude=STORE_LAT,
                store_longitude=STORE_LNG,
                store_phone="910000000",
                currency="EUR",
                accepts_cash=True,
                accepts_transfer=True,
                bank_name="Demo Bank",
                bank_account_holder="Demo Pizzeria SL",
                bank_account_number="ES0000000000000000000000",
                min_advance_hours=2,
                max_advance_days=7,
                immediate_cancel_minutes=10,
                scheduled_cancel_hours=24,
                delivery_slots=[
                    {"day_of_week": day, "start_time": "12:00", "end_time": "15:00", "max_orders_per_hour": 6}
                    for day in range(7)
                ],
                delivery_zones=[
                    {"name": "Centro", "max_distance": 3, "delivery_fee": "1.50", "min_order": "8.00"},
                    {"name": "Extended", "max_distance": 8, "delivery_fee": "3.50", "min_order": "15.00"},
                ],
            )
        )
        self.stdout.write(self.style.SUCCESS("Registering demo store... Done!"))
        return registration.store

    def _seed_courier(self, store: Store) -> User:
        courier = User.objects.filter(email=COURIER_EMAIL).first()
        if not courier:
            courier = User.objects.create_user(
                email=COURIER_EMAIL, password="demo1234", name="Demo Courier", phone="600000009"
            )
        StoreMember.objects.get_or_create(
            store=store, user=courier, defaults={"role": MemberRole.DELIVERY}
        )
        return courier

    def _seed_catalog(self, store: Store) -> list[Product]:
        self.stdout.write("Creating catalog...")
        products: list[Product] = []
        for position, (category_name, name, price) in enumerate(CATALOG):
            category, _ = Category.objects.get_or_create(store=store, name=category_name)
            product, _ = Product.objects.get_or_create(
                store=store,
                name=name,
                defaults={"category": category, "price": price, "sort_order": position},
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating catalog... Done!"))
        return products

    def _seed_orders(self, store: Store, courier: User, products: list[Product], count: int) -> int:
        if store.orders.exists():
            self.stdout.write(self.style.WARNING("Skipping orders (store already has some)."))
            return 0

        self.stdout.write("Creating orders...")
        service = build_order_service()
        for i in range(count):
            pizzas = [p for p in products if p.price >= Decimal("9")]
            extras = [p for p in products if p not in pizzas]
            picked = [random.choice(pizzas), *random.sample(extras, k=random.randint(0, 2))]
            order = service.create_order(
                store.slug,
                CreateOrderDTO(
                    customer_name=f"Customer {i + 1}",
                    customer_phone=f"6001000{i:02d}",
                    customer_address=f"Calle Demo {i + 1}, Madrid",
                    # Within the 3 km zone.
                    customer_lat=STORE_LAT + random.uniform(-0.015, 0.015),
                    customer_lng=STORE_LNG + random.uniform(-0.015, 0.015),
                    type="IMMEDIATE",
                    payment_method=random.choice(["CASH", "TRANSFER"]),
                    items=[
                        {"product_id": product.id, "quantity": random.randint(2, 4)}
                        for product in picked
                    ],
                ),
            )

            steps = random.choice(LIFECYCLE)
            if OrderStatus.ON_THE_WAY in steps:
                service.assign_delivery(store.id, order.id, courier.id)
            for status in steps:
                if order.status == status:
                    continue
                order = service.update_status(store.id, order.id, status)

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return count
