"""E-commerce data synthesizers using Faker.

This module provides the synthesizers for the ``ecommerce`` dataset:
customers, products, orders and reviews.

Features:
- Faker for realistic names, addresses and text
- Weighted distributions for tiers and order statuses
- Foreign key relationships drawn from published parent pools
- Order totals that add up (8% tax, free shipping above a threshold)
"""

from __future__ import annotations

from datetime import timedelta

from benchstage.distributions.samplers import (
    below,
    chance,
    decimal_range,
    int_range,
    pick,
    round_half_away,
    timestamp_range,
    weighted_pick,
)
from benchstage.distributions.weighted import (
    CUSTOMER_TIER_WEIGHTS,
    ORDER_STATUS_WEIGHTS,
    PAYMENT_STATUS_WEIGHTS,
)
from benchstage.generators.base import FakerSynthesizer, IdentifierPools
from benchstage.rng import Mulberry32
from benchstage.schemas.oltp import Address, Customer, Order, OrderItem, Product, Review

OLTP_SEED = 42

TAX_RATE = 0.08
FREE_SHIPPING_THRESHOLD = 100.0
SHIPPING_RATES = (4.99, 9.99, 14.99)

SKU_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

PRODUCT_NAMES: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "electronics": (("Pro", "Ultra", "Max", "Plus"), ("Phone", "Tablet", "Laptop", "Headphones", "Speaker")),
    "clothing": (("Classic", "Slim", "Relaxed", "Vintage"), ("T-Shirt", "Jacket", "Pants", "Dress", "Shoes")),
    "home": (("Modern", "Rustic", "Compact", "Deluxe"), ("Lamp", "Chair", "Table", "Rug", "Pillow")),
    "sports": (("Pro", "Training", "Outdoor", "Elite"), ("Ball", "Racket", "Weights", "Mat", "Gear")),
    "books": (("Complete", "Pocket", "Illustrated", "Essential"), ("Guide", "Story", "Manual", "Handbook", "Journey")),
}
CATEGORIES = tuple(PRODUCT_NAMES)

REVIEW_RATING_WEIGHTS = (5, 5, 10, 30, 50)


def _tiers(weights: dict[str, int]) -> tuple[list[str], list[int]]:
    return list(weights), list(weights.values())


class CustomerSynthesizer(FakerSynthesizer[Customer]):
    """Synthesizer for ``customers``."""

    table = "customers"
    record_type = Customer

    def synthesize(self, index: int, rng: Mulberry32, pools: IdentifierPools) -> Customer:
        tiers, weights = _tiers(CUSTOMER_TIER_WEIGHTS)
        created_at = timestamp_range(2020, 2023, rng)
        return Customer(
            id=self.fake.uuid4(),
            email=self.fake.email(),
            first_name=self.fake.first_name(),
            last_name=self.fake.last_name(),
            phone=self.fake.phone_number(),
            company=self.fake.company(),
            tier=weighted_pick(tiers, weights, rng),
            total_spent=decimal_range(0, 50_000, 2, rng),
            address=Address(
                street=self.fake.street_address(),
                city=self.fake.city(),
                state=self.fake.state_abbr(),
                postal_code=self.fake.postcode(),
                country=self.fake.country_code(),
            ),
            created_at=created_at,
            updated_at=created_at + timedelta(days=below(365, rng)),
        )


class ProductSynthesizer(FakerSynthesizer[Product]):
    """Synthesizer for ``products``. Cost is 30-80% of price."""

    table = "products"
    record_type = Product

    def synthesize(self, index: int, rng: Mulberry32, pools: IdentifierPools) -> Product:
        category = pick(CATEGORIES, rng)
        modifiers, nouns = PRODUCT_NAMES[category]
        name = f"{self.fake.word().title()} {pick(modifiers, rng)} {pick(nouns, rng)}"

        price = decimal_range(5, 2_000, 2, rng)
        cost = round_half_away(price * decimal_range(0.3, 0.8, 2, rng), 2)
        created_at = timestamp_range(2020, 2024, rng)

        return Product(
            id=self.fake.uuid4(),
            sku="SKU-" + "".join(pick(SKU_ALPHABET, rng) for _ in range(8)),
            name=name,
            description=self.fake.sentence(nb_words=12),
            category=category,
            brand=self.fake.company(),
            price=price,
            cost=cost,
            stock=int_range(0, 1_000, rng),
            is_active=chance(0.9, rng),
            rating=decimal_range(1, 5, 1, rng),
            review_count=int_range(0, 500, rng),
            created_at=created_at,
            updated_at=created_at + timedelta(days=below(180, rng)),
        )


class OrderSynthesizer(FakerSynthesizer[Order]):
    """Synthesizer for ``orders``.

    Each order references one customer and one to five products. Totals
    are computed from the items so they always reconcile.
    """

    table = "orders"
    record_type = Order
    references = ("customers", "products")

    def synthesize(self, index: int, rng: Mulberry32, pools: IdentifierPools) -> Order:
        customer_id = self.reference("customers", rng, pools)

        items = tuple(
            OrderItem(
                product_id=self.reference("products", rng, pools),
                quantity=int_range(1, 5, rng),
                unit_price=decimal_range(5, 500, 2, rng),
            )
            for _ in range(int_range(1, 5, rng))
        )
        subtotal = round_half_away(sum(i.quantity * i.unit_price for i in items), 2)
        discount = round_half_away(subtotal * decimal_range(0.05, 0.2, 2, rng), 2) if chance(0.25, rng) else 0.0
        tax = round_half_away(subtotal * TAX_RATE, 2)
        shipping = 0.0 if subtotal >= FREE_SHIPPING_THRESHOLD else pick(SHIPPING_RATES, rng)

        statuses, status_weights = _tiers(ORDER_STATUS_WEIGHTS)
        payments, payment_weights = _tiers(PAYMENT_STATUS_WEIGHTS)
        created_at = timestamp_range(2023, 2024, rng)

        return Order(
            id=self.fake.uuid4(),
            customer_id=customer_id,
            items=items,
            subtotal=subtotal,
            discount=discount,
            tax=tax,
            shipping=shipping,
            total=round_half_away(subtotal - discount + tax + shipping, 2),
            status=weighted_pick(statuses, status_weights, rng),
            payment_status=weighted_pick(payments, payment_weights, rng),
            created_at=created_at,
            updated_at=created_at + timedelta(hours=below(24 * 14, rng)),
        )


class ReviewSynthesizer(FakerSynthesizer[Review]):
    """Synthesizer for ``reviews``. Ratings skew positive."""

    table = "reviews"
    record_type = Review
    references = ("products", "customers")

    def synthesize(self, index: int, rng: Mulberry32, pools: IdentifierPools) -> Review:
        return Review(
            id=self.fake.uuid4(),
            product_id=self.reference("products", rng, pools),
            customer_id=self.reference("customers", rng, pools),
            rating=weighted_pick((1, 2, 3, 4, 5), REVIEW_RATING_WEIGHTS, rng),
            title=self.fake.sentence(nb_words=5).rstrip("."),
            body=self.fake.paragraph(nb_sentences=3),
            helpful_votes=int_range(0, 200, rng) if chance(0.4, rng) else 0,
            verified=chance(0.8, rng),
            created_at=timestamp_range(2021, 2024, rng),
        )
