"""OLTP-shaped records for the ecommerce, saas and social datasets.

All models are immutable (frozen=True) and validate at construction time.
Foreign keys always reference identifiers of rows already generated in a
parent table of the same dataset.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from benchstage.schemas.types import Number

CustomerTier = Literal["free", "pro", "enterprise"]
OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]
PaymentStatus = Literal["pending", "paid", "refunded", "failed"]
PlanType = Literal["free", "starter", "pro", "enterprise"]
MemberRole = Literal["owner", "admin", "member", "viewer"]
DocumentType = Literal["document", "spreadsheet", "presentation", "note"]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# -----------------------------------------------------------------------------
# ecommerce
# -----------------------------------------------------------------------------


class Address(_Record):
    """Postal address embedded in a customer."""

    street: str
    city: str
    state: str
    postal_code: str
    country: str = Field(..., min_length=2, max_length=2)


class Customer(_Record):
    """Customer account.

    Attributes:
        id: UUID string
        tier: Account tier (free, pro, enterprise)
        total_spent: Lifetime spend in USD
        created_at: Signup time; updated_at is never earlier
    """

    id: str
    email: str
    first_name: str
    last_name: str
    phone: str
    company: str
    tier: CustomerTier
    total_spent: Number = Field(..., ge=0)
    address: Address
    created_at: datetime
    updated_at: datetime


class Product(_Record):
    """Catalog product. ``cost`` is always below ``price``."""

    id: str
    sku: str = Field(..., pattern=r"^SKU-[A-Z0-9]{8}$")
    name: str
    description: str
    category: str
    brand: str
    price: Number = Field(..., gt=0)
    cost: Number = Field(..., gt=0)
    stock: int = Field(..., ge=0)
    is_active: bool
    rating: Number = Field(..., ge=1.0, le=5.0)
    review_count: int = Field(..., ge=0)
    created_at: datetime
    updated_at: datetime


class OrderItem(_Record):
    """Order line referencing a product."""

    product_id: str
    quantity: int = Field(..., ge=1)
    unit_price: Number = Field(..., gt=0)


class Order(_Record):
    """Customer order.

    Totals are consistent: ``total = subtotal - discount + tax + shipping``
    (each rounded to cents), with tax at 8% of the subtotal.
    """

    id: str
    customer_id: str
    items: tuple[OrderItem, ...] = Field(..., min_length=1)
    subtotal: Number = Field(..., ge=0)
    discount: Number = Field(..., ge=0)
    tax: Number = Field(..., ge=0)
    shipping: Number = Field(..., ge=0)
    total: Number
    status: OrderStatus
    payment_status: PaymentStatus
    created_at: datetime
    updated_at: datetime


class Review(_Record):
    """Product review written by a customer."""

    id: str
    product_id: str
    customer_id: str
    rating: int = Field(..., ge=1, le=5)
    title: str
    body: str
    helpful_votes: int = Field(..., ge=0)
    verified: bool
    created_at: datetime


# -----------------------------------------------------------------------------
# saas
# -----------------------------------------------------------------------------


class Organization(_Record):
    """Tenant organization."""

    id: str
    name: str
    slug: str
    plan: PlanType
    seats: int = Field(..., ge=1)
    mrr: int = Field(..., ge=0)
    industry: str
    created_at: datetime


class Member(_Record):
    """User belonging to one organization."""

    id: str
    org_id: str
    username: str
    email: str
    display_name: str
    role: MemberRole
    is_active: bool
    created_at: datetime


class Document(_Record):
    """Document owned by an organization, with an author drawn from the users table."""

    id: str
    org_id: str
    user_id: str
    title: str
    content: str
    type: DocumentType
    is_public: bool
    word_count: int = Field(..., ge=0)
    created_at: datetime
    updated_at: datetime


# -----------------------------------------------------------------------------
# social
# -----------------------------------------------------------------------------


class SocialUser(_Record):
    """Social network account."""

    id: str
    username: str
    email: str
    display_name: str
    bio: str
    avatar_url: str
    follower_count: int = Field(..., ge=0)
    following_count: int = Field(..., ge=0)
    is_verified: bool
    created_at: datetime


class Post(_Record):
    """Post authored by a user."""

    id: str
    user_id: str
    content: str
    media_urls: tuple[str, ...] = ()
    like_count: int = Field(..., ge=0)
    comment_count: int = Field(..., ge=0)
    share_count: int = Field(..., ge=0)
    is_pinned: bool
    created_at: datetime


class Comment(_Record):
    """Comment on a post."""

    id: str
    post_id: str
    user_id: str
    body: str
    like_count: int = Field(..., ge=0)
    created_at: datetime
