"""Multi-tenant SaaS data synthesizers using Faker.

Tables: orgs, users (members of an org) and documents (owned by an org,
authored by a user). Seats and MRR follow the org's plan.
"""

from __future__ import annotations

from datetime import timedelta

from benchstage.distributions.samplers import (
    below,
    chance,
    int_range,
    long_tail,
    pick,
    timestamp_range,
    weighted_pick,
)
from benchstage.distributions.weighted import PLAN_WEIGHTS
from benchstage.generators.base import FakerSynthesizer, IdentifierPools
from benchstage.rng import Mulberry32
from benchstage.schemas.oltp import Document, Member, Organization

# MRR per seat by plan (USD)
PLAN_SEAT_PRICE: dict[str, int] = {
    "free": 0,
    "starter": 19,
    "pro": 49,
    "enterprise": 199,
}

PLAN_SEATS: dict[str, tuple[int, int]] = {
    "free": (1, 5),
    "starter": (2, 20),
    "pro": (5, 100),
    "enterprise": (50, 1_000),
}

INDUSTRIES = ("technology", "finance", "healthcare", "retail", "manufacturing", "education")

ROLES = ("owner", "admin", "member", "viewer")
ROLE_WEIGHTS = (2, 8, 70, 20)

DOCUMENT_TYPES = ("document", "spreadsheet", "presentation", "note")
DOCUMENT_TYPE_WEIGHTS = (50, 20, 10, 20)

WORD_COUNT_THRESHOLDS = (0.6, 0.9)
WORD_COUNT_RANGES = ((10, 500), (500, 5_000), (5_000, 50_000))


class OrganizationSynthesizer(FakerSynthesizer[Organization]):
    """Synthesizer for ``orgs``."""

    table = "orgs"
    record_type = Organization

    def synthesize(self, index: int, rng: Mulberry32, pools: IdentifierPools) -> Organization:
        name = self.fake.company()
        plan = weighted_pick(list(PLAN_WEIGHTS), list(PLAN_WEIGHTS.values()), rng)
        seats = int_range(*PLAN_SEATS[plan], rng)
        return Organization(
            id=self.fake.uuid4(),
            name=name,
            slug=f"{self.fake.slug(name)}-{index}",
            plan=plan,
            seats=seats,
            mrr=seats * PLAN_SEAT_PRICE[plan],
            industry=pick(INDUSTRIES, rng),
            created_at=timestamp_range(2018, 2024, rng),
        )


class MemberSynthesizer(FakerSynthesizer[Member]):
    """Synthesizer for ``users``. Every user belongs to one org."""

    table = "users"
    record_type = Member
    references = ("orgs",)

    def synthesize(self, index: int, rng: Mulberry32, pools: IdentifierPools) -> Member:
        first_name = self.fake.first_name()
        last_name = self.fake.last_name()
        return Member(
            id=self.fake.uuid4(),
            org_id=self.reference("orgs", rng, pools),
            username=f"{first_name.lower()}.{last_name.lower()}{index}",
            email=self.fake.email(),
            display_name=f"{first_name} {last_name}",
            role=weighted_pick(ROLES, ROLE_WEIGHTS, rng),
            is_active=chance(0.9, rng),
            created_at=timestamp_range(2019, 2024, rng),
        )


class DocumentSynthesizer(FakerSynthesizer[Document]):
    """Synthesizer for ``documents``.

    The org and the author are drawn independently from their pools, so
    an author is not guaranteed to be a member of the document's org.
    """

    table = "documents"
    record_type = Document
    references = ("orgs", "users")

    def synthesize(self, index: int, rng: Mulberry32, pools: IdentifierPools) -> Document:
        created_at = timestamp_range(2020, 2024, rng)
        return Document(
            id=self.fake.uuid4(),
            org_id=self.reference("orgs", rng, pools),
            user_id=self.reference("users", rng, pools),
            title=self.fake.catch_phrase(),
            content=self.fake.paragraph(nb_sentences=5),
            type=weighted_pick(DOCUMENT_TYPES, DOCUMENT_TYPE_WEIGHTS, rng),
            is_public=chance(0.15, rng),
            word_count=long_tail(WORD_COUNT_THRESHOLDS, WORD_COUNT_RANGES, rng),
            created_at=created_at,
            updated_at=created_at + timedelta(days=below(90, rng)),
        )
