"""Record synthesizers, one per table shape.

Analytics:
- HitSynthesizer (clickbench)

Reference data:
- TitleBasicsSynthesizer, NameBasicsSynthesizer, TitleRatingSynthesizer (imdb)

OLTP (Faker-backed):
- CustomerSynthesizer, ProductSynthesizer, OrderSynthesizer, ReviewSynthesizer (ecommerce)
- OrganizationSynthesizer, MemberSynthesizer, DocumentSynthesizer (saas)
- SocialUserSynthesizer, PostSynthesizer, CommentSynthesizer (social)
"""

from __future__ import annotations

from benchstage.generators.base import FakerSynthesizer, IdentifierPools, RecordSynthesizer
from benchstage.generators.clickbench import CLICKBENCH_SEED, HitSynthesizer
from benchstage.generators.ecommerce import (
    OLTP_SEED,
    CustomerSynthesizer,
    OrderSynthesizer,
    ProductSynthesizer,
    ReviewSynthesizer,
)
from benchstage.generators.imdb import (
    IMDB_SEED,
    NameBasicsSynthesizer,
    TitleBasicsSynthesizer,
    TitleRatingSynthesizer,
)
from benchstage.generators.saas import (
    DocumentSynthesizer,
    MemberSynthesizer,
    OrganizationSynthesizer,
)
from benchstage.generators.social import (
    CommentSynthesizer,
    PostSynthesizer,
    SocialUserSynthesizer,
)

__all__ = [
    "CLICKBENCH_SEED",
    "IMDB_SEED",
    "OLTP_SEED",
    "CommentSynthesizer",
    "CustomerSynthesizer",
    "DocumentSynthesizer",
    "FakerSynthesizer",
    "HitSynthesizer",
    "IdentifierPools",
    "MemberSynthesizer",
    "NameBasicsSynthesizer",
    "OrderSynthesizer",
    "OrganizationSynthesizer",
    "PostSynthesizer",
    "ProductSynthesizer",
    "RecordSynthesizer",
    "ReviewSynthesizer",
    "SocialUserSynthesizer",
    "TitleBasicsSynthesizer",
    "TitleRatingSynthesizer",
]
