"""Record and result schemas.

This module exports Pydantic models for:
- ClickBench hits
- IMDb titles, people and ratings
- OLTP records (ecommerce, saas, social)
- Staging manifests and status reports
"""

from __future__ import annotations

from benchstage.schemas.clickbench import Hit
from benchstage.schemas.imdb import NameBasics, TitleBasics, TitleRating
from benchstage.schemas.manifest import (
    DeleteResult,
    StageAllSummary,
    StagedFile,
    StagingManifest,
    StagingStatus,
    StoredFile,
    format_bytes,
)
from benchstage.schemas.oltp import (
    Address,
    Comment,
    Customer,
    Document,
    Member,
    Order,
    OrderItem,
    Organization,
    Post,
    Product,
    Review,
    SocialUser,
)

__all__ = [
    "Address",
    "Comment",
    "Customer",
    "DeleteResult",
    "Document",
    "Hit",
    "Member",
    "NameBasics",
    "Order",
    "OrderItem",
    "Organization",
    "Post",
    "Product",
    "Review",
    "SocialUser",
    "StageAllSummary",
    "StagedFile",
    "StagingManifest",
    "StagingStatus",
    "StoredFile",
    "TitleBasics",
    "TitleRating",
    "format_bytes",
]
