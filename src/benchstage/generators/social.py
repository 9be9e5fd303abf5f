"""Social network data synthesizers using Faker.

Tables: users, posts (authored by users) and comments (on posts, by users).
Follower and engagement counts are long-tailed: most accounts and posts
get little attention, a few get a lot.
"""

from __future__ import annotations

from benchstage.distributions.samplers import (
    below,
    chance,
    int_range,
    long_tail,
    timestamp_range,
)
from benchstage.generators.base import FakerSynthesizer, IdentifierPools
from benchstage.rng import Mulberry32
from benchstage.schemas.oltp import Comment, Post, SocialUser

FOLLOWER_THRESHOLDS = (0.8, 0.97, 0.995)
FOLLOWER_RANGES = ((0, 500), (500, 10_000), (10_000, 500_000), (500_000, 5_000_000))

LIKE_THRESHOLDS = (0.85, 0.98)
LIKE_RANGES = ((0, 50), (50, 5_000), (5_000, 250_000))

MEDIA_HOST = "https://media.example.com"


class SocialUserSynthesizer(FakerSynthesizer[SocialUser]):
    """Synthesizer for ``users``. Verified accounts are rare."""

    table = "users"
    record_type = SocialUser

    def synthesize(self, index: int, rng: Mulberry32, pools: IdentifierPools) -> SocialUser:
        username = f"{self.fake.user_name()}{index}"
        return SocialUser(
            id=self.fake.uuid4(),
            username=username,
            email=self.fake.email(),
            display_name=self.fake.name(),
            bio=self.fake.sentence(nb_words=10) if chance(0.7, rng) else "",
            avatar_url=f"{MEDIA_HOST}/avatars/{username}.jpg",
            follower_count=long_tail(FOLLOWER_THRESHOLDS, FOLLOWER_RANGES, rng),
            following_count=int_range(0, 2_000, rng),
            is_verified=chance(0.02, rng),
            created_at=timestamp_range(2015, 2024, rng),
        )


class PostSynthesizer(FakerSynthesizer[Post]):
    """Synthesizer for ``posts``."""

    table = "posts"
    record_type = Post
    references = ("users",)

    def synthesize(self, index: int, rng: Mulberry32, pools: IdentifierPools) -> Post:
        user_id = self.reference("users", rng, pools)
        media_count = below(4, rng) if chance(0.3, rng) else 0
        return Post(
            id=self.fake.uuid4(),
            user_id=user_id,
            content=self.fake.paragraph(nb_sentences=2),
            media_urls=tuple(f"{MEDIA_HOST}/posts/{index}/{n}.jpg" for n in range(media_count)),
            like_count=long_tail(LIKE_THRESHOLDS, LIKE_RANGES, rng),
            comment_count=int_range(0, 200, rng),
            share_count=int_range(0, 100, rng),
            is_pinned=chance(0.01, rng),
            created_at=timestamp_range(2020, 2024, rng),
        )


class CommentSynthesizer(FakerSynthesizer[Comment]):
    """Synthesizer for ``comments``."""

    table = "comments"
    record_type = Comment
    references = ("posts", "users")

    def synthesize(self, index: int, rng: Mulberry32, pools: IdentifierPools) -> Comment:
        return Comment(
            id=self.fake.uuid4(),
            post_id=self.reference("posts", rng, pools),
            user_id=self.reference("users", rng, pools),
            body=self.fake.sentence(nb_words=14),
            like_count=long_tail(LIKE_THRESHOLDS, LIKE_RANGES, rng),
            created_at=timestamp_range(2020, 2024, rng),
        )
