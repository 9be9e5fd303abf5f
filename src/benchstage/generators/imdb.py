"""IMDb-style reference data synthesizers.

Three dependent tables:
- title_basics: titles, generated first and published as the title pool
- name_basics: people whose knownForTitles reference the title pool
- title_ratings: one rating row per draw from the title pool

Ratings follow a bell curve around 6.5 and vote counts a long tail, so a
few titles carry most of the votes.
"""

from __future__ import annotations

from benchstage.distributions.samplers import (
    VOTE_TIER_RANGES,
    VOTE_TIER_THRESHOLDS,
    bell_curve,
    below,
    chance,
    long_tail,
    pick,
    round_half_away,
)
from benchstage.generators.base import IdentifierPools, RecordSynthesizer
from benchstage.rng import Mulberry32
from benchstage.schemas.imdb import NameBasics, TitleBasics, TitleRating, name_id, title_id

IMDB_SEED = 67890

TITLE_TYPES = ("movie", "tvSeries", "tvEpisode", "tvMovie", "tvMiniSeries", "short", "videoGame", "video")

GENRES = (
    "Drama", "Comedy", "Action", "Adventure", "Horror", "Thriller", "Romance",
    "Sci-Fi", "Fantasy", "Mystery", "Crime", "Documentary", "Animation",
    "Family", "Biography", "History", "War", "Music", "Musical", "Western",
    "Sport", "Film-Noir", "News", "Reality-TV", "Talk-Show", "Game-Show",
)

MOVIE_WORDS = (
    "The", "A", "Love", "Death", "Life", "Night", "Day", "Dark", "Light", "Last",
    "First", "Final", "Secret", "Hidden", "Lost", "Found", "Return", "Rise", "Fall",
    "Journey", "Quest", "Legend", "Story", "Tale", "Chronicles", "Adventures",
    "Blood", "Fire", "Ice", "Storm", "Shadow", "Sun", "Moon", "Star", "World",
    "Empire", "Kingdom", "House", "Family", "Brothers", "Sisters", "Father", "Mother",
)

FIRST_NAMES = (
    "John", "Michael", "David", "James", "Robert", "William", "Christopher", "Daniel",
    "Emma", "Olivia", "Sophia", "Isabella", "Mia", "Charlotte", "Amelia", "Harper",
    "Tom", "Chris", "Brad", "Leonardo", "Meryl", "Cate", "Jennifer", "Scarlett",
    "Denzel", "Samuel", "Morgan", "Anthony", "Viola", "Lupita", "Octavia", "Halle",
)

LAST_NAMES = (
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Miller", "Davis", "Wilson",
    "Anderson", "Taylor", "Moore", "Jackson", "Martin", "Lee", "Thompson", "White",
    "Hanks", "Cruise", "Pitt", "DiCaprio", "Streep", "Blanchett", "Lawrence", "Johansson",
    "Washington", "Freeman", "Hopkins", "Davis", "Nyongo", "Spencer", "Berry",
)

PROFESSIONS = (
    "actor", "actress", "director", "producer", "writer", "composer", "cinematographer",
    "editor", "production_designer", "costume_designer", "make_up_department",
    "sound_department", "visual_effects", "stunts", "miscellaneous",
)

RATING_MEAN = 6.5
RATING_STDDEV = 1.5


def _distinct_picks(candidates: tuple[str, ...], count: int, rng: Mulberry32) -> list[str]:
    """Draw ``count`` picks, keeping first occurrences only."""
    selected: list[str] = []
    for _ in range(count):
        value = pick(candidates, rng)
        if value not in selected:
            selected.append(value)
    return selected


def _runtime_minutes(title_type: str, rng: Mulberry32) -> int:
    if title_type == "short":
        return below(30, rng) + 5
    if title_type == "movie":
        return below(150, rng) + 60
    if "Episode" in title_type:
        return below(45, rng) + 20
    return below(120, rng) + 30


class TitleBasicsSynthesizer(RecordSynthesizer[TitleBasics]):
    """Synthesizer for ``title_basics``. Contributes ``tconst`` to its pool."""

    table = "title_basics"
    record_type = TitleBasics

    def identifier(self, record: TitleBasics) -> str:
        return record.tconst

    def synthesize(self, index: int, rng: Mulberry32, pools: IdentifierPools) -> TitleBasics:
        title_type = pick(TITLE_TYPES, rng)
        is_adult = 1 if chance(0.05, rng) else 0
        start_year = 1900 + below(125, rng)

        end_year = None
        if "Series" in title_type and rng.next() > 0.3:
            end_year = start_year + below(15, rng)

        runtime = _runtime_minutes(title_type, rng)

        num_words = below(4, rng) + 1
        primary_title = " ".join(pick(MOVIE_WORDS, rng) for _ in range(num_words))
        genres = _distinct_picks(GENRES, below(3, rng) + 1, rng)

        original_title = primary_title if rng.next() > 0.3 else f"{primary_title} (Original)"

        return TitleBasics(
            tconst=title_id(index),
            titleType=title_type,
            primaryTitle=primary_title,
            originalTitle=original_title,
            isAdult=is_adult,
            startYear=start_year,
            endYear=end_year,
            runtimeMinutes=runtime,
            genres=",".join(genres),
        )


class NameBasicsSynthesizer(RecordSynthesizer[NameBasics]):
    """Synthesizer for ``name_basics``.

    Only people born before 1970 can have a death year; the death draw is
    consumed for everyone so the sequence does not depend on birth year.
    """

    table = "name_basics"
    record_type = NameBasics
    references = ("title_basics",)

    def identifier(self, record: NameBasics) -> str:
        return record.nconst

    def synthesize(self, index: int, rng: Mulberry32, pools: IdentifierPools) -> NameBasics:
        first_name = pick(FIRST_NAMES, rng)
        last_name = pick(LAST_NAMES, rng)
        birth_year = 1920 + below(85, rng)

        death_year = None
        if chance(0.2, rng) and birth_year < 1970:
            death_year = birth_year + below(80, rng) + 20

        professions = _distinct_picks(PROFESSIONS, below(3, rng) + 1, rng)

        known_for_count = below(5, rng)
        known_for = [self.reference("title_basics", rng, pools) for _ in range(known_for_count)]

        return NameBasics(
            nconst=name_id(index),
            primaryName=f"{first_name} {last_name}",
            birthYear=birth_year,
            deathYear=death_year,
            primaryProfession=",".join(professions),
            knownForTitles=",".join(known_for),
        )


class TitleRatingSynthesizer(RecordSynthesizer[TitleRating]):
    """Synthesizer for ``title_ratings``.

    Titles are drawn with replacement, so a title may be rated more than
    once at large sizes.
    """

    table = "title_ratings"
    record_type = TitleRating
    references = ("title_basics",)

    def identifier(self, record: TitleRating) -> str:
        return record.tconst

    def synthesize(self, index: int, rng: Mulberry32, pools: IdentifierPools) -> TitleRating:
        tconst = self.reference("title_basics", rng, pools)
        rating = bell_curve(RATING_MEAN, RATING_STDDEV, rng, low=1.0, high=10.0)
        votes = long_tail(VOTE_TIER_THRESHOLDS, VOTE_TIER_RANGES, rng)
        return TitleRating(
            tconst=tconst,
            averageRating=round_half_away(rating, 1),
            numVotes=votes,
        )
