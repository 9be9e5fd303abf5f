"""IMDb-style reference data records.

Three tables modelled on the public IMDb TSV exports:
- TitleBasics: one title (movie, series, episode, ...)
- NameBasics: one person, with titles they are known for
- TitleRating: rating and vote count for a title

Multi-valued columns (genres, professions, known-for titles) are
comma-joined strings, as in the source exports.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from benchstage.schemas.types import Number

TCONST_PATTERN = r"^tt\d{7,}$"
NCONST_PATTERN = r"^nm\d{7,}$"


def title_id(index: int) -> str:
    """Return the tconst for the zero-based title index (``tt0000001`` first)."""
    return f"tt{index + 1:07d}"


def name_id(index: int) -> str:
    """Return the nconst for the zero-based person index (``nm0000001`` first)."""
    return f"nm{index + 1:07d}"


class TitleBasics(BaseModel):
    """A title entry.

    Attributes:
        tconst: Title identifier (tt + 7 digits)
        titleType: movie, tvSeries, tvEpisode, ...
        primaryTitle: Display title
        originalTitle: Title in the original language
        isAdult: 0 or 1
        startYear: Release year (or series start year)
        endYear: Series end year, None for everything else
        runtimeMinutes: Runtime, shaped by the title type
        genres: Up to three comma-joined genres
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    tconst: str = Field(..., pattern=TCONST_PATTERN)
    titleType: str
    primaryTitle: str = Field(..., min_length=1)
    originalTitle: str = Field(..., min_length=1)
    isAdult: int = Field(..., ge=0, le=1)
    startYear: int = Field(..., ge=1900)
    endYear: int | None = None
    runtimeMinutes: int = Field(..., gt=0)
    genres: str


class NameBasics(BaseModel):
    """A person entry.

    Attributes:
        nconst: Person identifier (nm + 7 digits)
        primaryName: Full name
        birthYear: Year of birth
        deathYear: Year of death, None when alive
        primaryProfession: Up to three comma-joined professions
        knownForTitles: Zero to four comma-joined tconst references
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    nconst: str = Field(..., pattern=NCONST_PATTERN)
    primaryName: str
    birthYear: int
    deathYear: int | None = None
    primaryProfession: str
    knownForTitles: str


class TitleRating(BaseModel):
    """Aggregate rating for a title."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    tconst: str = Field(..., pattern=TCONST_PATTERN)
    averageRating: Number = Field(..., ge=1.0, le=10.0)
    numVotes: int = Field(..., ge=5)
