"""Pydantic models describing catalog API payloads."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .utils import build_image_url

Category = Literal["movies", "tv", "people"]

CATEGORIES: tuple[Category, ...] = ("movies", "tv", "people")

# Keys used by the render layer for each category list.
LIST_KEYS: dict[Category, str] = {
    "movies": "movies",
    "tv": "tvShows",
    "people": "people",
}


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class CatalogItem(BaseModel):
    """A movie or TV show entry returned by the catalog API."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: int
    title: str = Field(default="", validation_alias=AliasChoices("title", "name"))
    overview: str | None = None
    release_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("release_date", "releaseDate", "first_air_date"),
    )
    poster_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("poster_url", "posterUrl", "poster_path"),
    )
    backdrop_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("backdrop_url", "backdropUrl", "backdrop_path"),
    )
    vote_average: float | None = Field(
        default=None,
        validation_alias=AliasChoices("vote_average", "voteAverage"),
    )

    @field_validator("title", mode="before")
    @classmethod
    def _parse_title(cls, value: Any) -> str:
        return str(value).strip() if value is not None else ""

    @field_validator("overview", "release_date", "poster_url", "backdrop_url", mode="before")
    @classmethod
    def _parse_optional_text(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("vote_average", mode="before")
    @classmethod
    def _parse_vote_average(cls, value: Any) -> float | None:
        """Coerce the average to a float in ``[0, 10]`` or drop it."""

        if value is None or isinstance(value, bool):
            return None
        try:
            rating = float(value)
        except (TypeError, ValueError):
            return None
        if rating != rating:  # NaN
            return None
        return min(max(rating, 0.0), 10.0)

    def with_artwork(self, base_url: str) -> "CatalogItem":
        """Return a copy with poster and backdrop paths resolved to full URLs."""

        return self.model_copy(
            update={
                "poster_url": build_image_url(self.poster_url, base_url),
                "backdrop_url": build_image_url(self.backdrop_url, base_url),
            }
        )


class PersonItem(BaseModel):
    """A person entry returned by the popular people endpoint."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: int
    name: str = Field(default="", validation_alias=AliasChoices("name", "title"))
    profile_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("profile_url", "profileUrl", "profile_path"),
    )
    known_for_department: str | None = Field(
        default=None,
        validation_alias=AliasChoices("known_for_department", "knownForDepartment"),
    )

    @field_validator("name", mode="before")
    @classmethod
    def _parse_name(cls, value: Any) -> str:
        return str(value).strip() if value is not None else ""

    @field_validator("profile_url", "known_for_department", mode="before")
    @classmethod
    def _parse_optional_text(cls, value: Any) -> Any:
        return _blank_to_none(value)

    def with_artwork(self, base_url: str) -> "PersonItem":
        """Return a copy with the profile path resolved to a full URL."""

        return self.model_copy(
            update={"profile_url": build_image_url(self.profile_url, base_url)}
        )


CatalogEntry = CatalogItem | PersonItem
