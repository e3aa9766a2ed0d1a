"""Pure mapping from controller view state to render-ready structures."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Literal, Sequence, TypeVar

from .models import LIST_KEYS, CatalogEntry, CatalogItem, Category, PersonItem
from .services.controller import SearchState, ViewState
from .utils import parse_release_date

NO_IMAGE = "no-image"
NOT_AVAILABLE = "N/A"
MAX_STARS = 5
SPOTLIGHT_INDEX = 10

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class SectionSpec:
    """A slice of one category list shown as a row or grid on the home page."""

    key: str
    category: Category
    start: int = 0
    stop: int | None = None
    title: str | None = None
    layout: Literal["row", "grid"] = "row"


HOME_SECTIONS: tuple[SectionSpec, ...] = (
    SectionSpec("popularMovies", "movies", 0, 10, title="Popular Movies"),
    SectionSpec("popularTvShows", "tv", 0, 10, title="Popular TV Shows"),
    SectionSpec("trending", "movies", 0, 12, title="Trending", layout="grid"),
    SectionSpec("popularPeople", "people", 0, 10, title="Popular People"),
    SectionSpec("moreMovies", "movies", 12, 18, layout="grid"),
)


def take(items: Sequence[T], count: int, *, start: int = 0) -> tuple[T, ...]:
    """Return up to ``count`` items from ``start`` without touching ``items``."""

    if count <= 0:
        return ()
    start = max(start, 0)
    return tuple(items[start : start + count])


def star_count(rating: float | None) -> int | None:
    """Map a 0-10 average to 0-5 filled stars; ``None`` when unrated."""

    if rating is None or math.isnan(rating):
        return None
    return min(max(math.floor(rating / 2), 0), MAX_STARS)


def format_rating(rating: float | None) -> str | None:
    if rating is None or math.isnan(rating):
        return None
    return f"{rating:.1f}"


def image_or_placeholder(url: str | None) -> str:
    return url if url else NO_IMAGE


def display_release_date(release_date: str | None) -> str:
    parsed = parse_release_date(release_date)
    return parsed.isoformat() if parsed else NOT_AVAILABLE


def release_year(release_date: str | None) -> int | str:
    parsed = parse_release_date(release_date)
    return parsed.year if parsed else NOT_AVAILABLE


def project_item(item: CatalogItem) -> dict[str, object]:
    """Return the card for a movie or TV show; rating keys only when rated."""

    card: dict[str, object] = {
        "id": item.id,
        "type": "title",
        "title": item.title,
        "poster": image_or_placeholder(item.poster_url),
        "releaseDate": display_release_date(item.release_date),
        "year": release_year(item.release_date),
    }
    stars = star_count(item.vote_average)
    if stars is not None:
        card["rating"] = format_rating(item.vote_average)
        card["stars"] = stars
    return card


def project_person(person: PersonItem) -> dict[str, object]:
    card: dict[str, object] = {
        "id": person.id,
        "type": "person",
        "name": person.name,
        "profile": image_or_placeholder(person.profile_url),
    }
    if person.known_for_department:
        card["department"] = person.known_for_department
    return card


def project_entry(entry: CatalogEntry) -> dict[str, object]:
    if isinstance(entry, PersonItem):
        return project_person(entry)
    return project_item(entry)


def project_featured(item: CatalogItem | None) -> dict[str, object] | None:
    """Return the hero banner for the featured item."""

    if item is None:
        return None
    hero: dict[str, object] = {
        "id": item.id,
        "title": item.title,
        "overview": item.overview or "",
        "backdrop": image_or_placeholder(item.backdrop_url),
        "poster": image_or_placeholder(item.poster_url),
        "releaseDate": display_release_date(item.release_date),
    }
    stars = star_count(item.vote_average)
    if stars is not None:
        hero["rating"] = format_rating(item.vote_average)
        hero["stars"] = stars
        hero["maxStars"] = MAX_STARS
    return hero


def project_spotlight(movies: Sequence[CatalogEntry]) -> dict[str, object] | None:
    """Return the spotlight card, shown only once the list runs past the top rows."""

    if len(movies) <= SPOTLIGHT_INDEX:
        return None
    entry = movies[SPOTLIGHT_INDEX]
    if not isinstance(entry, CatalogItem):
        return None
    card = project_item(entry)
    card["overview"] = entry.overview or ""
    return card


def project_section(state: ViewState, spec: SectionSpec) -> dict[str, object]:
    items = state.lists.get(spec.category, ())
    if spec.stop is None:
        window = tuple(items[max(spec.start, 0) :])
    else:
        window = take(items, spec.stop - spec.start, start=spec.start)
    return {
        "key": spec.key,
        "title": spec.title,
        "layout": spec.layout,
        "category": LIST_KEYS[spec.category],
        "items": [project_entry(entry) for entry in window],
    }


def project_search(search: SearchState) -> dict[str, object]:
    payload: dict[str, object] = {
        "query": search.query,
        "status": search.status.value,
        "results": [project_item(item) for item in search.results],
        "visible": bool(search.results),
        "title": f'Results for "{search.query}"' if search.query else None,
    }
    if search.error is not None:
        payload["error"] = search.error.to_payload()
    return payload


def project_view(
    state: ViewState, sections: Sequence[SectionSpec] = HOME_SECTIONS
) -> dict[str, Any]:
    """Project the whole view state for the render layer."""

    load_error = state.load_error
    return {
        "phase": state.phase.value,
        "loading": state.loading,
        "featured": project_featured(state.featured),
        "sections": [project_section(state, spec) for spec in sections],
        "spotlight": project_spotlight(state.lists.get("movies", ())),
        "search": project_search(state.search),
        "errors": {
            LIST_KEYS[category]: error.to_payload()
            for category, error in state.load_errors.items()
        },
        "loadError": load_error.to_payload() if load_error else None,
    }
