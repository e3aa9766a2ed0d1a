"""Client for the popular and search endpoints of the catalog API."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Literal

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..models import CATEGORIES, CatalogEntry, CatalogItem, Category, PersonItem

logger = logging.getLogger(__name__)

FetchErrorKind = Literal["network", "http_status", "decode"]

EntryModel = type[CatalogItem] | type[PersonItem]

_CAUSE_LIMIT = 200


@dataclass(slots=True, frozen=True)
class FetchError:
    """Describes why a catalog request produced no usable payload."""

    kind: FetchErrorKind
    status_code: int | None = None
    cause: str | None = None

    @classmethod
    def network(cls, exc: BaseException) -> "FetchError":
        return cls(kind="network", cause=_describe_exception(exc))

    @classmethod
    def http_status(cls, status_code: int, body: str | None = None) -> "FetchError":
        cause = body[:_CAUSE_LIMIT] if body else None
        return cls(kind="http_status", status_code=status_code, cause=cause)

    @classmethod
    def decode(cls, cause: str) -> "FetchError":
        return cls(kind="decode", cause=cause)

    def describe(self) -> str:
        """Return a short message suitable for display."""

        if self.kind == "http_status":
            return f"The catalog service answered with HTTP {self.status_code}"
        if self.kind == "decode":
            return "The catalog service returned an unreadable response"
        return "The catalog service could not be reached"

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {"kind": self.kind, "message": self.describe()}
        if self.status_code is not None:
            payload["statusCode"] = self.status_code
        return payload


@dataclass(slots=True)
class FetchResult:
    """Outcome of a single catalog request: ordered items or an error."""

    items: tuple[CatalogEntry, ...] = field(default_factory=tuple)
    error: FetchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _describe_exception(exc: BaseException) -> str:
    message = str(exc).strip()
    name = exc.__class__.__name__
    return f"{name}: {message}" if message else name


class CatalogClient:
    """Thin wrapper around the catalog API.

    Every public coroutine returns a :class:`FetchResult`; transport failures,
    non-2xx statuses and malformed bodies are reported through
    :class:`FetchError` instead of being raised.
    """

    _POPULAR_PATH = "/popular/{category}"
    _SEARCH_PATH = "/search/movies"

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client
        self._timeout = settings.request_timeout_seconds

    async def fetch_popular(self, category: Category, page: int = 1) -> FetchResult:
        """Fetch one page of popular movies, TV shows or people."""

        if category not in CATEGORIES:
            raise ValueError(f"Unknown catalog category: {category}")
        model: EntryModel = PersonItem if category == "people" else CatalogItem
        path = self._POPULAR_PATH.format(category=category)
        return await self._get_results(path, {"page": page}, model, label=category)

    async def search(self, query: str, page: int = 1) -> FetchResult:
        """Search movies by title."""

        return await self._get_results(
            self._SEARCH_PATH,
            {"query": query, "page": page},
            CatalogItem,
            label=f"search {query!r}",
        )

    async def _get_results(
        self,
        path: str,
        params: dict[str, Any],
        model: EntryModel,
        *,
        label: str,
    ) -> FetchResult:
        try:
            response = await asyncio.wait_for(
                self._client.get(path, params=params), timeout=self._timeout
            )
        except (httpx.HTTPError, asyncio.TimeoutError) as exc:
            logger.warning("Catalog request for %s failed: %s", label, exc.__class__.__name__)
            return FetchResult(error=FetchError.network(exc))

        if not 200 <= response.status_code < 300:
            logger.warning(
                "Catalog request for %s returned HTTP %s", label, response.status_code
            )
            return FetchResult(
                error=FetchError.http_status(response.status_code, response.text)
            )

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Unexpected non-JSON catalog response for %s", label)
            return FetchResult(error=FetchError.decode(_describe_exception(exc)))

        if not isinstance(payload, dict):
            logger.warning("Unexpected catalog response structure for %s", label)
            return FetchResult(error=FetchError.decode("response body is not an object"))

        raw_results = payload.get("results")
        if raw_results is None:
            return FetchResult(items=())
        if not isinstance(raw_results, list):
            logger.warning("Catalog response for %s has non-list results", label)
            return FetchResult(error=FetchError.decode("'results' is not a list"))

        return FetchResult(items=self._parse_entries(raw_results, model, label=label))

    def _parse_entries(
        self, raw_results: list[Any], model: EntryModel, *, label: str
    ) -> tuple[CatalogEntry, ...]:
        """Validate entries in server order, keeping the first entry per id."""

        items: list[CatalogEntry] = []
        seen: set[int] = set()
        for index, entry in enumerate(raw_results):
            if not isinstance(entry, dict):
                logger.warning("Skipping non-object entry %s in %s results", index, label)
                continue
            try:
                item = model.model_validate(entry)
            except ValidationError as exc:
                logger.warning(
                    "Skipping invalid entry %s in %s results: %s",
                    index,
                    label,
                    exc.error_count(),
                )
                continue
            if item.id in seen:
                logger.debug("Dropping duplicate id %s in %s results", item.id, label)
                continue
            seen.add(item.id)
            items.append(item.with_artwork(self._settings.image_base_url))
        return tuple(items)
