"""View-state ownership for the home page: initial load and search."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Protocol

from ..models import CATEGORIES, LIST_KEYS, CatalogEntry, CatalogItem, Category
from .catalog_client import FetchError, FetchResult

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    """The subset of :class:`CatalogClient` the controller depends on."""

    async def fetch_popular(self, category: Category, page: int = 1) -> FetchResult: ...

    async def search(self, query: str, page: int = 1) -> FetchResult: ...


class LoadPhase(str, Enum):
    """Lifecycle of the initial load of the popular lists."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    PARTIALLY_FAILED = "partially_failed"


class SearchStatus(str, Enum):
    """Lifecycle of the most recently issued search."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class SearchState:
    """Snapshot of the search lifecycle; replaced wholesale on every transition."""

    query: str = ""
    status: SearchStatus = SearchStatus.IDLE
    results: tuple[CatalogItem, ...] = ()
    error: FetchError | None = None


def _empty_lists() -> dict[Category, tuple[CatalogEntry, ...]]:
    return {category: () for category in CATEGORIES}


@dataclass
class ViewState:
    """Everything the render layer needs, owned and mutated by the controller."""

    phase: LoadPhase = LoadPhase.IDLE
    lists: dict[Category, tuple[CatalogEntry, ...]] = field(default_factory=_empty_lists)
    featured: CatalogItem | None = None
    search: SearchState = field(default_factory=SearchState)
    load_errors: dict[Category, FetchError] = field(default_factory=dict)

    @property
    def loading(self) -> bool:
        """True until every initial request has settled."""

        return self.phase in (LoadPhase.IDLE, LoadPhase.LOADING)

    @property
    def load_error(self) -> FetchError | None:
        """First recorded load error in category order, if any."""

        for category in CATEGORIES:
            error = self.load_errors.get(category)
            if error is not None:
                return error
        return None


class CatalogController:
    """Coordinates catalog requests and keeps a single coherent :class:`ViewState`.

    The initial load issues the three popular-list requests concurrently and
    applies each result as soon as it arrives. The load leaves the loading
    phase only after all three have settled; a failed category degrades to an
    empty list with its error recorded. Searches run independently and obey
    last-issued-wins: a response for a search that has since been superseded
    is discarded.
    """

    def __init__(self, client: CatalogSource, *, page: int = 1):
        self._client = client
        self._page = page
        self._state = ViewState()
        self._load_lock = asyncio.Lock()
        self._load_task: asyncio.Task[ViewState] | None = None
        self._search_generation = 0
        self._search_task: asyncio.Task[SearchState] | None = None

    @property
    def state(self) -> ViewState:
        return self._state

    def start(self) -> asyncio.Task[ViewState]:
        """Schedule the initial load in the background and return its task."""

        if self._load_task is None or self._load_task.done():
            self._load_task = asyncio.create_task(self.load())
        return self._load_task

    async def stop(self) -> None:
        """Cancel outstanding background work."""

        for task in (self._load_task, self._search_task):
            if task is None or task.done():
                continue
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        self._load_task = None
        self._search_task = None

    async def load(self) -> ViewState:
        """Run the initial load once; later calls return the existing state."""

        async with self._load_lock:
            if self._state.phase is LoadPhase.IDLE:
                await self._run_initial_load()
        return self._state

    async def reload(self) -> ViewState:
        """Discard the current state and run the initial load from scratch."""

        async with self._load_lock:
            logger.info("Reloading catalog view state")
            self._search_generation += 1
            if self._search_task is not None and not self._search_task.done():
                self._search_task.cancel()
            self._state = ViewState()
            await self._run_initial_load()
        return self._state

    async def _run_initial_load(self) -> None:
        state = self._state
        state.phase = LoadPhase.LOADING
        logger.info("Loading popular catalog lists")

        try:
            await asyncio.gather(
                *(self._load_category(state, category) for category in CATEGORIES)
            )
        except asyncio.CancelledError:
            logger.info("Catalog load cancelled; view state reset to idle")
            state.phase = LoadPhase.IDLE
            state.lists = _empty_lists()
            state.featured = None
            state.load_errors.clear()
            raise

        state.phase = LoadPhase.PARTIALLY_FAILED if state.load_errors else LoadPhase.READY
        logger.info(
            "Catalog load finished (%s): %s",
            state.phase.value,
            ", ".join(f"{LIST_KEYS[key]}={len(items)}" for key, items in state.lists.items()),
        )

    async def _load_category(self, state: ViewState, category: Category) -> None:
        try:
            result = await self._client.fetch_popular(category, self._page)
        except Exception as exc:  # pragma: no cover - client already normalises errors
            logger.exception("Unexpected failure loading %s", category)
            result = FetchResult(error=FetchError.network(exc))
        self._apply_category(state, category, result)

    @staticmethod
    def _apply_category(state: ViewState, category: Category, result: FetchResult) -> None:
        if result.error is not None:
            logger.warning(
                "Popular %s unavailable (%s); showing an empty list",
                category,
                result.error.kind,
            )
            state.lists[category] = ()
            state.load_errors[category] = result.error
            return

        state.lists[category] = result.items
        if category == "movies" and state.featured is None and result.items:
            first = result.items[0]
            if isinstance(first, CatalogItem):
                state.featured = first

    async def search(self, query: str | None) -> SearchState:
        """Run a title search; blank queries are ignored without a request."""

        normalized = (query or "").strip()
        if not normalized:
            logger.debug("Ignoring empty search query")
            return self._state.search

        generation, state = self._begin_search(normalized)
        return await self._finish_search(normalized, generation, state)

    def submit_search(self, query: str | None) -> asyncio.Task[SearchState] | None:
        """Schedule a search in the background, cancelling a pending one.

        The search state is ``pending`` for the new query by the time this
        returns. Returns ``None`` for blank queries, which are ignored.
        """

        normalized = (query or "").strip()
        if not normalized:
            logger.debug("Ignoring empty search query")
            return None
        previous = self._search_task
        if previous is not None and not previous.done():
            previous.cancel()
        generation, state = self._begin_search(normalized)
        self._search_task = asyncio.create_task(
            self._finish_search(normalized, generation, state)
        )
        return self._search_task

    def _begin_search(self, query: str) -> tuple[int, ViewState]:
        """Supersede earlier searches and mark ``query`` as pending."""

        self._search_generation += 1
        state = self._state
        state.search = replace(
            state.search, query=query, status=SearchStatus.PENDING, error=None
        )
        return self._search_generation, state

    async def _finish_search(
        self, query: str, generation: int, state: ViewState
    ) -> SearchState:
        try:
            result = await self._client.search(query, self._page)
        except Exception as exc:  # pragma: no cover - client already normalises errors
            logger.exception("Unexpected failure searching for %r", query)
            result = FetchResult(error=FetchError.network(exc))

        if generation != self._search_generation or state is not self._state:
            logger.debug("Discarding superseded search response for %r", query)
            return self._state.search

        if result.error is not None:
            logger.warning("Search for %r failed (%s)", query, result.error.kind)
            state.search = SearchState(
                query=query, status=SearchStatus.FAILED, error=result.error
            )
        else:
            results = tuple(item for item in result.items if isinstance(item, CatalogItem))
            state.search = SearchState(
                query=query, status=SearchStatus.SUCCEEDED, results=results
            )
        return state.search
