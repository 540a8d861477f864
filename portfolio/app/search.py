"""Search and filtering for the blog listing."""

import asyncio
import logging
import unicodedata
from collections.abc import Callable
from typing import Any

import pydantic

from .models import Post

logger = logging.getLogger(__name__)

SEARCH_DELAY_SECONDS = 0.3


def normalize_text(text: str) -> str:
    """Lowercase and strip accents so 'Réact' and 'react' compare equal."""
    decomposed = unicodedata.normalize('NFD', text.lower())
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


class SearchFilters(pydantic.BaseModel):
    """Active filters; all of them must match."""

    query: str = ''
    category: str | None = None
    tag: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.query or self.category or self.tag)


def matches(post: Post, filters: SearchFilters) -> bool:
    """Whether post passes every active filter."""
    if filters.query:
        query = normalize_text(filters.query)
        haystacks = (
            normalize_text(post.title),
            normalize_text(post.description),
            ' '.join(normalize_text(tag) for tag in post.tags),
        )
        if not any(query in text for text in haystacks):
            return False
    if filters.category and post.category != filters.category:
        return False
    if filters.tag and filters.tag not in post.tags:
        return False
    return True


class Debouncer:
    """Runs callback once input has been quiet for `delay` seconds.

    Each call cancels the pending timer and starts a new one. Must be used from
    inside a running event loop.
    """

    def __init__(self, callback: Callable[..., Any], delay: float = SEARCH_DELAY_SECONDS) -> None:
        self.callback = callback
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def call(self, *args: Any) -> None:
        """(Re)schedule the callback with args."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, args)

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, args: tuple[Any, ...]) -> None:
        self._handle = None
        self.callback(*args)


class BlogSearch:
    """Filter state for one listing page.

    Every change re-filters the posts and hands the result to on_results.
    Free-text input through on_input is debounced.
    """

    def __init__(
        self,
        posts: list[Post],
        on_results: Callable[[list[Post]], Any] | None = None,
        delay: float = SEARCH_DELAY_SECONDS,
    ) -> None:
        self.posts = posts
        self.on_results = on_results
        self.filters = SearchFilters()
        self._debouncer = Debouncer(self.set_query, delay)

    def apply(self) -> list[Post]:
        """Filter the posts with the current filters and publish the result."""
        results = [post for post in self.posts if matches(post, self.filters)]
        logger.debug('Search: %d of %d posts', len(results), len(self.posts))
        if self.on_results is not None:
            self.on_results(results)
        return results

    def on_input(self, text: str) -> None:
        """Handle a keystroke in the search box."""
        self._debouncer.call(text)

    def set_query(self, query: str) -> list[Post]:
        self.filters.query = query
        return self.apply()

    def filter_by_category(self, category: str | None) -> list[Post]:
        self.filters.category = category
        return self.apply()

    def filter_by_tag(self, tag: str | None) -> list[Post]:
        self.filters.tag = tag
        return self.apply()

    def clear_query(self) -> list[Post]:
        self._debouncer.cancel()
        return self.set_query('')

    def clear_category(self) -> list[Post]:
        return self.filter_by_category(None)

    def clear_tag(self) -> list[Post]:
        return self.filter_by_tag(None)

    def clear_all(self) -> list[Post]:
        self._debouncer.cancel()
        self.filters = SearchFilters()
        return self.apply()

    def active_filters(self) -> SearchFilters:
        """A copy of the current filters."""
        return self.filters.model_copy()
