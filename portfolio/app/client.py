"""HTTP access to the published site: the metadata index and post bodies."""

import dataclasses
import logging
from collections.abc import Sequence

import httpx
import pydantic

from .models import MetadataIndex

logger = logging.getLogger(__name__)

METADATA_URL = '/content/metadata/posts.json'

# The post page lives at /pages/blog/, so its relative ../../dist/... candidate
# resolves to the first of these.
CONTENT_CANDIDATES = (
    '/dist/blog/posts/{slug}.html',
    '/blog/posts/{slug}.html',
)


class MetadataClient:
    """Fetches the metadata index over HTTP."""

    def __init__(self, http: httpx.AsyncClient, url: str = METADATA_URL) -> None:
        self.http = http
        self.url = url

    async def fetch_metadata(self) -> MetadataIndex:
        """Returns the index, or an empty one if it can't be fetched or parsed."""
        try:
            response = await self.http.get(self.url)
            response.raise_for_status()
            return MetadataIndex.model_validate(response.json())
        except (httpx.HTTPError, pydantic.ValidationError, ValueError) as e:
            logger.error('Failed to load metadata from %s: %s', self.url, e)
            return MetadataIndex.empty()


@dataclasses.dataclass(frozen=True)
class ContentFound:
    """A candidate URL returned the post body."""

    path: str
    html: str


@dataclasses.dataclass(frozen=True)
class ContentUnavailable:
    """Every candidate URL failed."""

    attempts: tuple[str, ...]
    reason: str


ContentResult = ContentFound | ContentUnavailable


class ContentResolver:
    """Tries candidate URLs for a post body in order, stopping at the first success."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        candidates: Sequence[str] = CONTENT_CANDIDATES,
    ) -> None:
        self.http = http
        self.candidates = tuple(candidates)

    async def resolve(self, slug: str) -> ContentResult:
        """Fetch the rendered HTML for slug."""
        attempts: list[str] = []
        reason = 'no candidate paths configured'
        for template in self.candidates:
            path = template.format(slug=slug)
            attempts.append(path)
            try:
                response = await self.http.get(path)
            except httpx.HTTPError as e:
                reason = f'{path}: {e}'
                logger.debug('Attempt failed: %s', reason)
                continue
            if response.is_success:
                logger.info('Post loaded from %s', path)
                return ContentFound(path=path, html=response.text)
            reason = f'{path}: HTTP {response.status_code}'
            logger.debug('Attempt failed: %s', reason)

        logger.error('Post %r not found at any path', slug)
        return ContentUnavailable(attempts=tuple(attempts), reason=reason)
