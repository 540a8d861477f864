"""Page loaders for the blog listing, category and post pages.

A loader is created for one page view with the data it needs and discarded
afterwards.
"""

import collections
import dataclasses
import logging

from .client import ContentResolver, ContentResult, MetadataClient
from .models import Category, MetadataIndex, Post

logger = logging.getLogger(__name__)

BLOG_INDEX_URL = '/pages/blog/index.html'


@dataclasses.dataclass(frozen=True)
class Redirect:
    """The page can't be shown; send the visitor to url instead."""

    url: str
    reason: str


@dataclasses.dataclass(frozen=True)
class CategoryCount:
    """A category and its number of published posts."""

    category: Category
    count: int


@dataclasses.dataclass(frozen=True)
class TagCount:
    """A tag and how many published posts use it."""

    tag: str
    count: int


def sort_by_date(posts: list[Post]) -> list[Post]:
    """Newest first. Posts without a date go last."""
    return sorted(posts, key=lambda p: p.date or '', reverse=True)


class BlogLoader:
    """Data for the blog listing page and its sidebar."""

    def __init__(self, index: MetadataIndex) -> None:
        self.all_posts = index.posts
        self.categories = index.categories
        self.tags = index.tags

    @classmethod
    async def load(cls, client: MetadataClient) -> 'BlogLoader':
        """Fetch the index and build a loader for it."""
        return cls(await client.fetch_metadata())

    def published_posts(self) -> list[Post]:
        """Published posts, newest first."""
        return sort_by_date([p for p in self.all_posts if p.published])

    def category_counts(self) -> list[CategoryCount]:
        """Number of published posts per category, in index order."""
        return [
            CategoryCount(
                category=category,
                count=sum(1 for p in self.all_posts if p.published and p.category == category.name),
            )
            for category in self.categories
        ]

    def top_tags(self, limit: int = 10) -> list[TagCount]:
        """Most used tags among published posts; ties keep first-seen order."""
        counter: collections.Counter[str] = collections.Counter()
        for post in self.all_posts:
            if post.published:
                counter.update(post.tags)
        return [TagCount(tag=tag, count=count) for tag, count in counter.most_common(limit)]

    def featured_posts(self, limit: int = 3) -> list[Post]:
        """Up to `limit` published featured posts, in index order."""
        return [p for p in self.all_posts if p.published and p.featured][:limit]


@dataclasses.dataclass(frozen=True)
class CategoryPage:
    """A category with its published posts, newest first."""

    category: Category
    posts: list[Post]


class CategoryLoader:
    """Data for a single category page."""

    def __init__(self, client: MetadataClient) -> None:
        self.client = client

    async def load(self, category_slug: str | None) -> CategoryPage | Redirect:
        """Resolve the category from its slug; redirect if missing or unknown."""
        if not category_slug:
            return Redirect(url=BLOG_INDEX_URL, reason='No category given')

        index = await self.client.fetch_metadata()
        category = index.find_category(category_slug)
        if category is None:
            logger.warning('Category not found: %s', category_slug)
            return Redirect(url=BLOG_INDEX_URL, reason='Category not found')

        posts = sort_by_date(
            [p for p in index.posts if p.published and p.category == category.name]
        )
        logger.info('Category loaded: %s (%d posts)', category.name, len(posts))
        return CategoryPage(category=category, posts=posts)


@dataclasses.dataclass(frozen=True)
class PostPage:
    """A post and the outcome of fetching its body."""

    post: Post
    content: ContentResult


class PostLoader:
    """Data for a single post page: its metadata and rendered body."""

    def __init__(self, client: MetadataClient, resolver: ContentResolver) -> None:
        self.client = client
        self.resolver = resolver

    async def load(self, slug: str | None) -> PostPage | Redirect:
        """Look the post up by slug; redirect if missing or unpublished."""
        if not slug:
            logger.warning('No slug given')
            return Redirect(url=BLOG_INDEX_URL, reason='No post given')

        index = await self.client.fetch_metadata()
        post = index.find_post(slug)
        if post is None:
            return Redirect(url=BLOG_INDEX_URL, reason='Post not found')
        if not post.published:
            return Redirect(url=BLOG_INDEX_URL, reason='Post not published')

        content = await self.resolver.resolve(slug)
        return PostPage(post=post, content=content)
