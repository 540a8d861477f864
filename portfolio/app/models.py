"""Pydantic models for posts and the metadata index."""

import datetime
from typing import Any

import pydantic

import common.settings

DEFAULT_CATEGORY = 'Sem categoria'
DEFAULT_COVER_IMAGE = '/src/assets/blog/covers/default.jpg'


class Post(pydantic.BaseModel):
    """A processed article as stored in the metadata index.

    Attribute names are snake_case; the JSON representation uses the camelCase
    aliases consumed by the site pages.
    """

    model_config = pydantic.ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    title: str
    slug: str
    description: str = ''
    author: str = common.settings.DEFAULT_AUTHOR
    date: str | None = None
    read_time: str = pydantic.Field(default='', alias='readTime')
    category: str = DEFAULT_CATEGORY
    tags: list[str] = pydantic.Field(default_factory=list)
    cover_image: str = pydantic.Field(default=DEFAULT_COVER_IMAGE, alias='coverImage')
    published: bool = True
    featured: bool = False
    file_path: str = pydantic.Field(default='', alias='filePath')

    @pydantic.field_validator('date', mode='before')
    @classmethod
    def _date_to_iso(cls, value: Any) -> Any:
        """YAML front-matter yields date objects; store them as YYYY-MM-DD."""
        if isinstance(value, datetime.datetime):
            return value.date().isoformat()
        if isinstance(value, datetime.date):
            return value.isoformat()
        return value

    @pydantic.field_validator('tags', mode='before')
    @classmethod
    def _split_tags(cls, value: Any) -> Any:
        """Accept a comma separated string as well as a list."""
        if value is None:
            return []
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(',') if tag.strip()]
        if isinstance(value, list):
            return [str(tag) for tag in value]
        return value

    @pydantic.field_validator('read_time', mode='before')
    @classmethod
    def _minutes_to_read_time(cls, value: Any) -> Any:
        """A bare number of minutes is formatted like a computed read time."""
        if isinstance(value, int) and not isinstance(value, bool):
            return f'{value} min'
        return value

    def to_json(self) -> dict[str, Any]:
        """Returns the JSON-ready camelCase representation."""
        return self.model_dump(by_alias=True, mode='json')


class Category(pydantic.BaseModel):
    """A hand-maintained blog category from the metadata index."""

    model_config = pydantic.ConfigDict(extra='allow')

    name: str
    slug: str
    color: str = ''
    description: str = ''


class IndexSummary(pydantic.BaseModel):
    """The `metadata` summary block of the index."""

    model_config = pydantic.ConfigDict(populate_by_name=True, extra='allow')

    last_updated: str | None = pydantic.Field(default=None, alias='lastUpdated')
    total_posts: int = pydantic.Field(default=0, alias='totalPosts')


class MetadataIndex(pydantic.BaseModel):
    """The whole metadata index (posts.json)."""

    model_config = pydantic.ConfigDict(extra='allow')

    posts: list[Post] = pydantic.Field(default_factory=list)
    categories: list[Category] = pydantic.Field(default_factory=list)
    tags: list[Any] = pydantic.Field(default_factory=list)
    metadata: IndexSummary | None = None

    @classmethod
    def empty(cls) -> 'MetadataIndex':
        """Returns the empty result set used when the index can't be fetched."""
        return cls(posts=[], categories=[], tags=[])

    def find_post(self, slug: str) -> Post | None:
        """Returns the post with the given slug, if any."""
        return next((p for p in self.posts if p.slug == slug), None)

    def find_category(self, slug: str) -> Category | None:
        """Returns the category with the given slug, if any."""
        return next((c for c in self.categories if c.slug == slug), None)
