"""Reading and rewriting the JSON metadata index (posts.json)."""

import datetime
import json
import logging
import pathlib
from collections.abc import Sequence
from typing import Any

import pydantic

from .errors import MetadataError
from .models import MetadataIndex, Post

logger = logging.getLogger(__name__)


def read_index(index_path: pathlib.Path) -> dict[str, Any]:
    """Read the raw index document.

    Raises MetadataError if the file is missing or not UTF-8, isn't valid
    JSON, or has no `metadata` object.
    """
    try:
        text = index_path.read_text(encoding='utf-8')
    except FileNotFoundError as e:
        raise MetadataError(f'Metadata index not found: {index_path}') from e
    except OSError as e:
        raise MetadataError(f'Cannot read metadata index {index_path}: {e}') from e
    except UnicodeDecodeError as e:
        raise MetadataError(f'Metadata index {index_path} is not UTF-8: {e}') from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MetadataError(f'Malformed metadata index {index_path}: {e}') from e
    if not isinstance(data, dict) or not isinstance(data.get('metadata'), dict):
        raise MetadataError(f'Metadata index {index_path} has no "metadata" object')
    return data


def load_index(index_path: pathlib.Path) -> MetadataIndex:
    """Read and validate the index. Raises MetadataError on any failure."""
    data = read_index(index_path)
    try:
        return MetadataIndex.model_validate(data)
    except pydantic.ValidationError as e:
        raise MetadataError(f'Invalid metadata index {index_path}: {e}') from e


def write_index(index_path: pathlib.Path, posts: Sequence[Post]) -> dict[str, Any]:
    """Replace the index's posts and refresh its summary.

    Categories, tags and any other keys are kept as they are. The whole file is
    rewritten in place. Returns the document that was written.
    """
    data = read_index(index_path)

    data['posts'] = [post.to_json() for post in posts]
    data['metadata']['lastUpdated'] = datetime.date.today().isoformat()
    data['metadata']['totalPosts'] = sum(1 for post in posts if post.published)

    known_categories = {
        category.get('name')
        for category in data.get('categories') or []
        if isinstance(category, dict)
    }
    for post in posts:
        if post.category not in known_categories:
            logger.warning('Post %r uses unlisted category %r', post.slug, post.category)

    try:
        index_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding='utf-8')
    except OSError as e:
        raise MetadataError(f'Cannot write metadata index {index_path}: {e}') from e
    logger.info('posts.json updated: %d published posts', data['metadata']['totalPosts'])
    return data
