"""Blog post loading, rendering and the blog build step."""

import logging
import math
import os
import pathlib

import frontmatter  # type: ignore[reportMissingTypeStubs]
import markdown
import pydantic
import slugify as python_slugify
import yaml

import common.settings

from . import metadata
from .errors import ParseError
from .models import DEFAULT_CATEGORY, DEFAULT_COVER_IMAGE, Post

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200
MARKDOWN_EXTENSIONS = ['fenced_code', 'codehilite', 'tables', 'toc', 'nl2br']
MARKDOWN_EXTENSION_CONFIGS = {'codehilite': {'guess_lang': False}}


def slugify(text: str) -> str:
    """Lowercase, ASCII-only, hyphen separated identifier for a title."""
    return python_slugify.slugify(text, lowercase=True)


def calculate_read_time(text: str) -> str:
    """Estimated reading time at 200 words per minute, e.g. '5 min'."""
    words = len(text.split())
    minutes = max(1, math.ceil(words / WORDS_PER_MINUTE))
    return f'{minutes} min'


def render_markdown(text: str) -> str:
    """Render a markdown body to HTML with highlighted fenced code blocks."""
    return markdown.markdown(
        text,
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs=MARKDOWN_EXTENSION_CONFIGS,
    )


def list_markdown_files(posts_dir: pathlib.Path) -> list[pathlib.Path]:
    """Markdown files in posts_dir sorted by filename; empty if the dir is absent."""
    if not posts_dir.is_dir():
        logger.warning('Posts directory not found: %s', posts_dir)
        return []
    return sorted(
        (path for path in posts_dir.iterdir() if path.is_file() and path.suffix == '.md'),
        key=lambda path: path.name,
    )


class BlogPost:
    """A single markdown post on disk.

    Parsing and rendering are done lazily and cached; parse failures surface as
    ParseError.
    """

    md_path: pathlib.Path
    root: pathlib.Path
    _post: frontmatter.Post | None
    _metadata: Post | None
    _html: str | None

    def __init__(self, md_path: pathlib.Path, root: pathlib.Path | None = None) -> None:
        self.md_path = md_path
        self.root = root if root is not None else md_path.parent
        self._post = None
        self._metadata = None
        self._html = None

    @property
    def post(self) -> frontmatter.Post:
        """Returns frontmatter-parsed post, loading and caching if necessary."""
        if self._post is None:
            text = self.md_path.read_text(encoding='utf-8')
            try:
                self._post = frontmatter.loads(text)
            except (yaml.YAMLError, TypeError, ValueError) as e:
                raise ParseError(f'Invalid front-matter in {self.md_path.name}: {e}') from e
        return self._post

    @property
    def content(self) -> str:
        """Returns markdown-rendered HTML of the post body, rendering once."""
        if self._html is None:
            self._html = render_markdown(self.post.content)
        return self._html

    @property
    def relative_path(self) -> str:
        """Path of the markdown file relative to the site root."""
        return pathlib.Path(os.path.relpath(self.md_path, self.root)).as_posix()

    @property
    def metadata(self) -> Post:
        """Returns the post record with defaults applied."""
        if self._metadata is None:
            self._metadata = self._assemble()
        return self._metadata

    def _assemble(self) -> Post:
        fields = dict(self.post.metadata)
        title = fields.get('title')
        if not title:
            raise ParseError(f'Missing title in {self.md_path.name}')

        slug = str(fields.get('slug') or slugify(str(title)))
        if not slug:
            raise ParseError(f'Title {title!r} in {self.md_path.name} gives an empty slug')
        try:
            return Post(
                id=slug,
                title=title,
                slug=slug,
                description=fields.get('description') or '',
                author=fields.get('author') or common.settings.DEFAULT_AUTHOR,
                date=fields.get('date'),
                read_time=fields.get('readTime') or calculate_read_time(self.post.content),
                category=fields.get('category') or DEFAULT_CATEGORY,
                tags=fields.get('tags') or [],
                cover_image=fields.get('coverImage') or DEFAULT_COVER_IMAGE,
                published=fields.get('published') is not False,
                featured=fields.get('featured') or False,
                file_path=self.relative_path,
            )
        except pydantic.ValidationError as e:
            raise ParseError(f'Invalid front-matter in {self.md_path.name}: {e}') from e


def parse_and_assemble(md_path: pathlib.Path, root: pathlib.Path | None = None) -> BlogPost:
    """Parse and render one markdown file.

    Raises ParseError if the front-matter can't be parsed or is incomplete.
    """
    blog_post = BlogPost(md_path, root)
    # Force parsing and rendering now so errors belong to this file.
    _ = blog_post.metadata
    _ = blog_post.content
    return blog_post


def write_post_html(blog_post: BlogPost, output_dir: pathlib.Path) -> pathlib.Path:
    """Write the rendered post body to <output_dir>/posts/<slug>.html."""
    out_path = output_dir / 'posts' / f'{blog_post.metadata.slug}.html'
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(blog_post.content, encoding='utf-8')
    logger.info('Post written: %s', out_path.name)
    return out_path


def build_blog(
    posts_dir: pathlib.Path,
    index_path: pathlib.Path,
    output_dir: pathlib.Path,
    root: pathlib.Path | None = None,
) -> list[Post]:
    """Convert every markdown post to HTML and rewrite the metadata index.

    A file that fails to parse is logged and skipped. Errors writing the index
    (MetadataError) propagate.
    """
    md_files = list_markdown_files(posts_dir)
    if not md_files:
        logger.warning('No posts found in %s', posts_dir)
        return []

    logger.info('Found %d posts', len(md_files))
    posts: list[Post] = []
    seen_slugs: set[str] = set()
    for md_path in md_files:
        logger.debug('Processing %s', md_path.name)
        try:
            blog_post = parse_and_assemble(md_path, root)
            write_post_html(blog_post, output_dir)
        except (ParseError, OSError, ValueError) as e:
            logger.error('Failed to process %s: %s', md_path.name, e)
            continue

        post = blog_post.metadata
        if post.slug in seen_slugs:
            logger.warning(
                'Duplicate slug %r in %s overwrites an earlier post', post.slug, md_path.name
            )
        seen_slugs.add(post.slug)
        posts.append(post)

    metadata.write_index(index_path, posts)
    return posts
