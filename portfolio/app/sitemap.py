"""sitemap.xml generation from the metadata index."""

import logging
import pathlib
import urllib.parse

import jinja2
import pydantic

import common.settings

from . import metadata

logger = logging.getLogger(__name__)

TEMPLATES_DIR = pathlib.Path(__file__).resolve().parent / 'templates'
SITEMAP_TEMPLATE_FILE = 'sitemap.xml.jinja2'

BLOG_INDEX_URL = '/pages/blog/index.html'
POST_URL = '/pages/blog/post.html?slug={slug}'
CATEGORY_URL = '/pages/blog/category.html?category={slug}'


class SitemapEntry(pydantic.BaseModel):
    """One <url> element of the sitemap."""

    loc: str
    priority: float
    changefreq: str
    lastmod: str | None = None


STATIC_PAGES: list[tuple[str, float, str]] = [
    ('', 1.0, 'weekly'),
    (BLOG_INDEX_URL, 0.9, 'daily'),
    ('/about.html', 0.8, 'monthly'),
    ('/contact.html', 0.7, 'monthly'),
]


def sitemap_entries(
    index_path: pathlib.Path, base_url: str = common.settings.SITE_URL
) -> list[SitemapEntry]:
    """Static pages, then published posts, then categories, in index order.

    Raises MetadataError if the index can't be read.
    """
    index = metadata.load_index(index_path)
    base_url = base_url.rstrip('/')

    entries = [
        SitemapEntry(loc=f'{base_url}{url}', priority=priority, changefreq=changefreq)
        for url, priority, changefreq in STATIC_PAGES
    ]
    for post in index.posts:
        if not post.published:
            continue
        entries.append(
            SitemapEntry(
                loc=base_url + POST_URL.format(slug=urllib.parse.quote(post.slug)),
                priority=0.8,
                changefreq='weekly',
                lastmod=post.date,
            )
        )
    for category in index.categories:
        entries.append(
            SitemapEntry(
                loc=base_url + CATEGORY_URL.format(slug=urllib.parse.quote(category.slug)),
                priority=0.7,
                changefreq='weekly',
            )
        )
    return entries


def render_sitemap(entries: list[SitemapEntry]) -> str:
    """Render entries as a sitemap protocol XML document."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(TEMPLATES_DIR), autoescape=True
    )
    return env.get_template(SITEMAP_TEMPLATE_FILE).render(entries=entries) + '\n'


def build_sitemap(
    index_path: pathlib.Path, base_url: str = common.settings.SITE_URL
) -> str:
    """Build the sitemap XML for the site described by the index."""
    return render_sitemap(sitemap_entries(index_path, base_url))


def write_sitemap(
    index_path: pathlib.Path,
    output_file: pathlib.Path,
    base_url: str = common.settings.SITE_URL,
) -> int:
    """Write sitemap.xml and return the number of URLs in it."""
    entries = sitemap_entries(index_path, base_url)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(render_sitemap(entries), encoding='utf-8')
    logger.info('Sitemap generated: %d URLs', len(entries))
    return len(entries)
