"""Full site build: pages, assets, blog, content, sitemap.

Run with `portfolio-build` (or `python -m portfolio.app.build`).
"""

import logging
import pathlib
import sys
import time

import click

import common.log
import common.settings

from . import assets, blog, components, sitemap
from .errors import BuildError

logger = logging.getLogger(__name__)

ASSET_DIRS = ('src/styles', 'src/scripts', 'src/assets')
STEPS = ('all', 'pages', 'blog', 'sitemap')


class SiteBuilder:
    """Builds the site under `root` into `output_dir`."""

    root: pathlib.Path
    output_dir: pathlib.Path
    components: dict[str, str]

    def __init__(self, root: pathlib.Path, output_dir: pathlib.Path | None = None) -> None:
        self.root = root
        self.output_dir = output_dir if output_dir is not None else root / 'dist'
        self.components = {}

    @property
    def components_dir(self) -> pathlib.Path:
        return self.root / 'src' / 'components'

    @property
    def pages_dir(self) -> pathlib.Path:
        return self.root / 'pages'

    @property
    def content_dir(self) -> pathlib.Path:
        return self.root / 'content'

    @property
    def posts_dir(self) -> pathlib.Path:
        return self.content_dir / 'posts'

    @property
    def index_path(self) -> pathlib.Path:
        return self.content_dir / 'metadata' / 'posts.json'

    def clean(self) -> None:
        logger.info('Cleaning %s', self.output_dir)
        assets.clean_dir(self.output_dir)

    def load_components(self) -> dict[str, str]:
        self.components = components.load_components(self.components_dir)
        return self.components

    def build_pages(self) -> list[pathlib.Path]:
        """Compose the root pages and everything under pages/."""
        written = components.build_root_pages(self.root, self.output_dir, self.components)
        written.extend(
            components.build_tree(self.pages_dir, self.output_dir, self.components)
        )
        return written

    def copy_assets(self) -> list[pathlib.Path]:
        copied: list[pathlib.Path] = []
        for rel in ASSET_DIRS:
            copied.extend(assets.copy_tree(self.root / rel, self.output_dir / rel))
        return copied

    def build_blog(self) -> bool:
        """Convert posts and refresh the index. Failures are logged, not raised."""
        try:
            blog.build_blog(
                self.posts_dir, self.index_path, self.output_dir / 'blog', self.root
            )
        except BuildError as e:
            logger.error('Blog build failed: %s', e)
            logger.warning('Continuing without the blog')
            return False
        except Exception:
            logger.exception('Blog build failed')
            logger.warning('Continuing without the blog')
            return False
        logger.info('Blog processed')
        return True

    def copy_content(self) -> list[pathlib.Path]:
        return assets.copy_tree(self.content_dir, self.output_dir / 'content')

    def generate_sitemap(self) -> bool:
        """Write sitemap.xml. Failures are logged, not raised."""
        try:
            sitemap.write_sitemap(self.index_path, self.output_dir / 'sitemap.xml')
        except BuildError as e:
            logger.error('Sitemap generation failed: %s', e)
            logger.warning('Continuing without a sitemap')
            return False
        except Exception:
            logger.exception('Sitemap generation failed')
            logger.warning('Continuing without a sitemap')
            return False
        return True

    def copy_robots_txt(self) -> pathlib.Path | None:
        source = self.root / 'robots.txt'
        if not source.is_file():
            return None
        return assets.copy_file(source, self.output_dir / 'robots.txt')

    def display_stats(self) -> assets.BuildStats:
        stats = assets.collect_stats(self.output_dir)
        logger.info('HTML pages: %d', stats.html_files)
        logger.info('CSS files: %d', stats.css_files)
        logger.info('JS files: %d', stats.js_files)
        logger.info('Total size: %s MB', stats.total_mb)
        return stats

    def build(self) -> assets.BuildStats:
        """Run every step in order."""
        start = time.monotonic()
        self.clean()
        self.load_components()
        self.build_pages()
        self.copy_assets()
        self.build_blog()
        self.copy_content()
        self.generate_sitemap()
        self.copy_robots_txt()
        stats = self.display_stats()
        logger.info('Build finished in %.2fs: %s', time.monotonic() - start, self.output_dir)
        return stats


@click.command()
@click.option(
    '--root',
    type=click.Path(file_okay=False, path_type=pathlib.Path),
    default=common.settings.SITE_ROOT,
    show_default=True,
    help='Site source directory.',
)
@click.option(
    '--output',
    type=click.Path(file_okay=False, path_type=pathlib.Path),
    default=None,
    help='Output directory (default: <root>/dist).',
)
@click.option(
    '--only',
    type=click.Choice(STEPS),
    default='all',
    show_default=True,
    help='Run a single step instead of the full build.',
)
@click.option('--verbose', '-v', is_flag=True, help='Log every file.')
def main(root: pathlib.Path, output: pathlib.Path | None, only: str, verbose: bool) -> None:
    """Build the portfolio site."""
    common.log.configure_build_logging(verbose)
    builder = SiteBuilder(root, output)
    try:
        if only == 'all':
            builder.build()
        elif only == 'pages':
            builder.load_components()
            builder.build_pages()
        elif only == 'blog':
            blog.build_blog(
                builder.posts_dir, builder.index_path, builder.output_dir / 'blog', root
            )
        elif only == 'sitemap':
            sitemap.write_sitemap(builder.index_path, builder.output_dir / 'sitemap.xml')
    except Exception as e:
        logger.exception('Build failed: %s', e)
        sys.exit(1)


if __name__ == '__main__':
    main()
