"""Shared HTML components and `<!-- @include name -->` page composition."""

import logging
import pathlib
import re
from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

INCLUDE_RE = re.compile(r'<!--\s*@include\s+([\w/-]+)\s*-->')

DEFAULT_COMPONENTS = ('navigation', 'footer', 'project-card')
BLOG_COMPONENTS_DIR = 'blog'
ROOT_PAGES = ('index.html', 'about.html', 'contact.html')


def load_components(
    components_dir: pathlib.Path,
    names: Iterable[str] = DEFAULT_COMPONENTS,
) -> dict[str, str]:
    """Load the named components plus every blog/*.html component.

    Missing files and a missing blog directory are skipped.
    """
    components: dict[str, str] = {}
    for name in names:
        path = components_dir / f'{name}.html'
        if path.is_file():
            components[name] = path.read_text(encoding='utf-8')
            logger.debug('Component loaded: %s', name)

    blog_dir = components_dir / BLOG_COMPONENTS_DIR
    if blog_dir.is_dir():
        for path in sorted(blog_dir.glob('*.html')):
            name = f'{BLOG_COMPONENTS_DIR}/{path.stem}'
            components[name] = path.read_text(encoding='utf-8')
            logger.debug('Component loaded: %s', name)

    logger.info('Loaded %d components', len(components))
    return components


def compose_page(text: str, components: Mapping[str, str], page_name: str = '') -> str:
    """Replace include markers with component text.

    Unknown components leave their marker in place. Markers inside inserted
    components are not expanded.
    """

    def repl(match: re.Match[str]) -> str:
        name = match.group(1)
        component = components.get(name)
        if component is None:
            logger.warning('Component not found: %s (in %s)', name, page_name or '<page>')
            return match.group(0)
        logger.debug('Including %s in %s', name, page_name or '<page>')
        return component

    return INCLUDE_RE.sub(repl, text)


def compose_file(
    source: pathlib.Path,
    dest: pathlib.Path,
    components: Mapping[str, str],
    page_name: str,
) -> pathlib.Path:
    """Compose one HTML file and write it to dest."""
    composed = compose_page(source.read_text(encoding='utf-8'), components, page_name)
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(composed, encoding='utf-8')
    logger.info('%s', page_name)
    return dest


def build_tree(
    pages_dir: pathlib.Path,
    output_dir: pathlib.Path,
    components: Mapping[str, str],
    relative_dir: str = 'pages',
) -> list[pathlib.Path]:
    """Compose every .html file under pages_dir into output_dir/relative_dir.

    The directory structure is mirrored; non-HTML files are left alone.
    """
    written: list[pathlib.Path] = []
    if not pages_dir.is_dir():
        logger.debug('No pages directory at %s', pages_dir)
        return written

    for item in sorted(pages_dir.iterdir()):
        rel = f'{relative_dir}/{item.name}' if relative_dir else item.name
        if item.is_dir():
            written.extend(build_tree(item, output_dir, components, rel))
        elif item.suffix == '.html':
            written.append(compose_file(item, output_dir / rel, components, rel))
    return written


def build_root_pages(
    root: pathlib.Path,
    output_dir: pathlib.Path,
    components: Mapping[str, str],
    names: Iterable[str] = ROOT_PAGES,
) -> list[pathlib.Path]:
    """Compose the top-level pages (index, about, contact) that exist under root."""
    written: list[pathlib.Path] = []
    for name in names:
        source = root / name
        if source.is_file():
            written.append(compose_file(source, output_dir / name, components, name))
    return written
