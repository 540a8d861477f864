"""Copying static directories into the output tree, and output statistics."""

import logging
import pathlib
import shutil

import pydantic

logger = logging.getLogger(__name__)


class BuildStats(pydantic.BaseModel):
    """File counts and size of a built output directory."""

    html_files: int = 0
    css_files: int = 0
    js_files: int = 0
    total_bytes: int = 0

    @property
    def total_mb(self) -> str:
        """Total size in megabytes with two decimals."""
        return f'{self.total_bytes / (1024 * 1024):.2f}'


def clean_dir(path: pathlib.Path) -> None:
    """Remove path if it exists and recreate it empty."""
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)


def copy_file(source: pathlib.Path, dest: pathlib.Path) -> pathlib.Path:
    """Copy a single file, creating parent directories."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, dest)
    return dest


def copy_tree(source: pathlib.Path, dest: pathlib.Path) -> list[pathlib.Path]:
    """Mirror source into dest, overwriting existing files.

    A missing source directory is skipped. Returns the copied files.
    """
    if not source.is_dir():
        logger.info('Skipping %s (not found)', source)
        return []

    dest.mkdir(parents=True, exist_ok=True)
    copied: list[pathlib.Path] = []
    for item in sorted(source.iterdir()):
        target = dest / item.name
        if item.is_dir():
            copied.extend(copy_tree(item, target))
        else:
            copied.append(copy_file(item, target))
            logger.debug('Copied %s', target)
    return copied


def collect_stats(path: pathlib.Path) -> BuildStats:
    """Count HTML/CSS/JS files and total bytes under path."""
    stats = BuildStats()
    if not path.is_dir():
        return stats
    for item in path.rglob('*'):
        if not item.is_file():
            continue
        stats.total_bytes += item.stat().st_size
        if item.suffix == '.html':
            stats.html_files += 1
        elif item.suffix == '.css':
            stats.css_files += 1
        elif item.suffix == '.js':
            stats.js_files += 1
    return stats
