"""Shared site settings read from environment variables."""

import os
import pathlib

REPO_DIR = pathlib.Path(__file__).resolve().parent.parent

SITE_URL: str = os.environ.get('SITE_URL', 'https://andrywruhan.dev')
SITE_ROOT: pathlib.Path = pathlib.Path(os.environ.get('SITE_ROOT', REPO_DIR / 'site'))
SITE_OUTPUT: pathlib.Path = pathlib.Path(
    os.environ.get('SITE_OUTPUT', SITE_ROOT / 'dist')
)
DEFAULT_AUTHOR: str = os.environ.get('DEFAULT_AUTHOR', 'Andryw Ruhan')
# Empty means the preview app fetches from itself in-process.
PREVIEW_BASE_URL: str = os.environ.get('PREVIEW_BASE_URL', '')
