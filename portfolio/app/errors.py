"""Exceptions raised by the site build."""


class BuildError(Exception):
    """Base class for build failures."""


class ParseError(BuildError):
    """A single content file could not be parsed into a post."""


class MetadataError(BuildError):
    """The metadata index is missing or malformed."""
