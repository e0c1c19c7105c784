# src/purgecss/mapping/errors.py


class MappingError(Exception):
    """Base class for failures while building an HTML map."""


class MalformedDocument(MappingError):
    """The input could not be parsed as HTML at all."""


class EmptyDocument(MappingError):
    """The input parsed, but contains no top-level elements."""
