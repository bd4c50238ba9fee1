from __future__ import annotations


class SubstringHashError(Exception):
    """Base class for everything this package raises on purpose."""


class ConstructionError(SubstringHashError, ValueError):
    """The table (or its alphabet) could not be built from the given arguments.

    Nothing is created when this is raised.
    """


class RangeError(SubstringHashError, IndexError):
    """Query bounds are outside the text. The table itself is untouched so just retry with better bounds."""
