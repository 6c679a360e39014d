"""Exceptions raised while loading, filtering and rendering heritage sites."""

from __future__ import annotations


class HeritageMapError(Exception):
    """Base class for heritage map errors."""


class LoadError(HeritageMapError):
    """The site data could not be fetched or parsed."""

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class UnrecognizedSiteTypeError(LoadError):
    """A record's type is not one of Cultural, Natural or Mixed."""

    def __init__(self, value: object, index: int | None = None, source: str | None = None) -> None:
        location = f"feature {index}" if index is not None else "record"
        super().__init__(f"Unrecognized site type {value!r} in {location}", source=source)
        self.value = value
        self.index = index


class MissingPanelError(HeritageMapError):
    """One or more required display panels are absent from the rendered page."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing required panels: {', '.join(missing)}")
        self.missing = missing


class InvalidSelectionError(HeritageMapError):
    """A filter selection names a type outside the selector's values."""


class StateError(HeritageMapError):
    """An operation was attempted in the wrong load state."""
