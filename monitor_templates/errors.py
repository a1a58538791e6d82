"""Typed errors raised by the template registry."""

from __future__ import annotations

from pathlib import Path


class TemplateRegistryError(Exception):
    """Base class for every error raised by the registry."""


class BootstrapError(TemplateRegistryError):
    """Base documents are missing or corrupt; the registry must not start serving."""


class AppNotFoundError(TemplateRegistryError, LookupError):
    """Lookup of an app that is not registered."""

    def __init__(self, app: str) -> None:
        super().__init__(f"The app {app!r} is not supported.")
        self.app = app


class ConflictError(TemplateRegistryError):
    """A custom template was created for an app that already exists."""

    def __init__(self, app: str) -> None:
        super().__init__(f"The app {app!r} already exists.")
        self.app = app


class InvalidTemplateError(TemplateRegistryError, ValueError):
    """A custom template is missing one of its identity fields."""


class UnknownHandlerError(TemplateRegistryError, LookupError):
    """A definition references a parameter or protocol type with no registered handler."""

    def __init__(self, kind: str, tag: str) -> None:
        super().__init__(f"No {kind} handler registered for type {tag!r}.")
        self.kind = kind
        self.tag = tag


class PersistenceError(TemplateRegistryError):
    """Writing a document failed after the in-memory registry was updated.

    The accepted edit stays visible to readers; call ``persist`` again to retry.
    """

    def __init__(
        self,
        app: str,
        reason: str,
        path: Path | None = None,
        written: list[Path] | None = None,
    ) -> None:
        super().__init__(f"Failed to save documents for app {app!r}: {reason}")
        self.app = app
        self.path = path
        self.written = written or []
