"""Exception types raised by vaultgraph."""

from __future__ import annotations


class VaultGraphError(Exception):
    """Base class for every error raised by this package."""


class FilterError(VaultGraphError, ValueError):
    """A filter tree is structurally invalid (unknown or mixed conjunctions)."""


class BaseFileError(VaultGraphError, ValueError):
    """A ``.base`` file failed validation.

    ``source`` names the file (or ``None`` for in-memory content) and
    ``field`` the offending location, e.g. ``views[2].type``.
    """

    def __init__(self, message: str, *, source: str | None = None, field: str | None = None) -> None:
        self.source = source
        self.field = field
        prefix = ""
        if source:
            prefix += f"{source}: "
        if field:
            prefix += f"{field}: "
        super().__init__(f"{prefix}{message}")
        self.message = message
