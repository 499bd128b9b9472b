"""Exception hierarchy for scriptext."""

from __future__ import annotations

from typing import Any


class ScriptExtError(Exception):
    """Base class for all scriptext errors."""


class ConfigurationError(ScriptExtError):
    """Raised when plugin options cannot be normalised into a ScriptExtConfig."""

    def __init__(self, message: str, *, errors: list[Any] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class RewriteError(ScriptExtError):
    """Raised while rewriting tags, generating hints or applying custom attributes."""

    def __init__(self, message: str, *, index: int | None = None, tag: Any = None) -> None:
        if index is not None:
            message = f"{message} (tag #{index})"
        super().__init__(message)
        self.index = index
        self.tag = tag


class PruneError(ScriptExtError):
    """Raised when an inlined asset cannot be removed from the output asset map."""

    def __init__(self, asset_name: str, reason: str) -> None:
        super().__init__(f"Could not remove inlined asset {asset_name!r}: {reason}")
        self.asset_name = asset_name
        self.reason = reason


class PhaseError(ScriptExtError):
    """Raised when the host invokes the build phases out of order."""


class HostCompatibilityError(ScriptExtError):
    """Raised when the host exposes neither typed hooks nor legacy ``plugin()`` registration."""

    def __init__(self, host: object) -> None:
        super().__init__(
            f"{type(host).__name__} exposes neither a 'hooks' attribute nor a 'plugin()' method"
        )
        self.host = host
