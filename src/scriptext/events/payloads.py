"""Typed payload definitions for each ScriptExtEvent.

Usage example::

    from scriptext.events.bus import EventBus, ScriptExtEvent
    from scriptext.events.payloads import AssetsPrunedPayload

    def on_pruned(event: ScriptExtEvent, payload: AssetsPrunedPayload) -> None:
        print(f"Pruned {len(payload['pruned'])} of {payload['scanned']} assets")

    bus.subscribe(ScriptExtEvent.ASSETS_PRUNED, on_pruned)  # type: ignore[arg-type]
"""

from __future__ import annotations

from typing import TypedDict

# ── Tag alteration ────────────────────────────────────────────────────────────


class TagsAlteredPayload(TypedDict):
    """Payload for :attr:`ScriptExtEvent.TAGS_ALTERED`."""

    head_count: int
    """Number of tags in the returned head list, hints included."""
    body_count: int
    hints_added: int
    """Resource hints appended to the head by this call."""


class TagsFailedPayload(TypedDict):
    """Payload for :attr:`ScriptExtEvent.TAGS_FAILED`."""

    error: str
    """Human-readable error description."""
    error_type: str
    """Exception class name, e.g. ``"RewriteError"``."""


# ── Asset emission ────────────────────────────────────────────────────────────


class AssetsPrunedPayload(TypedDict):
    """Payload for :attr:`ScriptExtEvent.ASSETS_PRUNED`."""

    pruned: list[str]
    """Asset names removed from the output asset map."""
    scanned: int


class EmissionFailedPayload(TypedDict):
    """Payload for :attr:`ScriptExtEvent.EMISSION_FAILED`."""

    asset: str
    """The asset that could not be removed."""
    error: str
