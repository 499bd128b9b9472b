"""scriptext event bus."""

from scriptext.events.bus import EventBus, Handler, ScriptExtEvent
from scriptext.events.payloads import (
    AssetsPrunedPayload,
    EmissionFailedPayload,
    TagsAlteredPayload,
    TagsFailedPayload,
)

__all__ = [
    "AssetsPrunedPayload",
    "EmissionFailedPayload",
    "EventBus",
    "Handler",
    "ScriptExtEvent",
    "TagsAlteredPayload",
    "TagsFailedPayload",
]
