"""Shared fixtures and fake build hosts for scriptext tests."""

from __future__ import annotations

from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest

from scriptext.events.bus import EventBus, ScriptExtEvent
from scriptext.hooks import ALTER_ASSET_TAGS_EVENT
from scriptext.models.build import Asset, BuildContext, Chunk
from scriptext.models.config import ScriptExtConfig
from scriptext.models.tags import Tag

# ── Fake hosts ────────────────────────────────────────────────────────────────


class FakeHook:
    """Minimal tap/call hook. ``call`` returns the last tap's result."""

    def __init__(self) -> None:
        self.taps: list[tuple[str, Callable[..., Any]]] = []

    def tap(self, name: str, fn: Callable[..., Any]) -> None:
        self.taps.append((name, fn))

    def call(self, *args: Any) -> Any:
        result = None
        for _, fn in self.taps:
            result = fn(*args)
        return result


class LegacyHost:
    """Host exposing only ``plugin(event, fn)`` registration."""

    def __init__(self) -> None:
        self.handlers: dict[str, list[Callable[..., Any]]] = {}

    def plugin(self, event: str, fn: Callable[..., Any]) -> None:
        self.handlers.setdefault(event, []).append(fn)

    def trigger(self, event: str, *args: Any) -> None:
        for fn in self.handlers.get(event, []):
            fn(*args)


def make_compilation(
    *,
    legacy: bool = False,
    assets: dict[str, Asset] | None = None,
    chunks: list[Chunk] | None = None,
    public_path: str = "",
    errors: list[Any] | None = None,
) -> Any:
    """Build a fake compilation using either hook convention."""
    if legacy:
        compilation: Any = LegacyHost()
    else:
        compilation = SimpleNamespace(hooks=SimpleNamespace(alter_asset_tag_groups=FakeHook()))
    compilation.assets = assets if assets is not None else {}
    compilation.chunks = chunks if chunks is not None else []
    compilation.errors = errors if errors is not None else []
    compilation.options = {"output": {"publicPath": public_path}}
    return compilation


def make_compiler(*, legacy: bool = False) -> Any:
    if legacy:
        return LegacyHost()
    return SimpleNamespace(hooks=SimpleNamespace(compilation=FakeHook(), emit=FakeHook()))


def run_alter(compilation: Any, data: dict[str, Any]) -> Any:
    """Fire the compilation's tag-alteration hook the way the host would."""
    if isinstance(compilation, LegacyHost):
        received: list[tuple[Any, ...]] = []
        compilation.trigger(ALTER_ASSET_TAGS_EVENT, data, lambda *args: received.append(args))
        return received
    return compilation.hooks.alter_asset_tag_groups.call(data)


# ── Helpers ───────────────────────────────────────────────────────────────────


def script(src: str, **attributes: Any) -> Tag:
    return Tag.script(src, **attributes)


def asset_map(**contents: str) -> dict[str, Asset]:
    """``asset_map(a_js="...")`` -> ``{"a.js": Asset(...)}``; ``_`` before the extension becomes ``.``."""
    assets = {}
    for key, content in contents.items():
        stem, _, ext = key.rpartition("_")
        name = f"{stem}.{ext}"
        assets[name] = Asset(name=name, content=content.encode("utf-8"))
    return assets


# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def context() -> BuildContext:
    return BuildContext()


@pytest.fixture
def config() -> ScriptExtConfig:
    """Default config: every policy disabled, inlined assets removed."""
    return ScriptExtConfig()


@pytest.fixture
def event_bus() -> EventBus:
    """EventBus with a .collected list for asserting events."""
    bus = EventBus()
    collected: list[tuple[ScriptExtEvent, dict[str, Any]]] = []

    def _collect(event: ScriptExtEvent, payload: dict[str, Any]) -> None:
        collected.append((event, payload))

    bus.subscribe_all(_collect)
    bus.collected = collected  # type: ignore[attr-defined]
    return bus
