"""
Host hook registration.

Build hosts expose one of two registration conventions:

- typed hooks: ``compiler.hooks.emit.tap(name, fn)``; tapped functions are
  called with the hook arguments and return their result;
- legacy events: ``compiler.plugin("emit", fn)``; functions additionally
  receive a completion ``callback``.

:func:`select_registrar` probes the host once and returns the matching
:class:`HookRegistrar`. The plugin's callbacks accept an optional trailing
``callback`` so the same callables serve both conventions.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from scriptext.errors import HostCompatibilityError

PLUGIN_NAME = "ScriptExtPlugin"

COMPILATION_EVENT = "compilation"
EMIT_EVENT = "emit"
ALTER_ASSET_TAGS_EVENT = "html-webpack-plugin-alter-asset-tags"

# Typed hook attribute names on ``compilation.hooks``, oldest first
_ALTER_ASSET_TAGS_HOOKS: tuple[str, ...] = (
    "html_webpack_plugin_alter_asset_tags",
    "alter_asset_tag_groups",
)


class HookRegistrar(Protocol):
    """Binds plugin callbacks to the host's compilation, emit and tag-alteration hooks."""

    def on_compilation(self, compiler: Any, handler: Callable[..., Any]) -> None: ...

    def on_emit(self, compiler: Any, handler: Callable[..., Any]) -> None: ...

    def on_alter_asset_tags(self, compilation: Any, handler: Callable[..., Any]) -> bool: ...


class TypedHookRegistrar:
    """Registers through ``host.hooks.<name>.tap(PLUGIN_NAME, fn)``."""

    def on_compilation(self, compiler: Any, handler: Callable[..., Any]) -> None:
        compiler.hooks.compilation.tap(PLUGIN_NAME, handler)

    def on_emit(self, compiler: Any, handler: Callable[..., Any]) -> None:
        compiler.hooks.emit.tap(PLUGIN_NAME, handler)

    def on_alter_asset_tags(self, compilation: Any, handler: Callable[..., Any]) -> bool:
        for name in _ALTER_ASSET_TAGS_HOOKS:
            hook = getattr(compilation.hooks, name, None)
            if hook is not None:
                hook.tap(PLUGIN_NAME, handler)
                return True
        return False


class LegacyHookRegistrar:
    """Registers through ``host.plugin(event, fn)``."""

    def on_compilation(self, compiler: Any, handler: Callable[..., Any]) -> None:
        compiler.plugin(COMPILATION_EVENT, handler)

    def on_emit(self, compiler: Any, handler: Callable[..., Any]) -> None:
        compiler.plugin(EMIT_EVENT, handler)

    def on_alter_asset_tags(self, compilation: Any, handler: Callable[..., Any]) -> bool:
        compilation.plugin(ALTER_ASSET_TAGS_EVENT, handler)
        return True


def select_registrar(host: Any) -> HookRegistrar:
    """
    Pick the registrar matching the host's capabilities.

    Raises:
        HostCompatibilityError: If ``host`` has neither ``hooks`` nor ``plugin()``.
    """
    if getattr(host, "hooks", None) is not None:
        return TypedHookRegistrar()
    if callable(getattr(host, "plugin", None)):
        return LegacyHookRegistrar()
    raise HostCompatibilityError(host)
