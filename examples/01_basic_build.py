"""
Example 01: Basic Build
=======================

Demonstrates ScriptExtPlugin against a minimal in-process build host:
- Registering the plugin on a host with typed hooks
- Inlining a runtime script and deferring the application bundle
- Preloading scripts of initial and async chunks
- Adding a custom attribute to the vendor bundle
- Watching lifecycle events and the pruned asset map

Run:
    uv run python examples/01_basic_build.py
"""

import sys
from pathlib import Path
from types import SimpleNamespace

# Add project root to path when running directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class Hook:
    """Smallest possible typed hook: tap() registers, call() runs every tap."""

    def __init__(self) -> None:
        self._taps = []

    def tap(self, name, fn) -> None:
        self._taps.append(fn)

    def call(self, *args):
        result = None
        for fn in self._taps:
            result = fn(*args)
        return result


def main() -> None:
    from scriptext import Asset, Chunk, EventBus, ScriptExtPlugin, Tag

    print("=== scriptext Basic Build Example ===\n")

    bus = EventBus()
    bus.subscribe_all(lambda event, payload: print(f"  [event] {event}: {payload}"))

    plugin = ScriptExtPlugin(
        {
            "inline": "runtime",
            "defer": ["app", "vendor"],
            "preload": {"test": "*.js", "chunks": "all"},
            "custom": [{"test": "vendor", "attribute": "crossorigin", "value": "anonymous"}],
        },
        event_bus=bus,
    )

    compiler = SimpleNamespace(hooks=SimpleNamespace(compilation=Hook(), emit=Hook()))
    plugin.apply(compiler)

    compilation = SimpleNamespace(
        hooks=SimpleNamespace(alter_asset_tag_groups=Hook()),
        assets={
            name: Asset(name=name, content=content)
            for name, content in {
                "runtime.js": b"window.__rt = {};",
                "vendor.js": b"/* vendor */",
                "app.js": b"/* app */",
                "settings.js": b"/* lazily loaded */",
            }.items()
        },
        chunks=[
            Chunk(id="main", files=["runtime.js", "vendor.js", "app.js"]),
            Chunk(id="settings", files=["settings.js"], initial=False),
        ],
        errors=[],
        options={"output": {"publicPath": "/static/"}},
    )
    compiler.hooks.compilation.call(compilation)

    data = {
        "headTags": [Tag.script("/static/runtime.js")],
        "bodyTags": [Tag.script("/static/vendor.js"), Tag.script("/static/app.js")],
    }
    print("Altering asset tags:")
    compilation.hooks.alter_asset_tag_groups.call(data)

    print("\n<head>")
    for tag in data["headTags"]:
        print(f"  {tag.render()}")
    print("<body>")
    for tag in data["bodyTags"]:
        print(f"  {tag.render()}")

    print("\nEmitting:")
    compiler.hooks.emit.call(compilation)
    print(f"\nAssets written: {sorted(compilation.assets)}")
    if compilation.errors:
        print(f"Errors: {compilation.errors}")


if __name__ == "__main__":
    main()
