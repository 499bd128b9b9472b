"""Tests for InlinedAssetPruner."""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from types import MappingProxyType
from typing import Any

import pytest

from scriptext.emission.pruner import InlinedAssetPruner
from scriptext.errors import PruneError
from scriptext.models.config import ScriptExtConfig
from tests.conftest import asset_map


class _UndeletableAssets(MutableMapping[str, Any]):
    """Asset map whose entries cannot be removed."""

    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        raise KeyError(f"{key} is locked")

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


class TestInlinedAssetPruner:
    def test_removes_inlined_assets(self) -> None:
        """Assets matching the inline test are deleted from the map."""
        assets = asset_map(runtime_js="rt", app_js="app", runtime_css="css")
        pruner = InlinedAssetPruner(ScriptExtConfig(inline="runtime.js"))
        result = pruner.prune(assets)
        assert result.pruned == ["runtime.js"]
        assert result.scanned == 3
        assert set(assets) == {"app.js", "runtime.css"}

    def test_noop_when_removal_disabled(self) -> None:
        """With removeInlinedAssets off, every asset survives."""
        assets = asset_map(runtime_js="rt", app_js="app")
        before = dict(assets)
        config = ScriptExtConfig.from_options({"inline": "*.js", "removeInlinedAssets": False})
        result = InlinedAssetPruner(config).prune(assets)
        assert result.pruned_count == 0
        assert assets == before

    def test_noop_without_inline_test(self, config) -> None:
        assets = asset_map(app_js="app")
        pruner = InlinedAssetPruner(config)
        assert not pruner.enabled
        assert pruner.prune(assets).pruned == []
        assert "app.js" in assets

    def test_failure_raises_prune_error(self) -> None:
        """A failed deletion is raised, never swallowed."""
        assets = _UndeletableAssets(dict(asset_map(runtime_js="rt")))
        pruner = InlinedAssetPruner(ScriptExtConfig(inline="runtime"))
        with pytest.raises(PruneError) as exc_info:
            pruner.prune(assets)
        assert exc_info.value.asset_name == "runtime.js"

    def test_read_only_map_raises_prune_error(self) -> None:
        assets = MappingProxyType(dict(asset_map(runtime_js="rt")))
        pruner = InlinedAssetPruner(ScriptExtConfig(inline="runtime"))
        with pytest.raises(PruneError):
            pruner.prune(assets)  # type: ignore[arg-type]
