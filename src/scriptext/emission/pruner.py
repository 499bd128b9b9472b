"""Inlined asset pruner — removes assets whose content now lives inside the document."""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

import structlog

from scriptext.errors import PruneError
from scriptext.matching import matches
from scriptext.models.build import PruneResult
from scriptext.models.config import ScriptExtConfig


class InlinedAssetPruner:
    """
    Deletes inlined assets from the host's output asset map.

    Must only run at asset emission, after every tag referencing the pruned
    assets has been rewritten to an inline script; running earlier leaves
    dangling ``src`` references in documents that were already assembled.

    No-op when ``remove_inlined_assets`` is False or no ``inline`` test is set.

    Example::

        pruner = InlinedAssetPruner(config)
        result = pruner.prune(compilation.assets)
        print(f"Removed {result.pruned_count} inlined assets")
    """

    def __init__(
        self,
        config: ScriptExtConfig,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self._config = config
        self._logger = logger or structlog.get_logger("scriptext.pruner")

    @property
    def enabled(self) -> bool:
        return self._config.remove_inlined_assets and self._config.inline.enabled

    def prune(self, assets: MutableMapping[str, Any]) -> PruneResult:
        """
        Run a prune pass over ``assets``.

        Args:
            assets: The host's mutable output asset map, keyed by asset name.

        Returns:
            PruneResult listing the removed asset names.

        Raises:
            PruneError: If an entry cannot be removed. The map may already
                have lost the assets listed before the failing one.
        """
        if not self.enabled:
            return PruneResult()

        names = list(assets)
        pruned: list[str] = []
        for name in names:
            if not matches(name, self._config.inline):
                continue
            try:
                del assets[name]
            except (KeyError, TypeError, AttributeError) as exc:
                raise PruneError(name, str(exc) or type(exc).__name__) from exc
            self._logger.debug("asset_pruned", asset=name)
            pruned.append(name)

        if pruned:
            self._logger.info("prune_completed", pruned_count=len(pruned), scanned=len(names))
        return PruneResult(pruned=pruned, scanned=len(names))
