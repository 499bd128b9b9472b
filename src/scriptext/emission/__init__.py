"""scriptext emission-phase components."""

from scriptext.emission.pruner import InlinedAssetPruner

__all__ = ["InlinedAssetPruner"]
