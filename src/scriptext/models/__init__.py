"""scriptext data models."""

from scriptext.models.build import Asset, BuildContext, Chunk, PruneResult
from scriptext.models.config import (
    CustomAttributeGroup,
    HintPolicy,
    PatternSet,
    ScriptExtConfig,
)
from scriptext.models.tags import Tag, escape_inline_script, unescape_inline_script

__all__ = [
    "Asset",
    "BuildContext",
    "Chunk",
    "CustomAttributeGroup",
    "HintPolicy",
    "PatternSet",
    "PruneResult",
    "ScriptExtConfig",
    "Tag",
    "escape_inline_script",
    "unescape_inline_script",
]
