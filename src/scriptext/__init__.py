"""
scriptext — loading-mode and resource-hint control for generated HTML script tags.

Primary entry point::

    from scriptext import ScriptExtPlugin

    plugin = ScriptExtPlugin({"inline": "runtime", "defaultAttribute": "defer"})
    plugin.apply(compiler)
"""

from scriptext.emission.pruner import InlinedAssetPruner
from scriptext.errors import (
    ConfigurationError,
    HostCompatibilityError,
    PhaseError,
    PruneError,
    RewriteError,
    ScriptExtError,
)
from scriptext.events.bus import EventBus, ScriptExtEvent
from scriptext.hooks import (
    LegacyHookRegistrar,
    TypedHookRegistrar,
    select_registrar,
)
from scriptext.matching import first_match, matches
from scriptext.models import (
    Asset,
    BuildContext,
    Chunk,
    CustomAttributeGroup,
    HintPolicy,
    PatternSet,
    PruneResult,
    ScriptExtConfig,
    Tag,
)
from scriptext.plugin import BuildPhase, ScriptExtPlugin
from scriptext.tags import CustomAttributeApplier, ElementRewriter, ResourceHintGenerator

__version__ = "0.1.0"

__all__ = [
    # Core
    "ScriptExtPlugin",
    "BuildPhase",
    # Config
    "ScriptExtConfig",
    "PatternSet",
    "HintPolicy",
    "CustomAttributeGroup",
    # Models
    "Asset",
    "Chunk",
    "Tag",
    "BuildContext",
    "PruneResult",
    # Components
    "ElementRewriter",
    "ResourceHintGenerator",
    "CustomAttributeApplier",
    "InlinedAssetPruner",
    "matches",
    "first_match",
    # Hooks
    "TypedHookRegistrar",
    "LegacyHookRegistrar",
    "select_registrar",
    # Events
    "EventBus",
    "ScriptExtEvent",
    # Errors
    "ScriptExtError",
    "ConfigurationError",
    "RewriteError",
    "PruneError",
    "PhaseError",
    "HostCompatibilityError",
]
