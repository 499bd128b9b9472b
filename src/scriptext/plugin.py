"""ScriptExtPlugin — the build-pipeline entry point."""

from __future__ import annotations

from collections.abc import Callable, Mapping, MutableMapping
from enum import StrEnum
from functools import partial
from typing import Any

import structlog

from scriptext.emission.pruner import InlinedAssetPruner
from scriptext.errors import (
    HostCompatibilityError,
    PhaseError,
    PruneError,
    RewriteError,
    ScriptExtError,
)
from scriptext.events.bus import EventBus, ScriptExtEvent
from scriptext.hooks import select_registrar
from scriptext.models.build import BuildContext, PruneResult
from scriptext.models.config import ScriptExtConfig
from scriptext.models.tags import Tag
from scriptext.tags.attributes import CustomAttributeApplier
from scriptext.tags.elements import ElementRewriter
from scriptext.tags.hints import ResourceHintGenerator


class BuildPhase(StrEnum):
    """Per-build state: ``IDLE -> TAG_ALTERATION -> ASSET_EMISSION -> IDLE``."""

    IDLE = "idle"
    TAG_ALTERATION = "tag_alteration"
    ASSET_EMISSION = "asset_emission"


def _tag_key(data: Mapping[str, Any], modern: str, legacy: str) -> str:
    return modern if modern in data else legacy


class ScriptExtPlugin:
    """
    Adjusts how the scripts of generated HTML documents are loaded.

    Handles the two host phases of every build:

    - **tag alteration** (once per generated document): rewrites script tags
      (inline, sync, async, defer, module), appends preload/prefetch hints to
      the head, then applies custom attribute groups;
    - **asset emission** (once per build): removes inlined assets from the
      output asset map when ``removeInlinedAssets`` is set.

    Usage::

        plugin = ScriptExtPlugin({
            "inline": "runtime",
            "defer": ["vendor", re.compile(r"\\.chunk\\.js$")],
            "preload": {"test": "*.js", "chunks": "async"},
            "custom": [{"test": "vendor", "attribute": "crossorigin", "value": "anonymous"}],
        })
        plugin.apply(compiler)

    One instance serves one build pipeline at a time. Concurrent builds need
    separate instances; they may share the same :class:`ScriptExtConfig`.
    """

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        *,
        config: ScriptExtConfig | None = None,
        event_bus: EventBus | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        """
        Args:
            options: Raw option mapping (camelCase keys accepted).
            config: An already-normalised config. Mutually exclusive with ``options``.
            event_bus: Bus for lifecycle events. A private bus is created when omitted.
            logger: Logger shared by all components. Each component falls back
                to its own ``scriptext.*`` structlog logger when omitted.

        Raises:
            ConfigurationError: If ``options`` are malformed.
            ValueError: If both ``options`` and ``config`` are given.
        """
        if options is not None and config is not None:
            raise ValueError("Pass either options or config, not both.")
        self._config = config if config is not None else ScriptExtConfig.from_options(options)
        self._logger = logger or structlog.get_logger("scriptext.plugin")
        self._event_bus = event_bus or EventBus(logger=logger)
        self._rewriter = ElementRewriter(self._config, logger=logger)
        self._hints = ResourceHintGenerator(self._config, logger=logger)
        self._attributes = CustomAttributeApplier(self._config, logger=logger)
        self._pruner = InlinedAssetPruner(self._config, logger=logger)
        self._phase = BuildPhase.IDLE
        self._emitted = False
        self._alteration_failed = False

    @property
    def config(self) -> ScriptExtConfig:
        return self._config

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def phase(self) -> BuildPhase:
        return self._phase

    # ── Host wiring ───────────────────────────────────────────────────────────

    def apply(self, compiler: Any) -> None:
        """
        Register the plugin's callbacks on ``compiler``.

        Raises:
            HostCompatibilityError: If the compiler supports neither hook convention.
        """
        registrar = select_registrar(compiler)
        registrar.on_compilation(compiler, self.on_compilation)
        registrar.on_emit(compiler, self.emit)
        self._logger.debug("plugin_applied", registrar=type(registrar).__name__)

    def on_compilation(self, compilation: Any, *_: Any) -> None:
        """
        Hook into the compilation's tag alteration and start a new build.

        Compilations without the tag-alteration hook (child compilations of
        the templating host) leave the current build's state alone.
        """
        try:
            registrar = select_registrar(compilation)
        except HostCompatibilityError:
            self._logger.warning("alter_hook_unavailable", compilation=type(compilation).__name__)
            return
        handler = partial(self.alter_asset_tags, compilation)
        if not registrar.on_alter_asset_tags(compilation, handler):
            self._logger.debug("alter_hook_unavailable", compilation=type(compilation).__name__)
            return
        self.begin_build()

    def begin_build(self) -> None:
        """
        Reset per-build state.

        A compilation that starts while tag alteration has run but emission
        has not is nested in the current build; the state is kept so that a
        failed alteration still suppresses pruning.
        """
        if self._phase is BuildPhase.TAG_ALTERATION and not self._emitted:
            self._logger.debug("nested_compilation_ignored")
            return
        self._phase = BuildPhase.IDLE
        self._emitted = False
        self._alteration_failed = False

    # ── Tag alteration ────────────────────────────────────────────────────────

    def alter_asset_tags(
        self,
        compilation: Any,
        data: MutableMapping[str, Any],
        callback: Callable[..., Any] | None = None,
    ) -> MutableMapping[str, Any]:
        """
        Rewrite the head and body tag lists held in ``data``.

        ``data`` carries the lists under ``headTags``/``bodyTags`` or the older
        ``head``/``body`` keys. On success both keys are replaced with new
        lists, ``callback(None, data)`` is invoked when given, and ``data`` is
        returned. On failure ``data`` is left untouched and the error is
        reported through ``callback(err)`` or appended to
        ``compilation.errors``.

        Raises:
            PhaseError: If asset emission has already begun for this build.
        """
        if self._emitted or self._phase is BuildPhase.ASSET_EMISSION:
            raise PhaseError("Tag alteration requested after asset emission began")
        self._phase = BuildPhase.TAG_ALTERATION

        head_key = _tag_key(data, "headTags", "head")
        body_key = _tag_key(data, "bodyTags", "body")
        try:
            context = BuildContext.from_host(compilation, data)
            head, body, hints_added = self._alter(
                list(data.get(head_key) or []),
                list(data.get(body_key) or []),
                getattr(compilation, "assets", None) or {},
                getattr(compilation, "chunks", None) or [],
                context,
            )
        except Exception as exc:
            error = exc if isinstance(exc, ScriptExtError) else RewriteError(str(exc))
            if error is not exc:
                error.__cause__ = exc
            self._alteration_failed = True
            self._logger.error(
                "phase_failed",
                phase=str(BuildPhase.TAG_ALTERATION),
                error=str(error),
                error_type=type(error).__name__,
            )
            self._event_bus.publish(
                ScriptExtEvent.TAGS_FAILED,
                {"error": str(error), "error_type": type(error).__name__},
            )
            self._report(compilation, error, callback)
            return data

        data[head_key] = head
        data[body_key] = body
        self._event_bus.publish(
            ScriptExtEvent.TAGS_ALTERED,
            {"head_count": len(head), "body_count": len(body), "hints_added": hints_added},
        )
        if callback is not None:
            callback(None, data)
        return data

    def _alter(
        self,
        head: list[Tag],
        body: list[Tag],
        assets: Mapping[str, Any],
        chunks: list[Any],
        context: BuildContext,
    ) -> tuple[list[Tag], list[Tag], int]:
        self._logger.debug("tag_alteration_started", head=len(head), body=len(body))
        if self._config.rewrites_elements:
            head = self._rewriter.rewrite(head, assets, context)
            body = self._rewriter.rewrite(body, assets, context)

        hints_added = 0
        if self._config.adds_resource_hints:
            before = len(head)
            head = self._hints.generate(head, body, chunks, context)
            hints_added = len(head) - before

        if self._config.adds_custom_attributes:
            head = self._attributes.apply(head, context)
            body = self._attributes.apply(body, context)

        self._logger.debug("tag_alteration_completed", hints_added=hints_added)
        return head, body, hints_added

    # ── Asset emission ────────────────────────────────────────────────────────

    def emit(
        self, compilation: Any, callback: Callable[..., Any] | None = None
    ) -> PruneResult | None:
        """
        Remove inlined assets from ``compilation.assets``.

        Pruning is skipped when tag alteration failed in this build, since the
        documents may still reference the assets externally. A
        :class:`PruneError` is reported through ``callback(err)`` or
        ``compilation.errors``; with neither available it propagates.

        Raises:
            PhaseError: If called twice for the same build.
        """
        if self._emitted:
            raise PhaseError("Asset emission already ran for this build")
        self._phase = BuildPhase.ASSET_EMISSION
        self._emitted = True
        try:
            result = self._emit(compilation)
        except PruneError as exc:
            self._logger.error(
                "phase_failed",
                phase=str(BuildPhase.ASSET_EMISSION),
                asset=exc.asset_name,
                error=str(exc),
            )
            self._event_bus.publish(
                ScriptExtEvent.EMISSION_FAILED,
                {"asset": exc.asset_name, "error": str(exc)},
            )
            self._report(compilation, exc, callback)
            return None
        finally:
            self._phase = BuildPhase.IDLE

        if callback is not None:
            callback()
        return result

    def _emit(self, compilation: Any) -> PruneResult:
        if not self._pruner.enabled:
            return PruneResult()
        if self._alteration_failed:
            self._logger.warning("prune_skipped", reason="tag alteration failed in this build")
            return PruneResult()
        result = self._pruner.prune(compilation.assets)
        if result.pruned:
            self._event_bus.publish(
                ScriptExtEvent.ASSETS_PRUNED,
                {"pruned": list(result.pruned), "scanned": result.scanned},
            )
        return result

    def _report(
        self,
        compilation: Any,
        error: Exception,
        callback: Callable[..., Any] | None,
    ) -> None:
        """Deliver ``error`` to the host's callback or error collection; raise if it has neither."""
        if callback is not None:
            callback(error)
            return
        errors = getattr(compilation, "errors", None)
        if errors is None:
            raise error
        errors.append(error)
