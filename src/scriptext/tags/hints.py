"""Resource-hint generation for initial and asynchronously-loaded chunks."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from scriptext.matching import matches
from scriptext.models.build import BuildContext, Chunk
from scriptext.models.config import HintPolicy, ScriptExtConfig
from scriptext.models.tags import Tag

HINT_RELATIONS: tuple[str, ...] = ("preload", "prefetch")

HintKey = tuple[str, str]
"""``(rel, asset name)``: at most one hint per key may appear in a head list."""


def _preload_destination(href: str) -> str:
    path = href.split("?", 1)[0]
    return "style" if path.endswith(".css") else "script"


def hint_keys(tags: Iterable[Tag], context: BuildContext) -> set[HintKey]:
    """
    Collect the keys of resource hints already present in ``tags``.

    Keys use the asset name rather than the raw href, so a hashed
    ``x.js?3f2a`` and a plain ``x.js`` count as the same asset.
    """
    keys: set[HintKey] = set()
    for tag in tags:
        if tag.tag_name == "link" and tag.rel in HINT_RELATIONS and tag.asset_ref:
            keys.add((tag.rel, context.script_name(tag.asset_ref)))
    return keys


class ResourceHintGenerator:
    """
    Derives ``<link rel="preload|prefetch">`` tags for scripts the document loads.

    Two producers share one ``seen`` set so that no asset gets two hints of
    the same relation per head list, whatever query string its href carries:

    1. :meth:`initial_hints` — for external scripts already present in the
       head or body, when the policy covers initial chunks.
    2. :meth:`async_hints` — for files of async chunks, when the policy
       covers async chunks. These are anticipatory: the files are not
       referenced by any tag yet.

    :meth:`generate` composes them in the fixed order
    ``head ++ initial(head) ++ initial(body) ++ async(chunks)``.
    """

    def __init__(
        self,
        config: ScriptExtConfig,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self._config = config
        self._logger = logger or structlog.get_logger("scriptext.hints")

    def _policies(self) -> list[tuple[str, HintPolicy]]:
        return [(rel, getattr(self._config, rel)) for rel in HINT_RELATIONS]

    def _hint(
        self, rel: str, href: str, context: BuildContext, seen: set[HintKey]
    ) -> Tag | None:
        key = (rel, context.script_name(href))
        if key in seen:
            self._logger.debug("hint_suppressed", rel=rel, href=href)
            return None
        seen.add(key)
        if rel == "preload":
            return Tag.link(href, rel, **{"as": _preload_destination(href)})
        return Tag.link(href, rel)

    def initial_hints(
        self,
        tags: Sequence[Tag],
        context: BuildContext,
        seen: set[HintKey],
    ) -> list[Tag]:
        """Hints for external scripts in ``tags``, in tag order. ``seen`` is updated."""
        hints: list[Tag] = []
        policies = [(rel, policy) for rel, policy in self._policies() if policy.covers_initial]
        if not policies:
            return hints
        for tag in tags:
            if not tag.is_external_script:
                continue
            href = tag.asset_ref or ""
            name = context.script_name(href)
            for rel, policy in policies:
                if matches(name, policy.test):
                    hint = self._hint(rel, href, context, seen)
                    if hint is not None:
                        hints.append(hint)
        return hints

    def async_hints(
        self,
        chunks: Iterable[Chunk],
        context: BuildContext,
        seen: set[HintKey],
    ) -> list[Tag]:
        """Hints for files of async chunks, in chunk then file order. ``seen`` is updated."""
        hints: list[Tag] = []
        policies = [(rel, policy) for rel, policy in self._policies() if policy.covers_async]
        if not policies:
            return hints
        for chunk in chunks:
            if not chunk.is_async:
                continue
            for name in chunk.files:
                for rel, policy in policies:
                    if matches(name, policy.test):
                        hint = self._hint(rel, context.asset_url(name), context, seen)
                        if hint is not None:
                            hints.append(hint)
        return hints

    def generate(
        self,
        head: Sequence[Tag],
        body: Sequence[Tag],
        chunks: Iterable[Chunk],
        context: BuildContext,
    ) -> list[Tag]:
        """
        Return the new head list with all hints appended.

        Hints already present in ``head`` seed the seen-set, so re-running on
        an already-hinted head adds nothing.
        """
        seen = hint_keys(head, context)
        initial = self.initial_hints(head, context, seen) + self.initial_hints(body, context, seen)
        anticipatory = self.async_hints(chunks, context, seen)
        self._logger.debug(
            "hints_generated", initial=len(initial), anticipatory=len(anticipatory)
        )
        return [*head, *initial, *anticipatory]
