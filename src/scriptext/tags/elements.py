"""Script element rewriter — inlines scripts and sets their loading attributes."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from scriptext.errors import RewriteError
from scriptext.matching import matches
from scriptext.models.build import Asset, BuildContext
from scriptext.models.config import ScriptExtConfig
from scriptext.models.tags import Tag, escape_inline_script

# Attributes with no meaning on an inline script body
_INLINE_STRIPPED: tuple[str, ...] = ("src", "async", "defer")


class ElementRewriter:
    """
    Rewrites external ``<script src>`` tags according to the loading policies.

    For every external script whose name matches ``inline`` and whose asset is
    known, the tag becomes an inline script carrying the asset's content.
    Otherwise the ``sync``/``async``/``defer`` policies decide the loading
    attribute and ``module`` adds ``type="module"``. Inlined tags are never
    given loading attributes.

    The output list has exactly the input's length and order; tags that no
    policy touches are returned as the very same objects.

    Example::

        rewriter = ElementRewriter(ScriptExtConfig(async_="vendor"))
        head = rewriter.rewrite(head, assets, BuildContext())
    """

    def __init__(
        self,
        config: ScriptExtConfig,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self._config = config
        self._logger = logger or structlog.get_logger("scriptext.elements")

    def rewrite(
        self,
        tags: Sequence[Tag],
        assets: Mapping[str, Asset],
        context: BuildContext,
    ) -> list[Tag]:
        """
        Rewrite a head or body tag list.

        Args:
            tags: The host's tag list. Not modified.
            assets: The host's asset map, keyed by asset name. Read only.
            context: Public path and hash settings for resolving script names.

        Returns:
            A new list of the same length and order.

        Raises:
            RewriteError: If an element is not a Tag or an inlined asset cannot be decoded.
        """
        rewritten: list[Tag] = []
        for index, tag in enumerate(tags):
            if not isinstance(tag, Tag):
                raise RewriteError(
                    f"Expected a Tag, got {type(tag).__name__}", index=index, tag=tag
                )
            if not tag.is_external_script:
                rewritten.append(tag)
                continue
            name = context.script_name(tag.asset_ref or "")
            rewritten.append(self._rewrite_script(index, tag, name, assets))
        return rewritten

    def _rewrite_script(
        self,
        index: int,
        tag: Tag,
        name: str,
        assets: Mapping[str, Asset],
    ) -> Tag:
        if matches(name, self._config.inline):
            asset = assets.get(name)
            if asset is not None:
                return self._inline(index, tag, name, asset)
            self._logger.warning("inline_asset_missing", asset=name)

        updates: dict[str, Any] = {}
        for attribute in self._loading_attributes(name):
            updates[attribute] = True
        if matches(name, self._config.module):
            updates["type"] = "module"
        if not updates:
            return tag
        self._logger.debug("script_attributes_set", asset=name, attributes=sorted(updates))
        return tag.with_attributes(updates)

    def _loading_attributes(self, name: str) -> list[str]:
        """
        Resolve ``async``/``defer`` for a script name.

        An explicit ``sync`` match wins and yields no attribute. ``async`` and
        ``defer`` are evaluated independently; when neither matches, the
        configured default attribute applies.
        """
        if matches(name, self._config.sync):
            return []
        selected = [
            attribute
            for attribute in ("async", "defer")
            if matches(name, self._config.patterns_for(attribute))
        ]
        if selected:
            return selected
        default = self._config.default_attribute
        return [] if default == "sync" else [default]

    def _inline(self, index: int, tag: Tag, name: str, asset: Asset) -> Tag:
        try:
            source = asset.text()
        except UnicodeDecodeError as exc:
            raise RewriteError(f"Asset {name!r} is not valid UTF-8", index=index, tag=tag) from exc
        self._logger.debug("script_inlined", asset=name, size=len(asset.content))
        inlined = tag.with_attributes(
            remove=_INLINE_STRIPPED,
            inner_html=escape_inline_script(source),
        )
        return inlined.model_copy(update={"inlined_from": name})
