"""Custom attribute groups merged onto matching tags."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from scriptext.errors import RewriteError
from scriptext.matching import matches
from scriptext.models.build import BuildContext
from scriptext.models.config import CustomAttributeGroup, ScriptExtConfig
from scriptext.models.tags import Tag


def _match_name(tag: Tag, context: BuildContext) -> str | None:
    """Asset name of an external reference, or of the asset an inline script came from."""
    ref = tag.asset_ref
    if ref is not None:
        return context.script_name(ref)
    return tag.inlined_from


class CustomAttributeApplier:
    """
    Applies the configured custom attribute groups.

    Groups are evaluated in configuration order; a later group overwrites an
    earlier group's value for the same key. Attributes no matching group
    mentions are left alone, and tags are neither added nor reordered.
    Applying the same config twice yields the same attributes as applying it
    once, provided attribute factories are deterministic.
    """

    def __init__(
        self,
        config: ScriptExtConfig,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self._config = config
        self._logger = logger or structlog.get_logger("scriptext.attributes")

    def apply(self, tags: Sequence[Tag], context: BuildContext) -> list[Tag]:
        result: list[Tag] = []
        for index, tag in enumerate(tags):
            if not isinstance(tag, Tag):
                raise RewriteError(
                    f"Expected a Tag, got {type(tag).__name__}", index=index, tag=tag
                )
            name = _match_name(tag, context)
            if name is None:
                result.append(tag)
                continue
            merged: dict[str, Any] = {}
            for group in self._config.custom:
                if matches(name, group.test):
                    merged.update(self._attributes_for(group, index, tag, name))
            if merged:
                self._logger.debug("custom_attributes_applied", asset=name, keys=sorted(merged))
                tag = tag.with_attributes(merged)
            result.append(tag)
        return result

    def _attributes_for(
        self,
        group: CustomAttributeGroup,
        index: int,
        tag: Tag,
        name: str,
    ) -> Mapping[str, Any]:
        if group.factory is None:
            return group.attributes
        try:
            produced = group.factory(tag, name)
        except Exception as exc:
            raise RewriteError(
                f"Attribute factory of group {group.name!r} failed: {exc}", index=index, tag=tag
            ) from exc
        if not isinstance(produced, Mapping):
            raise RewriteError(
                f"Attribute factory of group {group.name!r} returned "
                f"{type(produced).__name__}, expected a mapping",
                index=index,
                tag=tag,
            )
        return produced
