"""Configuration models for the scriptext plugin."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from scriptext.errors import ConfigurationError

AttributeValue = str | bool
"""``True`` renders a boolean attribute, ``False`` omits it."""

AttributeFactory = Callable[[Any, str], Mapping[str, Any]]
"""Called with ``(tag, script_name)``; returns the attributes to merge."""


def _as_matcher_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, PatternSet):
        return list(value.matchers)
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


class PatternSet(BaseModel):
    """
    An ordered list of matchers for one policy category.

    Each matcher is an exact/substring/glob string, a compiled regular
    expression, or a predicate over the asset name. A name matches the set
    when any matcher matches. An empty set matches nothing.

    Accepted input forms::

        PatternSet.model_validate("app.js")
        PatternSet.model_validate(re.compile(r"^vendor"))
        PatternSet.model_validate(["a.js", lambda name: name.endswith(".mjs")])
        PatternSet.model_validate({"test": "*.js"})
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    matchers: tuple[Any, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def coerce_matchers(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            if "test" in data:
                return {"matchers": _as_matcher_list(data["test"])}
            return data
        return {"matchers": _as_matcher_list(data)}

    @field_validator("matchers")
    @classmethod
    def validate_matchers(cls, value: tuple[Any, ...]) -> tuple[Any, ...]:
        for matcher in value:
            if isinstance(matcher, (str, re.Pattern)) or callable(matcher):
                continue
            raise ValueError(
                f"matcher must be a string, compiled regex or callable, got {type(matcher).__name__}"
            )
        return value

    @property
    def enabled(self) -> bool:
        """True when the set contains at least one matcher."""
        return bool(self.matchers)


class HintPolicy(BaseModel):
    """A resource-hint policy: which assets to hint and for which kind of chunk."""

    model_config = ConfigDict(frozen=True)

    test: PatternSet = Field(default_factory=PatternSet)
    chunks: Literal["initial", "async", "all"] = Field(
        default="all",
        description="Restrict hints to script tags of initial chunks, to async chunks, or both.",
    )

    @model_validator(mode="before")
    @classmethod
    def coerce_bare_test(cls, data: Any) -> Any:
        if isinstance(data, HintPolicy):
            return data
        if isinstance(data, Mapping) and ("test" in data or "chunks" in data):
            return data
        if isinstance(data, Mapping) and not data:
            return data
        return {"test": data}

    @property
    def covers_initial(self) -> bool:
        return self.test.enabled and self.chunks in ("initial", "all")

    @property
    def covers_async(self) -> bool:
        return self.test.enabled and self.chunks in ("async", "all")


class CustomAttributeGroup(BaseModel):
    """
    A named group of custom attributes applied to tags whose asset name matches ``test``.

    Either a static ``attributes`` map or a ``factory`` callable must be given.
    The single-attribute shorthand ``{"test": ..., "attribute": "crossorigin",
    "value": "anonymous"}`` is also accepted; ``value`` defaults to ``True``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = ""
    test: PatternSet = Field(default_factory=PatternSet)
    attributes: dict[str, AttributeValue] = Field(default_factory=dict)
    factory: Callable[..., Any] | None = None

    @model_validator(mode="before")
    @classmethod
    def expand_single_attribute(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        if "attribute" in data:
            attribute = data.pop("attribute")
            value = data.pop("value", True)
            data.setdefault("attributes", {attribute: value})
        if not data.get("name"):
            attributes = data.get("attributes") or {}
            factory = data.get("factory")
            data["name"] = ",".join(attributes) or getattr(factory, "__name__", "factory")
        return data

    @model_validator(mode="after")
    def validate_source(self) -> CustomAttributeGroup:
        if self.factory is not None and self.attributes:
            raise ValueError("custom attribute group takes either 'attributes' or 'factory', not both")
        if self.factory is None and not self.attributes:
            raise ValueError("custom attribute group needs 'attributes' or 'factory'")
        return self


class ScriptExtConfig(BaseModel):
    """
    Normalised, immutable plugin options.

    A single instance may be shared by any number of builds. Construct it from
    the camelCase option dictionary used by build configurations with
    :meth:`from_options`, or directly with keyword arguments::

        config = ScriptExtConfig(
            inline="runtime.js",
            async_=["vendor", re.compile(r"\\.chunk\\.js$")],
            preload=HintPolicy(test="*.js", chunks="async"),
        )
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    inline: PatternSet = Field(default_factory=PatternSet)
    sync: PatternSet = Field(default_factory=PatternSet)
    async_: PatternSet = Field(default_factory=PatternSet, alias="async")
    defer: PatternSet = Field(default_factory=PatternSet)
    module: PatternSet = Field(default_factory=PatternSet)

    preload: HintPolicy = Field(default_factory=HintPolicy)
    prefetch: HintPolicy = Field(default_factory=HintPolicy)

    default_attribute: Literal["sync", "async", "defer"] = Field(
        default="sync",
        alias="defaultAttribute",
        description="Loading attribute for script tags no sync/async/defer test matched.",
    )

    remove_inlined_assets: bool = Field(
        default=True,
        alias="removeInlinedAssets",
        description="Delete inlined assets from the output asset map at emission.",
    )

    custom: tuple[CustomAttributeGroup, ...] = ()

    @field_validator("custom", mode="before")
    @classmethod
    def coerce_custom(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, (Mapping, CustomAttributeGroup)):
            return (value,)
        return value

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> ScriptExtConfig:
        """
        Normalise raw plugin options.

        Raises:
            ConfigurationError: If any option is malformed.
        """
        try:
            return cls.model_validate(dict(options or {}))
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid scriptext options: {exc.error_count()} error(s)",
                errors=exc.errors(include_url=False),
            ) from exc

    def patterns_for(self, attribute: str) -> PatternSet:
        """Return the PatternSet for a loading attribute name (``"async"`` included)."""
        return self.async_ if attribute == "async" else getattr(self, attribute)

    @property
    def rewrites_elements(self) -> bool:
        """True when the ElementRewriter has anything to do."""
        return (
            self.default_attribute != "sync"
            or self.inline.enabled
            or self.async_.enabled
            or self.defer.enabled
            or self.module.enabled
        )

    @property
    def adds_resource_hints(self) -> bool:
        return self.preload.test.enabled or self.prefetch.test.enabled

    @property
    def adds_custom_attributes(self) -> bool:
        return bool(self.custom)
