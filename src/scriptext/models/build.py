"""Build-graph models: assets, chunks, and the per-call build context."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field


class Asset(BaseModel):
    """A named build output. Owned by the host's asset map; never retained by scriptext."""

    name: str
    content: bytes = b""

    def text(self) -> str:
        """Decode the content as UTF-8."""
        return self.content.decode("utf-8")


class Chunk(BaseModel):
    """A group of assets produced by the bundler, loaded at page start or on demand."""

    id: str
    files: list[str] = Field(default_factory=list)
    """Asset names in chunk-declared order."""
    initial: bool = True
    """False for chunks loaded on demand (async chunks)."""

    @property
    def is_async(self) -> bool:
        return not self.initial


class PruneResult(BaseModel):
    """Outcome of an emission-phase prune pass."""

    pruned: list[str] = Field(default_factory=list)
    """Names of the assets removed from the output asset map, in map order."""
    scanned: int = 0

    @property
    def pruned_count(self) -> int:
        return len(self.pruned)


def _lookup(source: Any, *keys: str) -> Any:
    """Read the first present key from a mapping or attribute-style object."""
    if source is None:
        return None
    for key in keys:
        if isinstance(source, Mapping):
            if key in source:
                return source[key]
        elif hasattr(source, key):
            return getattr(source, key)
    return None


class BuildContext(BaseModel):
    """
    Per-call option context supplied by the host at tag alteration.

    Kept separate from :class:`~scriptext.models.config.ScriptExtConfig` so that
    the config stays immutable and shareable between builds.
    """

    public_path: str = ""
    """Prefix the host puts in front of asset names in ``src``/``href``."""
    hash: bool = False
    """True when the host appends a ``?<hash>`` cache-busting query to asset URLs."""

    @classmethod
    def from_host(cls, compilation: Any = None, data: Any = None) -> BuildContext:
        """
        Derive the context from the host's compilation and hook data.

        The document plugin's own ``publicPath`` option wins over the
        compilation's ``output.publicPath``; ``"auto"`` counts as unset.
        """
        html_options = _lookup(_lookup(data, "plugin"), "options")
        output = _lookup(_lookup(compilation, "options"), "output")
        public_path = ""
        for candidate in (
            _lookup(html_options, "publicPath", "public_path"),
            _lookup(output, "publicPath", "public_path"),
        ):
            if isinstance(candidate, str) and candidate and candidate != "auto":
                public_path = candidate
                break
        return cls(public_path=public_path, hash=bool(_lookup(html_options, "hash")))

    def script_name(self, ref: str) -> str:
        """Map a tag's ``src``/``href`` back to the asset name used for matching."""
        name = ref
        if self.public_path and name.startswith(self.public_path):
            name = name[len(self.public_path):]
        if self.hash:
            name = name.split("?", 1)[0]
        return name

    def asset_url(self, name: str) -> str:
        """Inverse of :meth:`script_name` (without a hash query)."""
        return f"{self.public_path}{name}"
