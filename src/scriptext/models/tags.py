"""Tag model for ``<script>`` and ``<link>`` elements destined for generated HTML."""

from __future__ import annotations

import html
import re
from collections.abc import Iterable, Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from scriptext.models.config import AttributeValue

# Sequences that switch the HTML tokenizer out of plain script data
_SCRIPT_BREAKOUT_RE = re.compile(r"<(/script|!--|(s)(?=cript))", re.IGNORECASE)
_ESCAPED_BREAKOUT_RE = re.compile(r"<(\\/script|\\!--|\\x(73|53)(?=cript))", re.IGNORECASE)


def _escape_breakout(match: re.Match[str]) -> str:
    letter = match.group(2)
    if letter is not None:
        return f"<\\x{ord(letter):02x}"
    return f"<\\{match.group(1)}"


def _unescape_breakout(match: re.Match[str]) -> str:
    code = match.group(2)
    if code is not None:
        return f"<{chr(int(code, 16))}"
    return f"<{match.group(1)[1:]}"


def escape_inline_script(source: str) -> str:
    """
    Make ``source`` safe to embed between ``<script>`` and ``</script>``.

    The HTML tokenizer leaves script data on ``</script`` (end tag) and enters
    the double-escaped state on ``<!--`` followed by ``<script``, after which
    the real end tag is read as text. All three are rewritten, in any case:

    - ``</script`` becomes ``<\\/script``
    - ``<!--`` becomes ``<\\!--``
    - ``<script`` becomes ``<\\x73cript`` (``<\\x53CRIPT`` for an upper-case S)

    Inside JavaScript string, template and regular-expression literals every
    replacement denotes the same characters as the original.
    """
    return _SCRIPT_BREAKOUT_RE.sub(_escape_breakout, source)


def unescape_inline_script(body: str) -> str:
    """Inverse of :func:`escape_inline_script`."""
    return _ESCAPED_BREAKOUT_RE.sub(_unescape_breakout, body)


def coerce_attribute_value(value: Any) -> AttributeValue:
    """Booleans stay booleans; everything else is rendered as a string."""
    if isinstance(value, bool):
        return value
    return str(value)


class Tag(BaseModel):
    """
    A ``<script>`` or ``<link>`` element.

    Tags are values: every transformation returns a new Tag (see
    :meth:`with_attributes`) and leaves the original untouched, so tag lists
    owned by the host are never mutated behind its back.
    """

    model_config = ConfigDict(frozen=True)

    tag_name: Literal["script", "link"]
    attributes: dict[str, AttributeValue] = Field(default_factory=dict)
    """Insertion-ordered. ``True`` renders a bare boolean attribute, ``False`` omits it."""
    inner_html: str | None = None
    """Inline body for scripts. None for external scripts and links."""
    void_tag: bool = False
    """True for elements without a closing tag (``<link>``)."""
    inlined_from: str | None = None
    """Asset name an inline script was produced from. Used for matching, never rendered."""

    @classmethod
    def script(cls, src: str, **attributes: AttributeValue) -> Tag:
        return cls(tag_name="script", attributes={"src": src, **attributes})

    @classmethod
    def link(cls, href: str, rel: str, **attributes: AttributeValue) -> Tag:
        return cls(
            tag_name="link",
            attributes={"rel": rel, "href": href, **attributes},
            void_tag=True,
        )

    @property
    def asset_ref(self) -> str | None:
        """The referenced asset URL: ``src`` for scripts, ``href`` for links."""
        key = "src" if self.tag_name == "script" else "href"
        value = self.attributes.get(key)
        return value if isinstance(value, str) and value else None

    @property
    def is_external_script(self) -> bool:
        return self.tag_name == "script" and self.asset_ref is not None

    @property
    def rel(self) -> str | None:
        value = self.attributes.get("rel")
        return value if isinstance(value, str) else None

    def with_attributes(
        self,
        updates: Mapping[str, Any] | None = None,
        *,
        remove: Iterable[str] = (),
        inner_html: str | None = None,
    ) -> Tag:
        """
        Return a copy with ``updates`` merged into the attributes.

        Keys in ``remove`` are dropped first; existing keys keep their position
        when overwritten, new keys are appended.
        """
        removed = set(remove)
        attributes = {k: v for k, v in self.attributes.items() if k not in removed}
        for key, value in (updates or {}).items():
            attributes[key] = coerce_attribute_value(value)
        update: dict[str, Any] = {"attributes": attributes}
        if inner_html is not None:
            update["inner_html"] = inner_html
        return self.model_copy(update=update)

    def render(self) -> str:
        """Serialise to HTML. Attribute values are escaped; script bodies are emitted as-is."""
        parts = [self.tag_name]
        for key, value in self.attributes.items():
            if value is False:
                continue
            if value is True:
                parts.append(key)
            else:
                parts.append(f'{key}="{html.escape(value, quote=True)}"')
        opening = f"<{' '.join(parts)}>"
        if self.void_tag:
            return opening
        return f"{opening}{self.inner_html or ''}</{self.tag_name}>"
