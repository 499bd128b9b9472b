"""Tag-list transformations run during tag alteration."""

from scriptext.tags.attributes import CustomAttributeApplier
from scriptext.tags.elements import ElementRewriter
from scriptext.tags.hints import ResourceHintGenerator, hint_keys

__all__ = [
    "CustomAttributeApplier",
    "ElementRewriter",
    "ResourceHintGenerator",
    "hint_keys",
]
