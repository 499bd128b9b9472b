"""Asset-name matching against configured PatternSets."""

from __future__ import annotations

import fnmatch
import re
from typing import Any

from scriptext.models.config import PatternSet

_GLOB_CHARS = frozenset("*?[")


def matcher_matches(name: str, matcher: Any) -> bool:
    """
    Evaluate a single matcher.

    - ``str``: exact match, substring match, or (when it contains ``*``, ``?``
      or ``[``) a glob match over the whole name.
    - ``re.Pattern``: ``search`` anywhere in the name.
    - callable: truthiness of ``matcher(name)``.
    """
    if isinstance(matcher, str):
        if matcher == name or matcher in name:
            return True
        return not _GLOB_CHARS.isdisjoint(matcher) and fnmatch.fnmatchcase(name, matcher)
    if isinstance(matcher, re.Pattern):
        return matcher.search(name) is not None
    return bool(matcher(name))


def first_match(name: str, patterns: PatternSet) -> Any | None:
    """Return the first matcher in declaration order that matches ``name``, or None."""
    for matcher in patterns.matchers:
        if matcher_matches(name, matcher):
            return matcher
    return None


def matches(name: str, patterns: PatternSet) -> bool:
    """True when any matcher in ``patterns`` matches ``name``. Empty sets match nothing."""
    return any(matcher_matches(name, matcher) for matcher in patterns.matchers)
