"""Tests for ResourceHintGenerator."""

from __future__ import annotations

from scriptext.models.build import BuildContext, Chunk
from scriptext.models.config import HintPolicy, ScriptExtConfig
from scriptext.models.tags import Tag
from scriptext.tags.hints import ResourceHintGenerator, hint_keys
from tests.conftest import script


def _hints(tags: list[Tag]) -> list[tuple[str | None, str | None]]:
    return [(tag.rel, tag.asset_ref) for tag in tags if tag.tag_name == "link"]


class TestInitialHints:
    def test_preload_for_referenced_scripts(self, context) -> None:
        generator = ResourceHintGenerator(ScriptExtConfig(preload="*.js"))
        head = generator.generate([script("app.js")], [script("vendor.js")], [], context)
        assert _hints(head) == [("preload", "app.js"), ("preload", "vendor.js")]
        assert head[1].attributes == {"rel": "preload", "href": "app.js", "as": "script"}

    def test_prefetch_has_no_destination(self, context) -> None:
        generator = ResourceHintGenerator(ScriptExtConfig(prefetch="app"))
        head = generator.generate([script("app.js")], [], [], context)
        assert head[1].attributes == {"rel": "prefetch", "href": "app.js"}

    def test_one_hint_per_relation(self, context) -> None:
        """An asset matching both policies gets one preload and one prefetch."""
        generator = ResourceHintGenerator(ScriptExtConfig(preload="app", prefetch="app"))
        head = generator.generate([script("app.js")], [script("app.js")], [], context)
        assert _hints(head) == [("preload", "app.js"), ("prefetch", "app.js")]

    def test_inline_scripts_get_no_hints(self, context) -> None:
        generator = ResourceHintGenerator(ScriptExtConfig(preload="*"))
        head = generator.generate([Tag(tag_name="script", inner_html="1")], [], [], context)
        assert _hints(head) == []

    def test_async_only_policy_skips_initial_scripts(self, context) -> None:
        config = ScriptExtConfig(preload=HintPolicy(test="*.js", chunks="async"))
        head = ResourceHintGenerator(config).generate([script("app.js")], [], [], context)
        assert _hints(head) == []

    def test_original_tags_come_first(self, context) -> None:
        generator = ResourceHintGenerator(ScriptExtConfig(preload="*.js"))
        original = [script("app.js"), Tag.link("main.css", "stylesheet")]
        head = generator.generate(original, [], [], context)
        assert head[: len(original)] == original


class TestAsyncHints:
    def test_hints_for_async_chunk_files(self) -> None:
        generator = ResourceHintGenerator(ScriptExtConfig(prefetch="lazy"))
        chunks = [
            Chunk(id="main", files=["main.js", "lazy-main.js"], initial=True),
            Chunk(id="1", files=["lazy-a.js", "lazy-a.css"], initial=False),
        ]
        context = BuildContext(public_path="/assets/")
        hints = generator.async_hints(chunks, context, set())
        assert _hints(hints) == [
            ("prefetch", "/assets/lazy-a.js"),
            ("prefetch", "/assets/lazy-a.css"),
        ]

    def test_preload_destination_follows_extension(self, context) -> None:
        generator = ResourceHintGenerator(ScriptExtConfig(preload="lazy"))
        chunks = [Chunk(id="1", files=["lazy.js", "lazy.css"], initial=False)]
        hints = generator.async_hints(chunks, context, set())
        assert [hint.attributes["as"] for hint in hints] == ["script", "style"]

    def test_initial_only_policy_skips_async_chunks(self, context) -> None:
        config = ScriptExtConfig(preload=HintPolicy(test="*.js", chunks="initial"))
        chunks = [Chunk(id="1", files=["lazy.js"], initial=False)]
        assert ResourceHintGenerator(config).async_hints(chunks, context, set()) == []

    def test_file_shared_by_chunks_is_hinted_once(self, context) -> None:
        generator = ResourceHintGenerator(ScriptExtConfig(preload="*.js"))
        chunks = [
            Chunk(id="1", files=["shared.js", "a.js"], initial=False),
            Chunk(id="2", files=["shared.js", "b.js"], initial=False),
        ]
        head = generator.generate([], [], chunks, context)
        assert _hints(head) == [
            ("preload", "shared.js"),
            ("preload", "a.js"),
            ("preload", "b.js"),
        ]


class TestDeduplication:
    def test_initial_and_async_share_seen_set(self, context) -> None:
        """x.js referenced in head and in an async chunk yields one preload, before y.js."""
        generator = ResourceHintGenerator(ScriptExtConfig(preload="*.js"))
        chunks = [
            Chunk(id="main", files=["x.js"], initial=True),
            Chunk(id="lazy", files=["x.js", "y.js"], initial=False),
        ]
        head = generator.generate([script("x.js")], [], chunks, context)
        assert _hints(head) == [("preload", "x.js"), ("preload", "y.js")]

    def test_existing_hints_are_not_repeated(self, context) -> None:
        generator = ResourceHintGenerator(ScriptExtConfig(preload="*.js"))
        first = generator.generate([script("app.js")], [], [], context)
        second = generator.generate(first, [], [], context)
        assert second == first

    def test_hint_keys_ignore_other_links(self, context) -> None:
        tags = [
            Tag.link("a.css", "stylesheet"),
            Tag.link("a.js", "preload"),
            script("b.js"),
        ]
        assert hint_keys(tags, context) == {("preload", "a.js")}

    def test_hashed_reference_and_async_file_share_a_hint(self) -> None:
        """x.js?abc in the head and x.js in an async chunk yield one preload."""
        generator = ResourceHintGenerator(ScriptExtConfig(preload="*.js"))
        chunks = [Chunk(id="lazy", files=["x.js", "y.js"], initial=False)]
        hashed = BuildContext(hash=True)
        head = generator.generate([script("x.js?abc")], [], chunks, hashed)
        assert _hints(head) == [("preload", "x.js?abc"), ("preload", "y.js")]

    def test_existing_hashed_hint_suppresses_async_hint(self) -> None:
        generator = ResourceHintGenerator(ScriptExtConfig(preload="*.js"))
        chunks = [Chunk(id="lazy", files=["x.js"], initial=False)]
        hashed = BuildContext(hash=True)
        existing = Tag.link("x.js?abc", "preload")
        head = generator.generate([existing], [], chunks, hashed)
        assert head == [existing]

    def test_hint_keys_use_asset_names(self) -> None:
        context = BuildContext(public_path="/static/", hash=True)
        tags = [Tag.link("/static/a.js?1f", "preload")]
        assert hint_keys(tags, context) == {("preload", "a.js")}
