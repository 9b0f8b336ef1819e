"""Tests for host primitives and plugin wiring."""

import pytest

from passage_gloss.host import BlockRegistry, Element, Modal
from passage_gloss.plugin import PassagePlugin, PluginSettings
from passage_gloss.renderer import ERROR_CLASS, WORD_CLASS

NOTE = """Intro paragraph.

```passage
Test 1:1
```

```python
print("hi")
```

Closing words.
"""


class TestElement:
    def test_create_el(self):
        root = Element("div")
        child = root.create_el("span", text="x", cls="a", attrs={"title": "t"})
        assert root.children == [child]
        assert child.parent is root
        assert child.has_class("a")
        assert child.get_attr("title") == "t"

    def test_events(self):
        el = Element("span")
        seen = []
        el.on("click", seen.append)
        el.trigger("click")
        el.trigger("hover")
        assert seen == [el]

    def test_to_html_escapes(self):
        el = Element("span", text="<b>", cls="w", attrs={"data-word": '{"a": "&"}'})
        assert el.to_html() == (
            '<span data-word="{&quot;a&quot;: &quot;&amp;&quot;}" class="w">'
            "&lt;b&gt;</span>"
        )

    def test_empty(self):
        root = Element("div", text="x")
        root.create_el("p")
        root.empty()
        assert root.children == []
        assert root.text_content == ""


class TestModal:
    def test_open_close(self):
        modal = Modal("title")
        modal.content_el.create_el("p", text="body")
        modal.open()
        assert modal.is_open
        modal.close()
        assert not modal.is_open
        assert modal.content_el.children == []


class TestBlockRegistry:
    def test_process(self):
        registry = BlockRegistry()
        calls = []
        registry.register("passage", lambda src, el: calls.append(src))
        root = registry.process(NOTE)
        assert calls == ["Test 1:1\n"]
        tags = [child.tag for child in root.children]
        assert tags == ["p", "div", "pre", "p"]
        assert root.children[2].children[0].text == 'print("hi")\n'

    def test_failing_processor_does_not_abort(self):
        registry = BlockRegistry()

        def boom(source, el):
            raise RuntimeError("boom")

        registry.register("passage", boom)
        root = registry.process(NOTE)
        block = root.children[1]
        assert block.children[0].has_class("block-error")
        assert root.children[-1].text == "Closing words."


class TestPassagePlugin:
    def test_onload_registers(self, index):
        registry = BlockRegistry()
        plugin = PassagePlugin(registry, settings=PluginSettings(), index=index)
        assert plugin.onload()
        assert registry.is_registered("passage")

        root = registry.process(NOTE)
        words = root.find_all(cls=WORD_CLASS)
        assert [w.text for w in words] == ["Alpha", "beta", "."]

        words[0].trigger("click")
        assert plugin.panel.view.title == "Alpha"

    def test_malformed_block(self, index):
        registry = BlockRegistry()
        PassagePlugin(registry, settings=PluginSettings(), index=index).onload()
        root = registry.process("```passage\nhello\n```\n")
        assert root.find_all(cls=ERROR_CLASS)[0].text == "hello"

    def test_load_failure_skips_registration(self, tmp_path):
        registry = BlockRegistry()
        settings = PluginSettings(corpus_path=tmp_path / "missing.json")
        plugin = PassagePlugin(registry, settings=settings)
        assert not plugin.onload()
        assert not plugin.active
        assert not registry.is_registered("passage")

    def test_onunload(self, index):
        registry = BlockRegistry()
        plugin = PassagePlugin(registry, settings=PluginSettings(), index=index)
        plugin.onload()
        plugin.onunload()
        assert not registry.is_registered("passage")
        assert not plugin.active

    @pytest.mark.parametrize("value,expected", [("1", True), ("no", False)])
    def test_settings_from_env(self, monkeypatch, value, expected):
        monkeypatch.setenv("PASSAGE_COLLAPSE_REPEATS", value)
        assert PluginSettings.from_env().collapse_repeats is expected

    def test_collapse_setting(self, index):
        registry = BlockRegistry()
        settings = PluginSettings(collapse_repeats=True)
        PassagePlugin(registry, settings=settings, index=index).onload()
        root = registry.process("```passage\nTest 2:1-3\n```\n")
        lines = root.find_all(tag="p")
        assert [line.get_attr("data-sentence") for line in lines] == ["e", "f"]
