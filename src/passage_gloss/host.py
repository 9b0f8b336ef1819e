"""Host rendering primitives: element tree, modal surface, block registry.

These stand in for a note-taking host's markdown pipeline.  The renderer and
inspection panel only use ``Element.create_el``, attributes, classes, event
subscription and ``Modal``; everything else here is the host side.
"""

from __future__ import annotations

import html
import logging
import re
import uuid
from collections.abc import Callable, Iterator

logger = logging.getLogger(__name__)

Handler = Callable[["Element"], None]
BlockCallback = Callable[[str, "Element"], None]

# Tags rendered without a closing tag
_VOID_TAGS = {"br", "hr", "img"}


class Element:
    """A minimal DOM-like node."""

    def __init__(
        self,
        tag: str,
        text: str | None = None,
        cls: str | list[str] | None = None,
        attrs: dict[str, str] | None = None,
    ) -> None:
        self.id = uuid.uuid4().hex[:12]
        self.tag = tag
        self.text = text
        self.classes: list[str] = []
        self.attrs: dict[str, str] = dict(attrs or {})
        self.children: list[Element] = []
        self.parent: Element | None = None
        self._handlers: dict[str, list[Handler]] = {}
        if cls:
            for name in [cls] if isinstance(cls, str) else cls:
                self.add_class(name)

    def __repr__(self) -> str:
        return f"<Element {self.tag} id={self.id} text={self.text!r}>"

    def create_el(
        self,
        tag: str,
        text: str | None = None,
        cls: str | list[str] | None = None,
        attrs: dict[str, str] | None = None,
    ) -> Element:
        """Append and return a new child element."""
        child = Element(tag, text=text, cls=cls, attrs=attrs)
        child.parent = self
        self.children.append(child)
        return child

    def set_text(self, text: str) -> None:
        self.children.clear()
        self.text = text

    def set_attr(self, name: str, value: str) -> None:
        self.attrs[name] = value

    def get_attr(self, name: str) -> str | None:
        return self.attrs.get(name)

    def add_class(self, name: str) -> None:
        if name not in self.classes:
            self.classes.append(name)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def on(self, event: str, handler: Handler) -> None:
        """Subscribe ``handler`` to ``event`` (e.g. "click")."""
        self._handlers.setdefault(event, []).append(handler)

    def trigger(self, event: str) -> None:
        """Dispatch ``event`` to every subscribed handler, in order."""
        for handler in list(self._handlers.get(event, [])):
            handler(self)

    def empty(self) -> None:
        for child in self.children:
            child.parent = None
        self.children.clear()
        self.text = None

    def iter(self) -> Iterator[Element]:
        """Depth-first walk including this element."""
        yield self
        for child in self.children:
            yield from child.iter()

    def find_all(self, tag: str | None = None, cls: str | None = None) -> list[Element]:
        return [
            el
            for el in self.iter()
            if (tag is None or el.tag == tag) and (cls is None or el.has_class(cls))
        ]

    @property
    def text_content(self) -> str:
        return (self.text or "") + "".join(c.text_content for c in self.children)

    def to_html(self) -> str:
        attrs = dict(self.attrs)
        if self.classes:
            attrs["class"] = " ".join(self.classes)
        attr_str = "".join(
            f' {name}="{html.escape(value, quote=True)}"'
            for name, value in attrs.items()
        )
        if self.tag in _VOID_TAGS:
            return f"<{self.tag}{attr_str}>"
        inner = html.escape(self.text or "", quote=False)
        inner += "".join(c.to_html() for c in self.children)
        return f"<{self.tag}{attr_str}>{inner}</{self.tag}>"


class Modal:
    """A single floating surface with a title and a content element."""

    def __init__(self, title: str = "") -> None:
        self.title = title
        self.content_el = Element("div", cls="modal-content")
        self.is_open = False

    def set_title(self, title: str) -> None:
        self.title = title

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.content_el.empty()
        self.is_open = False


_FENCE = re.compile(
    r"^```[ \t]*([\w-]*)[ \t]*\n(.*?)^```[ \t]*$", re.MULTILINE | re.DOTALL
)


class BlockRegistry:
    """Maps fenced-code languages to block processor callbacks."""

    def __init__(self) -> None:
        self._processors: dict[str, BlockCallback] = {}

    def register(self, language: str, callback: BlockCallback) -> None:
        if language in self._processors:
            logger.warning("Replacing block processor for '%s'", language)
        self._processors[language] = callback

    def unregister(self, language: str) -> None:
        self._processors.pop(language, None)

    def is_registered(self, language: str) -> bool:
        return language in self._processors

    def process(self, markdown: str) -> Element:
        """Render a markdown document into an element tree.

        Fenced blocks whose language has a processor are handed to it with a
        fresh ``div`` target; other fences become ``pre/code`` and plain
        paragraphs become ``p``.
        """
        root = Element("div", cls="markdown-rendered")
        pos = 0
        for match in _FENCE.finditer(markdown):
            self._paragraphs(root, markdown[pos : match.start()])
            language, source = match.group(1), match.group(2)
            self._block(root, language, source)
            pos = match.end()
        self._paragraphs(root, markdown[pos:])
        return root

    def _block(self, root: Element, language: str, source: str) -> None:
        callback = self._processors.get(language)
        if callback is None:
            pre = root.create_el("pre")
            code_cls = f"language-{language}" if language else None
            pre.create_el("code", text=source, cls=code_cls)
            return

        target = root.create_el("div", cls=f"block-language-{language}")
        try:
            callback(source, target)
        except Exception as e:
            logger.error("Block processor '%s' failed: %s", language, e)
            target.empty()
            target.create_el("pre", text=source, cls="block-error")

    @staticmethod
    def _paragraphs(root: Element, text: str) -> None:
        for chunk in re.split(r"\n\s*\n", text):
            chunk = chunk.strip()
            if chunk:
                root.create_el("p", text=chunk)
