"""Annotation renderer: sentences -> inline interlinear word elements."""

from __future__ import annotations

import logging
import os
import threading
from collections import OrderedDict

from passage_gloss.corpus import CorpusIndex
from passage_gloss.host import Element
from passage_gloss.inspector import InspectionPanel, build_view
from passage_gloss.models import (
    PanelView,
    PassageResult,
    RenderedLine,
    RenderedWord,
    Word,
)
from passage_gloss.reference import MalformedReference, format_reference, parse
from passage_gloss.resolver import collapse_repeats, resolve

logger = logging.getLogger(__name__)

WORD_CLASS = "grc-word"
ERROR_CLASS = "passage-error"

# Word snapshots kept for inspection (override with PASSAGE_MAX_HANDLES)
MAX_HANDLES = int(os.environ.get("PASSAGE_MAX_HANDLES", 10000))


class HandleTable:
    """Thread-safe LRU map from element id to word snapshot."""

    def __init__(self, max_size: int = MAX_HANDLES) -> None:
        self.max_size = max_size
        self._snapshots: OrderedDict[str, Word] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, handle: str) -> Word | None:
        with self._lock:
            snapshot = self._snapshots.get(handle)
            if snapshot is not None:
                # Move to end (most recently used)
                self._snapshots.move_to_end(handle)
            return snapshot

    def put(self, handle: str, snapshot: Word) -> None:
        with self._lock:
            self._snapshots[handle] = snapshot
            self._snapshots.move_to_end(handle)
            while len(self._snapshots) > self.max_size:
                self._snapshots.popitem(last=False)

    def pop(self, handle: str) -> Word | None:
        with self._lock:
            return self._snapshots.pop(handle, None)

    def __len__(self) -> int:
        return len(self._snapshots)


class AnnotationRenderer:
    """Renders corpus sentences into an element tree.

    Each rendered word keeps a detached copy of its Word in a bounded handle
    table keyed by element id; clicking the word opens that copy in the
    panel.  Once a handle is evicted, clicking falls back to the element's
    ``data-word`` attribute.
    """

    def __init__(
        self,
        index: CorpusIndex,
        panel: InspectionPanel | None = None,
        word_class: str = WORD_CLASS,
        collapse: bool = False,
        max_handles: int = MAX_HANDLES,
    ) -> None:
        self.index = index
        self.panel = panel or InspectionPanel()
        self.word_class = word_class
        self.collapse = collapse
        self._handles = HandleTable(max_handles)

    @property
    def handle_count(self) -> int:
        return len(self._handles)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, sentence_ids: list[str], target: Element) -> list[Element]:
        """Append one ``p`` line per sentence id to ``target``."""
        lines = []
        for sid in sentence_ids:
            line = target.create_el("p", attrs={"data-sentence": sid})
            for word in self.index.words(sid):
                self._render_word(line, word)
            lines.append(line)
        return lines

    def _render_word(self, line: Element, word: Word) -> Element:
        span = line.create_el(
            "span",
            text=word.form,
            cls=self.word_class,
            attrs={"title": word.lemma, "data-word": word.model_dump_json()},
        )
        span.set_attr("data-handle", span.id)
        self._handles.put(span.id, word.model_copy(deep=True))
        span.on("click", self._activate)
        if word.space_after.follows:
            line.create_el("span", text=" ")
        return span

    def render_block(self, source: str, target: Element) -> list[Element]:
        """Block processor callback for ``passage`` fences.

        A malformed reference renders the raw source with an error marker;
        an out-of-range reference renders nothing.
        """
        try:
            ref = parse(source)
        except MalformedReference as e:
            logger.warning("MalformedReference: %s", e)
            target.create_el("p", text=source.strip(), cls=ERROR_CLASS)
            return []

        sentence_ids = resolve(ref, self.index)
        if self.collapse:
            sentence_ids = collapse_repeats(sentence_ids)
        if not sentence_ids:
            logger.debug("No sentences for %s", format_reference(ref))
        return self.render(sentence_ids, target)

    def render_passage(self, reference: str) -> PassageResult:
        """Render a reference into a detached tree and summarize it.

        Raises:
            MalformedReference: If the reference cannot be parsed.
        """
        ref = parse(reference)
        sentence_ids = resolve(ref, self.index)
        if self.collapse:
            sentence_ids = collapse_repeats(sentence_ids)

        target = Element("div")
        lines = self.render(sentence_ids, target)
        return PassageResult(
            reference=format_reference(ref),
            range=ref,
            sentence_ids=sentence_ids,
            lines=[self._summarize(line) for line in lines],
        )

    def _summarize(self, line: Element) -> RenderedLine:
        words: list[RenderedWord] = []
        for child in line.children:
            if child.has_class(self.word_class):
                words.append(
                    RenderedWord(
                        handle=child.id,
                        form=child.text or "",
                        lemma=child.get_attr("title") or "",
                        space_after=False,
                    )
                )
            elif words:
                words[-1].space_after = True
        sentence_id = line.get_attr("data-sentence") or ""
        return RenderedLine(sentence_id=sentence_id, words=words)

    def clear(self, target: Element) -> None:
        """Empty ``target`` and forget the handles of words rendered in it."""
        for el in target.iter():
            self._handles.pop(el.id)
        target.empty()

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def snapshot(self, handle: str) -> Word | None:
        return self._handles.get(handle)

    def describe(self, handle: str) -> PanelView:
        """Panel contents for a rendered word handle, without opening the panel.

        Raises:
            KeyError: If the handle is unknown or has been evicted.
        """
        snapshot = self._handles.get(handle)
        if snapshot is None:
            raise KeyError(handle)
        return build_view(snapshot)

    def inspect(self, handle: str) -> PanelView:
        """Open the panel for a rendered word handle.

        Raises:
            KeyError: If the handle is unknown or has been evicted.
        """
        snapshot = self._handles.get(handle)
        if snapshot is None:
            raise KeyError(handle)
        return self.panel.open(snapshot)

    def _activate(self, el: Element) -> None:
        snapshot = self._handles.get(el.id)
        if snapshot is not None:
            self.panel.open(snapshot)
        else:
            # Evicted, cleared, or not rendered by us: decode the attribute
            self.panel.open(el.get_attr("data-word") or "")
