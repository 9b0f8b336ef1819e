"""Inspection panel: the modal showing a word's full morphological analysis."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable

from pydantic import ValidationError

from passage_gloss.host import Modal
from passage_gloss.models import PanelView, Word

logger = logging.getLogger(__name__)

FALLBACK_TITLE = "Unreadable word"


class CorruptAnnotation(ValueError):
    """A serialized word snapshot could not be decoded."""


def decode_snapshot(raw: str) -> Word:
    """Decode a ``data-word`` JSON payload into a Word."""
    try:
        return Word.model_validate_json(raw)
    except ValidationError as e:
        raise CorruptAnnotation(f"Cannot decode word snapshot: {e}") from e


def build_view(word: Word) -> PanelView:
    """Panel contents for a word; features are sorted by name."""
    return PanelView(
        title=word.form,
        summary=f"{word.lemma} {word.upos}",
        features=[f"{name} {value}" for name, value in sorted(word.feats.items())],
    )


def _degraded_view(raw: str) -> PanelView:
    # Salvage the surface form if the payload is at least a JSON object
    title = FALLBACK_TITLE
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        data = None
    if isinstance(data, dict) and isinstance(data.get("form"), str):
        title = data["form"]
    return PanelView(title=title, corrupt=True)


def _decode(snapshot: Word | str) -> tuple[Word | None, PanelView]:
    if isinstance(snapshot, Word):
        return snapshot, build_view(snapshot)
    try:
        word = decode_snapshot(snapshot)
    except CorruptAnnotation as e:
        logger.warning("CorruptAnnotation: %s", e)
        return None, _degraded_view(snapshot)
    return word, build_view(word)


def describe_snapshot(snapshot: Word | str) -> PanelView:
    """Panel contents for a snapshot or raw ``data-word`` payload.

    Holds no panel state, so it is safe to call from concurrent requests.
    An undecodable payload gives a degraded view instead of raising.
    """
    return _decode(snapshot)[1]


class InspectionPanel:
    """Single modal surface; opening a new word replaces the previous one."""

    def __init__(self, modal_factory: Callable[[], Modal] = Modal) -> None:
        self._modal_factory = modal_factory
        self._modal: Modal | None = None
        self._snapshot: Word | None = None
        self._view: PanelView | None = None

    @property
    def is_open(self) -> bool:
        return self._modal is not None and self._modal.is_open

    @property
    def modal(self) -> Modal | None:
        return self._modal

    @property
    def snapshot(self) -> Word | None:
        return self._snapshot

    @property
    def view(self) -> PanelView | None:
        return self._view

    def open(self, snapshot: Word | str) -> PanelView:
        """Show a word snapshot, or a raw ``data-word`` payload.

        An undecodable payload opens a degraded panel instead of raising.
        """
        if self.is_open:
            self.close()

        word, view = _decode(snapshot)

        modal = self._modal_factory()
        modal.set_title(view.title)
        if not view.corrupt:
            modal.content_el.create_el("p", text=view.summary)
            ul = modal.content_el.create_el("ul")
            for entry in view.features:
                ul.create_el("li", text=entry)
        modal.open()

        self._modal = modal
        self._snapshot = word
        self._view = view
        return view

    def close(self) -> None:
        if self._modal is not None:
            self._modal.close()
        self._modal = None
        self._snapshot = None
        self._view = None
