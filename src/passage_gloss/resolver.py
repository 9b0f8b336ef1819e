"""Resolve a parsed reference range to the sentence ids that cover it."""

from __future__ import annotations

from collections.abc import Iterable

from passage_gloss.corpus import CorpusIndex
from passage_gloss.models import ReferenceRange


def resolve(ref: ReferenceRange, index: CorpusIndex) -> list[str]:
    """Return sentence ids for each verse in ``ref``, in verse order.

    Never raises for out-of-range input: an unknown book or chapter gives an
    empty list, and the verse range is clamped to the chapter's slots.  Empty
    verse slots are skipped.  A sentence covering several verses appears once
    per verse (see ``collapse_repeats``).
    """
    slots = index.chapter(ref.book, ref.chapter)
    if slots is None:
        return []

    sentence_ids: list[str] = []
    for verse in range(max(ref.start_verse, 0), ref.end_verse + 1):
        if verse >= len(slots):
            break
        sid = slots[verse]
        if not sid:
            continue
        sentence_ids.append(sid)
    return sentence_ids


def collapse_repeats(sentence_ids: Iterable[str]) -> list[str]:
    """Drop consecutive duplicates so a multi-verse sentence renders once."""
    collapsed: list[str] = []
    for sid in sentence_ids:
        if collapsed and collapsed[-1] == sid:
            continue
        collapsed.append(sid)
    return collapsed
