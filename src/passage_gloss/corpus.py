"""Corpus index: the read-only book/chapter/verse -> sentence -> token data.

The index is distributed as a single JSON asset shaped like::

    {
      "order": {"Mark": [[null, "s1", "s2", "s2"], ...]},
      "sentences": {"s1": [{"form": ..., "lemma": ..., "upos": ...,
                             "feats": {...}, "misc": {...}}]}
    }

Verse slot ``v`` of a chapter holds the sentence covering verse ``v``; slot 0
is normally empty.  A sentence spanning several verses is listed once per
verse it covers.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from passage_gloss.models import BookInfo, Word

logger = logging.getLogger(__name__)

SAMPLE_CORPUS = Path(__file__).parent / "data" / "sample_grc.json"

# Corpus asset location (override with PASSAGE_CORPUS env var)
CORPUS_PATH = Path(os.environ.get("PASSAGE_CORPUS", SAMPLE_CORPUS))


class CorpusLoadFailure(RuntimeError):
    """The corpus asset could not be loaded or is inconsistent."""


Chapter = tuple[str | None, ...]


class CorpusIndex:
    """Immutable lookup over a loaded corpus.

    Build it once and pass it to every component that needs it.
    """

    def __init__(
        self,
        order: Mapping[str, Sequence[Sequence[str | None]]],
        sentences: Mapping[str, Sequence[Word]],
    ) -> None:
        self._order: Mapping[str, tuple[Chapter, ...]] = MappingProxyType(
            {
                book: tuple(tuple(slot or None for slot in ch) for ch in chapters)
                for book, chapters in order.items()
            }
        )
        self._sentences: Mapping[str, tuple[Word, ...]] = MappingProxyType(
            {sid: tuple(words) for sid, words in sentences.items()}
        )
        self._check_references()

    def _check_references(self) -> None:
        for book, chapters in self._order.items():
            for ch_num, chapter in enumerate(chapters, start=1):
                for verse, sid in enumerate(chapter):
                    if sid is not None and sid not in self._sentences:
                        raise CorpusLoadFailure(
                            f"{book} {ch_num}:{verse} refers to unknown sentence '{sid}'"
                        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CorpusIndex:
        """Build an index from the decoded JSON asset."""
        try:
            order = data["order"]
            raw_sentences = data["sentences"]
        except (KeyError, TypeError) as e:
            raise CorpusLoadFailure(f"Corpus is missing section: {e}") from e

        try:
            sentences = {
                sid: [Word.model_validate(tok) for tok in tokens]
                for sid, tokens in raw_sentences.items()
            }
        except (ValidationError, AttributeError, TypeError) as e:
            raise CorpusLoadFailure(f"Corpus sentence data is invalid: {e}") from e

        if not isinstance(order, Mapping):
            raise CorpusLoadFailure("Corpus 'order' must map book names to chapters")
        try:
            return cls(order, sentences)
        except TypeError as e:
            raise CorpusLoadFailure(f"Corpus 'order' is malformed: {e}") from e

    @property
    def order(self) -> Mapping[str, tuple[Chapter, ...]]:
        return self._order

    @property
    def sentences(self) -> Mapping[str, tuple[Word, ...]]:
        return self._sentences

    def chapters(self, book: str) -> tuple[Chapter, ...] | None:
        return self._order.get(book)

    def chapter(self, book: str, chapter: int) -> Chapter | None:
        """Return the verse slots of a 1-based chapter, or None."""
        chapters = self._order.get(book)
        if chapters is None or not 1 <= chapter <= len(chapters):
            return None
        return chapters[chapter - 1]

    def words(self, sentence_id: str) -> tuple[Word, ...]:
        return self._sentences[sentence_id]

    def list_books(self) -> list[BookInfo]:
        return [
            BookInfo(name=name, chapters=len(chapters))
            for name, chapters in self._order.items()
        ]


def load_corpus(path: Path | str = CORPUS_PATH) -> CorpusIndex:
    """Load the corpus asset from disk.

    Raises CorpusLoadFailure on any read, decode or consistency problem.
    """
    path = Path(path)
    logger.info("Loading corpus from %s ...", path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        logger.error("Corpus read failed for %s: %s", path, e)
        raise CorpusLoadFailure(f"Failed to read corpus from {path}: {e}") from e
    except json.JSONDecodeError as e:
        logger.error("Corpus decode failed for %s: %s", path, e)
        raise CorpusLoadFailure(f"Corpus at {path} is not valid JSON: {e}") from e

    index = CorpusIndex.from_dict(data)
    logger.info(
        "Loaded %d books, %d sentences", len(index.order), len(index.sentences)
    )
    return index
