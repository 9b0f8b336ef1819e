"""Passage reference parsing.

Supported format: ``<book> <chapter>:<verse>`` with an optional ``-<verse>``
range suffix, e.g. "John 3:16", "John 3:16-18", "1 Corinthians 13:4-7".

Only syntax is checked here.  Whether the book, chapter or verse exists in
the corpus is decided by the resolver.
"""

from __future__ import annotations

import re

from passage_gloss.models import ReferenceRange

# Book: one or more word tokens separated by spaces, matched greedily up to
# the chapter:verse part.
REFERENCE_PATTERN = re.compile(r"(\w+(?: \w+)*) (\d+):(\d+)(?:-(\d+))?")


class MalformedReference(ValueError):
    """The reference text does not match ``<book> <chapter>:<verse>``."""


def parse(text: str) -> ReferenceRange:
    """Parse the first reference found in ``text``.

    Raises:
        MalformedReference: If no chapter:verse reference is present.

    Examples:
        >>> parse("John 3:16")
        ReferenceRange(book='John', chapter=3, start_verse=16, end_verse=16)
    """
    match = REFERENCE_PATTERN.search(text.strip())
    if match is None:
        raise MalformedReference(
            f"Invalid reference format: '{text.strip()}'. "
            "Expected format: 'Book Chapter:Verse' (e.g., 'John 3:16')."
        )

    book, chapter, start, end = match.groups()
    start_verse = int(start)
    return ReferenceRange(
        book=book,
        chapter=int(chapter),
        start_verse=start_verse,
        end_verse=int(end) if end is not None else start_verse,
    )


def format_reference(ref: ReferenceRange) -> str:
    """Canonical display form, e.g. "John 3:16-18"."""
    base = f"{ref.book} {ref.chapter}:{ref.start_verse}"
    if ref.end_verse != ref.start_verse:
        return f"{base}-{ref.end_verse}"
    return base
