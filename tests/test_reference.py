"""Tests for passage reference parsing."""

import pytest

from passage_gloss.models import ReferenceRange
from passage_gloss.reference import MalformedReference, format_reference, parse


class TestParse:
    def test_single_verse(self):
        ref = parse("John 3:16")
        assert ref == ReferenceRange(
            book="John", chapter=3, start_verse=16, end_verse=16
        )

    def test_numbered_book_with_range(self):
        ref = parse("1 Corinthians 13:4-7")
        assert ref.book == "1 Corinthians"
        assert ref.chapter == 13
        assert ref.start_verse == 4
        assert ref.end_verse == 7

    def test_surrounding_whitespace(self):
        ref = parse("\n  Mark 1:1  \n")
        assert ref.book == "Mark"
        assert ref.start_verse == ref.end_verse == 1

    def test_first_reference_wins(self):
        ref = parse("Mark 1:1\nJohn 3:16")
        assert ref.book == "Mark"

    def test_out_of_corpus_numbers_are_not_parse_errors(self):
        ref = parse("Nowhere 999:0")
        assert ref.chapter == 999
        assert ref.start_verse == 0

    @pytest.mark.parametrize(
        "text", ["not a reference", "", "John 3", "John :16", "3:16"]
    )
    def test_malformed(self, text):
        with pytest.raises(MalformedReference):
            parse(text)

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError, match="Invalid reference format"):
            parse("John three sixteen")


class TestFormatReference:
    def test_single(self):
        assert format_reference(parse("John 3:16")) == "John 3:16"

    def test_range(self):
        assert format_reference(parse("John 3:16-18")) == "John 3:16-18"

    def test_degenerate_range(self):
        assert format_reference(parse("John 3:16-16")) == "John 3:16"
