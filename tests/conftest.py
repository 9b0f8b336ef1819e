"""Shared fixtures: a small synthetic corpus."""

import pytest

from passage_gloss.corpus import CorpusIndex


def _word(form, lemma="", upos="X", feats=None, misc=None):
    return {
        "form": form,
        "lemma": lemma or form.lower(),
        "upos": upos,
        "feats": feats or {},
        "misc": misc or {},
    }


CORPUS_DATA = {
    "order": {
        "Mark": [[None, "s1"]],
        # Chapter 1: six slots, verse 3 empty. Chapter 2: "e" covers 1-2.
        "Test": [
            [None, "a", "b", None, "c", "d"],
            [None, "e", "e", "f"],
        ],
        "1 Corinthians": [[None, "a"]],
    },
    "sentences": {
        "s1": [
            _word("Ἀρχὴ", "ἀρχή", "NOUN", {"Case": "Nom"}),
        ],
        "a": [
            _word("Alpha", upos="NOUN", feats={"Number": "Sing", "Case": "Nom"}),
            _word("beta", upos="VERB", misc={"SpaceAfter": "No"}),
            _word(".", upos="PUNCT"),
        ],
        "b": [_word("Gamma", upos="NOUN", misc={"SpaceAfter": "Yes"})],
        "c": [_word("Delta", upos="NOUN")],
        "d": [_word("Epsilon", upos="NOUN")],
        "e": [_word("Zeta", upos="NOUN"), _word("eta", upos="ADJ")],
        "f": [_word("Theta", upos="NOUN")],
    },
}


@pytest.fixture(scope="module")
def index():
    """Synthetic corpus index shared across a test module."""
    return CorpusIndex.from_dict(CORPUS_DATA)


@pytest.fixture
def corpus_data():
    """The raw JSON-shaped data behind the ``index`` fixture."""
    return CORPUS_DATA
