"""Plugin wiring: load the corpus and register the ``passage`` block processor."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel

from passage_gloss.corpus import (
    CORPUS_PATH,
    CorpusIndex,
    CorpusLoadFailure,
    load_corpus,
)
from passage_gloss.host import BlockRegistry
from passage_gloss.inspector import InspectionPanel
from passage_gloss.renderer import WORD_CLASS, AnnotationRenderer

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class PluginSettings(BaseModel):
    """Runtime settings for the passage plugin."""

    corpus_path: Path = CORPUS_PATH
    language: str = "passage"
    word_class: str = WORD_CLASS
    # Render a sentence spanning several verses once instead of once per verse
    collapse_repeats: bool = False

    @classmethod
    def from_env(cls) -> PluginSettings:
        return cls(collapse_repeats=_env_flag("PASSAGE_COLLAPSE_REPEATS"))


class PassagePlugin:
    """Owns the corpus index, renderer and inspection panel."""

    def __init__(
        self,
        registry: BlockRegistry,
        settings: PluginSettings | None = None,
        index: CorpusIndex | None = None,
    ) -> None:
        self.registry = registry
        self.settings = settings or PluginSettings.from_env()
        self.index = index
        self.panel = InspectionPanel()
        self.renderer: AnnotationRenderer | None = None

    @property
    def active(self) -> bool:
        return self.renderer is not None

    def onload(self) -> bool:
        """Load the corpus and register the block processor.

        Returns False, leaving nothing registered, if the corpus fails to load.
        """
        if self.index is None:
            try:
                self.index = load_corpus(self.settings.corpus_path)
            except CorpusLoadFailure as e:
                logger.error("Passage rendering disabled: %s", e)
                return False

        self.renderer = AnnotationRenderer(
            self.index,
            panel=self.panel,
            word_class=self.settings.word_class,
            collapse=self.settings.collapse_repeats,
        )
        self.registry.register(self.settings.language, self.renderer.render_block)
        logger.info("Registered '%s' block processor", self.settings.language)
        return True

    def onunload(self) -> None:
        self.registry.unregister(self.settings.language)
        self.panel.close()
        self.renderer = None
