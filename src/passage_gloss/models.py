from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SpaceAfter(str, Enum):
    """Whether a space follows a token in the surface text."""

    YES = "Yes"
    NO = "No"
    UNSPECIFIED = ""  # Treated as YES

    @classmethod
    def from_misc(cls, misc: dict[str, str]) -> SpaceAfter:
        value = misc.get("SpaceAfter")
        if value == "No":
            return cls.NO
        if value == "Yes":
            return cls.YES
        return cls.UNSPECIFIED

    @property
    def follows(self) -> bool:
        return self is not SpaceAfter.NO


class Word(BaseModel):
    """One annotated token."""

    model_config = ConfigDict(frozen=True)

    form: str
    lemma: str = ""
    upos: str = ""
    feats: dict[str, str] = Field(default_factory=dict)
    misc: dict[str, str] = Field(default_factory=dict)

    @property
    def space_after(self) -> SpaceAfter:
        return SpaceAfter.from_misc(self.misc)


class ReferenceRange(BaseModel):
    book: str
    chapter: int
    start_verse: int
    end_verse: int


class BookInfo(BaseModel):
    name: str
    chapters: int


class RenderedWord(BaseModel):
    handle: str
    form: str
    lemma: str = ""
    space_after: bool = True


class RenderedLine(BaseModel):
    sentence_id: str
    words: list[RenderedWord]


class PassageResult(BaseModel):
    reference: str
    range: ReferenceRange
    sentence_ids: list[str]
    lines: list[RenderedLine]


class PanelView(BaseModel):
    """What the inspection panel displays for one word."""

    title: str
    summary: str = ""
    features: list[str] = Field(default_factory=list)
    corrupt: bool = False
