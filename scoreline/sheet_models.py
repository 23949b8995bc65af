"""Data models for sheet music rendering outputs."""

from dataclasses import dataclass


@dataclass(frozen=True)
class VexflowNote:
    """A single VexFlow note or rest token."""

    keys: list[str]
    duration: str
    accidentals: list[str | None]


@dataclass(frozen=True)
class VexflowMeasure:
    """The notes of one measure on a single staff."""

    number: int
    notes: list[VexflowNote]


@dataclass(frozen=True)
class ScoreDocument:
    """Renderer-neutral view of a parsed score consumed by the VexFlow renderer."""

    title: str
    clef: str
    time_signature: str
    beats: int
    beat_value: int
    measures: list[VexflowMeasure]
