# notes/model.py
from dataclasses import dataclass, field
from typing import List, Optional

from midi.errors import OverlappingNote
from midi.parser import UNKNOWN_TEXT


@dataclass
class Note:
    pitch: int      # MIDI note number
    velocity: int
    channel: int
    start: float    # ms
    end: Optional[float] = None  # ms, set once by the matching release

    @property
    def closed(self) -> bool:
        return self.end is not None

    @property
    def dur(self) -> float:
        return 0.0 if self.end is None else self.end - self.start

    def close(self, end: float):
        if self.end is not None:
            raise ValueError(f"note {self.pitch} @ {self.start}ms already closed")
        self.end = end


@dataclass(frozen=True)
class MetaText:
    time_ms: float
    kind: int       # meta type, e.g. TEXT_MARKER
    text: str


@dataclass
class Sequence:
    """Notes of one (track, channel) selection plus what the script header needs."""
    track: int
    channel: int
    bpm: int
    ms_per_pulse: float
    notes: List[Note] = field(default_factory=list)
    track_name: str = UNKNOWN_TEXT
    instrument_name: str = UNKNOWN_TEXT
    copyright: str = UNKNOWN_TEXT
    length_ms: float = 0.0
    note_on: int = 0
    note_off: int = 0
    texts: List[MetaText] = field(default_factory=list)
    diagnostics: List[OverlappingNote] = field(default_factory=list)
