# timeline/timing.py
import logging

from midi.errors import InvalidTempo
from midi.events import Event, EventCode, TEMPO
from midi.parser import MidiFile, find_first_event

log = logging.getLogger(__name__)

DEFAULT_BPM = 120  # SMF default tempo, 500000 us per quarter note
US_PER_MINUTE = 60_000_000


def tempo_from_event(event: Event) -> int:
    """BPM from a TEMPO meta event (FF 51 03 tt tt tt), truncated to int."""
    if len(event.data) < 3:
        raise InvalidTempo(f"tempo event needs 3 bytes, got {len(event.data)}")
    us_per_quarter = int.from_bytes(event.data[:3], "big")
    if us_per_quarter == 0:
        raise InvalidTempo("tempo event with zero microseconds per quarter note")
    return US_PER_MINUTE // us_per_quarter


def ms_per_pulse(bpm: int, ppqn: int) -> float:
    return 60000.0 / (float(bpm) * float(ppqn))


class TimingConverter:
    """Converts pulse counts to milliseconds for a fixed BPM and PPQN."""

    def __init__(self, bpm: int, ppqn: int):
        self.bpm = bpm
        self.ppqn = ppqn
        self.ms_per_pulse = ms_per_pulse(bpm, ppqn)

    @classmethod
    def for_file(cls, midi: MidiFile, bpm: int = 0) -> "TimingConverter":
        """bpm > 0 overrides; otherwise the first TEMPO event of track 0."""
        ppqn = midi.header.ppqn
        if bpm > 0:
            return cls(bpm, ppqn)
        tempo_event = Event.empty()
        if midi.tracks:
            tempo_event = find_first_event(midi.tracks[0], EventCode.from_byte(TEMPO))
        if not tempo_event.data:
            log.warning("no tempo event in track 0, assuming %d BPM", DEFAULT_BPM)
            return cls(DEFAULT_BPM, ppqn)
        return cls(tempo_from_event(tempo_event), ppqn)

    def to_ms(self, pulses: int) -> float:
        return float(pulses) * self.ms_per_pulse
