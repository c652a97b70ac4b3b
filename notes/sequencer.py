# notes/sequencer.py
import logging
from dataclasses import dataclass, field
from typing import Dict, List

from midi.errors import (
    OverlappingNote, TrackNotFound, UnbalancedNoteEvents, UnsupportedFormat,
)
from midi.events import (
    COPYRIGHT, CUE_POINT, INSTRUMENT_NAME, LYRIC_TEXT, NOTE_OFF, NOTE_ON,
    TEXT, TEXT_MARKER, TRACK_NAME, Event, EventCode,
)
from midi.parser import MIDI_V0, MIDI_V1, MidiFile, MtrkChunk, find_first_event, text_from_event
from notes.model import MetaText, Note, Sequence
from notes.pitch import check_pitch
from timeline.timing import TimingConverter

log = logging.getLogger(__name__)

SURFACED_TEXTS = frozenset({TEXT, LYRIC_TEXT, TEXT_MARKER, CUE_POINT})


class NoteSequencer:
    """Turns one track's events, filtered to one channel, into closed notes."""

    def __init__(self, timing: TimingConverter, channel: int):
        self.timing = timing
        self.channel = channel

    def run(self, track: MtrkChunk, seq: Sequence) -> Sequence:
        now = self.timing.to_ms(track.predelay)
        open_notes: Dict[int, Note] = {}

        for ev in track.events:
            if ev.is_meta:
                if ev.code.full_cmd in SURFACED_TEXTS and ev.data:
                    seq.texts.append(MetaText(now, ev.code.full_cmd, text_from_event(ev)))
            elif ev.channel == self.channel and ev.code.main in (NOTE_ON, NOTE_OFF):
                self._note_event(ev, now, open_notes, seq)
            now += self.timing.to_ms(ev.delay)

        seq.length_ms = now
        if open_notes or seq.note_on != seq.note_off:
            raise UnbalancedNoteEvents(seq.note_on, seq.note_off)
        return seq

    def _note_event(self, ev: Event, now: float, open_notes: Dict[int, Note], seq: Sequence):
        pitch = check_pitch(ev.data[0])
        velocity = ev.data[1]
        # note-on with zero velocity is a release
        if ev.code.main == NOTE_ON and velocity > 0:
            if pitch in open_notes:
                diag = OverlappingNote(pitch, now, self.channel)
                seq.diagnostics.append(diag)
                log.warning("%s", diag)
                return
            note = Note(pitch, velocity, self.channel, now)
            open_notes[pitch] = note
            seq.note_on += 1
            seq.notes.append(note)
            return

        note = open_notes.pop(pitch, None)
        if note is None:
            # release of a suppressed re-trigger, or of nothing at all
            log.debug("release of pitch %d with no open note @ %.3fms", pitch, now)
            return
        note.close(now)
        seq.note_off += 1


def _check_playable(midi: MidiFile):
    fmt = midi.header.format
    if fmt not in (MIDI_V0, MIDI_V1):
        raise UnsupportedFormat(f"unsupported midi format: {fmt}")
    ppqn = midi.header.ppqn
    if ppqn == 0 or ppqn & 0x8000:
        raise UnsupportedFormat(f"unsupported time division: 0x{ppqn:04X}")


def build_sequence(midi: MidiFile, track: int = 0, channel: int = 0, bpm: int = 0) -> Sequence:
    """Convert one (track, channel) selection. bpm=0 derives tempo from the file."""
    _check_playable(midi)
    if not 0 <= track < len(midi.tracks):
        raise TrackNotFound(track, len(midi.tracks))

    timing = TimingConverter.for_file(midi, bpm)
    log.info("BPM: %d, PPQN: %d, ms per pulse: %f", timing.bpm, timing.ppqn, timing.ms_per_pulse)

    chunk = midi.tracks[track]
    seq = Sequence(track=track, channel=channel, bpm=timing.bpm, ms_per_pulse=timing.ms_per_pulse)
    seq.track_name = text_from_event(find_first_event(chunk, EventCode.from_byte(TRACK_NAME)))
    seq.instrument_name = text_from_event(find_first_event(chunk, EventCode.from_byte(INSTRUMENT_NAME)))
    seq.copyright = text_from_event(find_first_event(chunk, EventCode.from_byte(COPYRIGHT)))
    return NoteSequencer(timing, channel).run(chunk, seq)


@dataclass
class ChannelCounts:
    on: int = 0
    off: int = 0


@dataclass
class TrackSummary:
    index: int
    name: str
    channels: Dict[int, ChannelCounts] = field(default_factory=dict)


def analyze(midi: MidiFile) -> List[TrackSummary]:
    """Per track: name and NOTE_ON/NOTE_OFF counts for every channel seen."""
    out: List[TrackSummary] = []
    for i, chunk in enumerate(midi.tracks):
        name = text_from_event(find_first_event(chunk, EventCode.from_byte(TRACK_NAME)))
        summary = TrackSummary(i, name)
        for ev in chunk.events:
            if ev.is_meta or ev.code.main not in (NOTE_ON, NOTE_OFF):
                continue
            counts = summary.channels.setdefault(ev.channel, ChannelCounts())
            if ev.code.main == NOTE_ON and ev.data[1] > 0:
                counts.on += 1
            else:
                counts.off += 1
        out.append(summary)
    return out
