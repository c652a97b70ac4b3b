# midi/parser.py
import logging
from dataclasses import dataclass, field
from typing import List

from midi.errors import InvalidChunkMagic
from midi.events import Event, EventCode, decode_event
from midi.stream import ByteCursor
from midi.vlv import read_vlv

log = logging.getLogger(__name__)

MTHD_MAGIC = b"MThd"
MTRK_MAGIC = b"MTrk"
MTHD_LENGTH = 6
UNKNOWN_TEXT = "<UNKNOWN>"

MIDI_V0 = 0  # single track
MIDI_V1 = 1  # simultaneous tracks, track 0 holds tempo/service info
MIDI_V2 = 2  # independent sequences


@dataclass(frozen=True)
class MthdHeader:
    magic: bytes
    length: int
    format: int
    track_count: int
    ppqn: int


@dataclass
class MtrkChunk:
    magic: bytes
    length: int
    predelay: int = 0
    events: List[Event] = field(default_factory=list)


@dataclass
class MidiFile:
    header: MthdHeader
    tracks: List[MtrkChunk] = field(default_factory=list)


def decode_track(cursor: ByteCursor) -> MtrkChunk:
    magic = cursor.read(4)
    if magic != MTRK_MAGIC:
        raise InvalidChunkMagic(MTRK_MAGIC, magic)
    length = cursor.read_u32()
    # whole payload up front; an overlong declared length fails here
    payload = ByteCursor(cursor.read(length))

    track = MtrkChunk(magic, length, predelay=read_vlv(payload))
    while not payload.exhausted():
        track.events.append(decode_event(payload))
    log.debug("track: %d bytes, %d events", length, len(track.events))
    return track


def decode_header(cursor: ByteCursor) -> MthdHeader:
    magic = cursor.read(4)
    if magic != MTHD_MAGIC:
        raise InvalidChunkMagic(MTHD_MAGIC, magic)
    length = cursor.read_u32()
    fmt, count, ppqn = cursor.read_u16(), cursor.read_u16(), cursor.read_u16()
    if length > MTHD_LENGTH:
        cursor.read(length - MTHD_LENGTH)
    return MthdHeader(magic, length, fmt, count, ppqn)


def decode_file(data: bytes) -> MidiFile:
    """Decode a whole SMF buffer. Tracks follow one another back to back."""
    cursor = ByteCursor(data)
    header = decode_header(cursor)
    log.debug("Format: %d, Tracks: %d, PPQN: %d", header.format, header.track_count, header.ppqn)
    midi = MidiFile(header)
    for i in range(header.track_count):
        log.debug("decoding track %d", i)
        midi.tracks.append(decode_track(cursor))
    return midi


def load_midi(path: str) -> MidiFile:
    with open(path, "rb") as f:
        data = f.read()
    return decode_file(data)


def find_first_event(track: MtrkChunk, code: EventCode, meta: bool = True) -> Event:
    for ev in track.events:
        if ev.code == code and ev.is_meta == meta:
            return ev
    return Event.empty()


def text_from_event(event: Event) -> str:
    if not event.data:
        return UNKNOWN_TEXT
    return event.data.decode("utf-8", errors="replace")
