# midi/errors.py


class MidiError(Exception):
    """Base class for everything the decoder and sequencer report."""


class TruncatedStream(MidiError):
    """Fewer bytes were available than a decode step required."""

    def __init__(self, wanted: int, available: int):
        super().__init__(f"stream truncated: wanted {wanted} byte(s), {available} left")
        self.wanted = wanted
        self.available = available


class InvalidChunkMagic(MidiError):
    def __init__(self, expected: bytes, found: bytes):
        super().__init__(f"bad chunk magic: expected {expected!r}, found {found!r}")
        self.expected = expected
        self.found = found


class UnsupportedFormat(MidiError):
    pass


class TrackNotFound(MidiError):
    def __init__(self, index: int, count: int):
        super().__init__(f"track {index} requested but file has {count} track(s)")
        self.index = index
        self.count = count


class PitchOutOfRange(MidiError):
    def __init__(self, pitch: int, limit: int):
        super().__init__(f"pitch code {pitch} outside frequency table (0..{limit - 1})")
        self.pitch = pitch
        self.limit = limit


class UnbalancedNoteEvents(MidiError):
    def __init__(self, note_on: int, note_off: int):
        super().__init__(f"not equal count of events: note_on = {note_on} note_off = {note_off}")
        self.note_on = note_on
        self.note_off = note_off


class OverlappingNote(MidiError):
    """Same pitch re-triggered before release. Collected, never raised."""

    def __init__(self, pitch: int, time_ms: float, channel: int):
        super().__init__(f"overlapping note {pitch} on channel {channel} @ {time_ms:.3f}ms")
        self.pitch = pitch
        self.time_ms = time_ms
        self.channel = channel


class InvalidTempo(MidiError):
    """TEMPO meta payload that is not three bytes of non-zero microseconds."""
