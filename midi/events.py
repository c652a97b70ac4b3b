# midi/events.py
import logging
from dataclasses import dataclass

from midi.stream import ByteCursor
from midi.vlv import read_vlv

log = logging.getLogger(__name__)

# main command (high nibble of the status byte); low nibble is the channel
NOTE_OFF = 0x08
NOTE_ON = 0x09
POLYPHONIC_AFTERTOUCH = 0x0A
CONTROL_MODE_CHANGE = 0x0B
PROGRAM_CHANGE = 0x0C
CHANNEL_AFTERTOUCH = 0x0D
PITCH_WHEEL = 0x0E
SYSTEM_EVENT = 0x0F

# low nibble of SYSTEM_EVENT
SYS_EXCLUSIVE = 0x00
SYS_META_EVENT = 0x0F

# meta event types (second byte after 0xFF)
SEQUENCE_NUMBER = 0x00
TEXT = 0x01
COPYRIGHT = 0x02
TRACK_NAME = 0x03
INSTRUMENT_NAME = 0x04
LYRIC_TEXT = 0x05
TEXT_MARKER = 0x06
CUE_POINT = 0x07
PROGRAM_PATCH_NAME = 0x08
DEVICE_PORT_NAME = 0x09
MIDI_CHANNEL = 0x20
MIDI_PORT = 0x21
TRACK_END = 0x2F
TEMPO = 0x51
SMPTE_OFFSET = 0x54
TIME_SIGNATURE = 0x58
KEY_SIGNATURE = 0x59
PROPRIETARY_EVENT = 0x7F

# channel commands carrying two data bytes; everything else carries one
TWO_BYTE_COMMANDS = frozenset({
    NOTE_OFF, NOTE_ON, POLYPHONIC_AFTERTOUCH, CONTROL_MODE_CHANGE, PITCH_WHEEL,
})


@dataclass(frozen=True)
class EventCode:
    main: int   # high nibble
    sub: int    # low nibble: channel, system sub-command or meta type bits

    @classmethod
    def from_byte(cls, b: int) -> "EventCode":
        return cls((b >> 4) & 0x0F, b & 0x0F)

    @property
    def is_meta(self) -> bool:
        return self.main == SYSTEM_EVENT and self.sub == SYS_META_EVENT

    @property
    def full_cmd(self) -> int:
        return (self.main << 4) | self.sub


@dataclass(frozen=True)
class Event:
    is_meta: bool
    code: EventCode
    data: bytes = b""
    delay: int = 0      # delta-time (pulses) to the next event

    @classmethod
    def empty(cls) -> "Event":
        """Sentinel returned by lookups that find nothing."""
        return cls(False, EventCode(0, 0))

    @property
    def channel(self) -> int:
        return self.code.sub


def decode_event(cursor: ByteCursor) -> Event:
    """Read one event plus its trailing delta-time.

    Unknown channel commands are accepted with a single data byte.
    A zero-length TRACK_END carries no trailing delta.
    """
    code = EventCode.from_byte(cursor.read_byte())
    log.debug("event cmd 0x%02X", code.full_cmd)

    if code.is_meta:
        meta = EventCode.from_byte(cursor.read_byte())
        size = read_vlv(cursor)
        if meta.full_cmd == TRACK_END and size == 0:
            return Event(True, meta)
        data = cursor.read(size)
        return Event(True, meta, data, read_vlv(cursor))

    data = cursor.read(1)
    if code.main in TWO_BYTE_COMMANDS:
        data += cursor.read(1)
    return Event(False, code, data, read_vlv(cursor))
