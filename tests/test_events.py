import pytest

from midi.errors import TruncatedStream
from midi.events import (
    NOTE_ON, PITCH_WHEEL, PROGRAM_CHANGE, TEMPO, TRACK_END,
    EventCode, Event, decode_event,
)
from midi.stream import ByteCursor


def test_event_code_split():
    code = EventCode.from_byte(0x93)
    assert code.main == NOTE_ON
    assert code.sub == 3
    assert code.full_cmd == 0x93
    assert not code.is_meta


def test_event_code_meta():
    assert EventCode.from_byte(0xFF).is_meta
    assert not EventCode.from_byte(0xF0).is_meta
    assert EventCode.from_byte(TRACK_END).full_cmd == 0x2F


def test_note_on_reads_two_bytes_and_delay():
    c = ByteCursor(b"\x91\x3C\x64\x83\x60")
    ev = decode_event(c)
    assert not ev.is_meta
    assert ev.code == EventCode(NOTE_ON, 1)
    assert ev.channel == 1
    assert ev.data == b"\x3C\x64"
    assert ev.delay == 480
    assert c.exhausted()


def test_program_change_reads_one_byte():
    ev = decode_event(ByteCursor(b"\xC2\x05\x10"))
    assert ev.code.main == PROGRAM_CHANGE
    assert ev.data == b"\x05"
    assert ev.delay == 0x10


def test_pitch_wheel_reads_two_bytes():
    ev = decode_event(ByteCursor(b"\xE0\x00\x40\x00"))
    assert ev.code.main == PITCH_WHEEL
    assert ev.data == b"\x00\x40"


def test_unknown_command_accepted_with_one_byte():
    ev = decode_event(ByteCursor(b"\x3E\x40\x00"))
    assert ev.code == EventCode(0x3, 0xE)
    assert ev.data == b"\x40"
    assert ev.delay == 0


def test_meta_event_payload_and_delay():
    ev = decode_event(ByteCursor(b"\xFF\x51\x03\x07\xA1\x20\x00"))
    assert ev.is_meta
    assert ev.code.full_cmd == TEMPO
    assert ev.data == b"\x07\xA1\x20"
    assert ev.delay == 0


def test_track_end_reads_no_delay():
    c = ByteCursor(b"\xFF\x2F\x00\x05")
    ev = decode_event(c)
    assert ev.is_meta
    assert ev.code.full_cmd == TRACK_END
    assert ev.data == b""
    assert c.remaining == 1


def test_track_end_with_payload_reads_delay():
    c = ByteCursor(b"\xFF\x2F\x01\xAA\x05")
    ev = decode_event(c)
    assert ev.data == b"\xAA"
    assert ev.delay == 5
    assert c.exhausted()


@pytest.mark.parametrize("raw", [
    b"\x90\x3C",              # missing velocity
    b"\x90\x3C\x64",          # missing delay
    b"\xFF\x03\x05abc",       # meta payload short
    b"\xFF",                  # missing meta type
])
def test_truncated_event(raw):
    with pytest.raises(TruncatedStream):
        decode_event(ByteCursor(raw))


def test_empty_sentinel():
    ev = Event.empty()
    assert not ev.is_meta
    assert ev.data == b""
    assert ev.delay == 0
