import logging

import pytest

from midi.errors import InvalidTempo
from midi.events import Event, EventCode, TEMPO
from midi.parser import decode_file
from smf_builder import body, conductor, meta, note_off, note_on, smf
from timeline.timing import DEFAULT_BPM, TimingConverter, ms_per_pulse, tempo_from_event


def _tempo_event(us: int) -> Event:
    return Event(True, EventCode.from_byte(TEMPO), us.to_bytes(3, "big"))


def test_tempo_from_event():
    assert tempo_from_event(Event(True, EventCode.from_byte(TEMPO), b"\x07\xA1\x20")) == 120


def test_tempo_truncates():
    assert tempo_from_event(_tempo_event(500001)) == 119
    assert tempo_from_event(_tempo_event(428571)) == 140


@pytest.mark.parametrize("data", [b"", b"\x07\xA1", b"\x00\x00\x00"])
def test_tempo_bad_payload(data):
    with pytest.raises(InvalidTempo):
        tempo_from_event(Event(True, EventCode.from_byte(TEMPO), data))


def test_ms_per_pulse():
    assert ms_per_pulse(120, 96) == pytest.approx(5.208333333)


def test_whole_quarter_is_half_second_at_120():
    t = TimingConverter(120, 96)
    assert t.to_ms(96) == 500.0
    assert t.to_ms(480) == 2500.0
    assert t.to_ms(0) == 0.0


def test_for_file_reads_track_zero_tempo():
    m = decode_file(smf([conductor(400000), body([(note_on(60), 1), (note_off(60), 0)])], ppqn=480))
    t = TimingConverter.for_file(m)
    assert t.bpm == 150
    assert t.ppqn == 480


def test_for_file_override_wins():
    m = decode_file(smf([conductor(400000)]))
    assert TimingConverter.for_file(m, bpm=90).bpm == 90


def test_for_file_without_tempo_uses_default(caplog):
    m = decode_file(smf([body([(meta(0x03, b"x"), 0)])]))
    with caplog.at_level(logging.WARNING):
        t = TimingConverter.for_file(m)
    assert t.bpm == DEFAULT_BPM
    assert "no tempo event" in caplog.text
