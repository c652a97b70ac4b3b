# Byte-level builders for hand-made Standard MIDI Files.
from midi.vlv import encode_vlv

TRACK_END = b"\xFF\x2F\x00"


def meta(kind: int, data: bytes = b"") -> bytes:
    return bytes([0xFF, kind]) + encode_vlv(len(data)) + data


def tempo(us_per_quarter: int) -> bytes:
    return meta(0x51, us_per_quarter.to_bytes(3, "big"))


def note_on(pitch: int, vel: int = 100, ch: int = 0) -> bytes:
    return bytes([0x90 | ch, pitch, vel])


def note_off(pitch: int, vel: int = 64, ch: int = 0) -> bytes:
    return bytes([0x80 | ch, pitch, vel])


def body(events, predelay: int = 0, end: bool = True) -> bytes:
    """events: [(event_bytes, delay_after), ...]"""
    out = encode_vlv(predelay)
    for ev, delay in events:
        out += ev + encode_vlv(delay)
    if end:
        out += TRACK_END
    return out


def chunk(payload: bytes, magic: bytes = b"MTrk", length: int = None) -> bytes:
    if length is None:
        length = len(payload)
    return magic + length.to_bytes(4, "big") + payload


def smf(tracks, fmt: int = 1, ppqn: int = 96, count: int = None, magic: bytes = b"MThd") -> bytes:
    """tracks: list of track payloads (already passed through body())."""
    if count is None:
        count = len(tracks)
    header = magic + (6).to_bytes(4, "big") + fmt.to_bytes(2, "big") \
        + count.to_bytes(2, "big") + ppqn.to_bytes(2, "big")
    return header + b"".join(chunk(t) for t in tracks)


def conductor(bpm_us: int = 500000) -> bytes:
    return body([(meta(0x03, b"Conductor"), 0), (tempo(bpm_us), 0)])
