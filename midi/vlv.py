# midi/vlv.py
from midi.stream import ByteCursor

CONTINUATION_BIT = 0x80
DATA_MASK = 0x7F
# accumulator is 32 bits wide; extra groups shift the high bits out
_ACC_MASK = 0xFFFFFFFF


def read_vlv(cursor: ByteCursor) -> int:
    """Decode one variable-length value (7 bits per byte, MSB first).

    No cap on the number of groups: overlong input wraps the 32-bit
    accumulator instead of being rejected.
    """
    value = 0
    while True:
        b = cursor.read_byte()
        value = ((value << 7) | (b & DATA_MASK)) & _ACC_MASK
        if not (b & CONTINUATION_BIT):
            return value


def encode_vlv(value: int) -> bytes:
    if value < 0:
        raise ValueError("VLV cannot encode negative values")
    out = [value & DATA_MASK]
    value >>= 7
    while value:
        out.append((value & DATA_MASK) | CONTINUATION_BIT)
        value >>= 7
    return bytes(reversed(out))
