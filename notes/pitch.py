# notes/pitch.py
from typing import List

from midi.errors import PitchOutOfRange

NOTES_IN_OCTAVE = 12
OCTAVES = 10
TABLE_SIZE = NOTES_IN_OCTAVE * OCTAVES

NOTE_NAMES = ['C', 'C#', 'D', 'D#', 'E', 'F', 'F#', 'G', 'G#', 'A', 'A#', 'B']

# equal temperament, A4 (code 69) = 440 Hz; code 0 is C-1
FREQUENCIES: List[float] = [440.0 * 2.0 ** ((n - 69) / 12.0) for n in range(TABLE_SIZE)]


def check_pitch(code: int) -> int:
    if not 0 <= code < TABLE_SIZE:
        raise PitchOutOfRange(code, TABLE_SIZE)
    return code


def frequency(code: int) -> float:
    return FREQUENCIES[check_pitch(code)]


def note_name(code: int) -> str:
    """C4 for 60, A#3 for 58."""
    check_pitch(code)
    return NOTE_NAMES[code % NOTES_IN_OCTAVE] + str((code // NOTES_IN_OCTAVE) - 1)
