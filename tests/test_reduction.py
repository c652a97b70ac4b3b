from config import ReductionConfig
from notes.model import Note
from notes.reduction import HighestNoteReduction, LastNoteReduction, make_reduction


def _n(pitch, start, end, vel=100):
    return Note(pitch, vel, 0, start, end)


def _spans(notes):
    return [(n.pitch, n.start, n.end) for n in notes]


def test_make_reduction():
    assert isinstance(make_reduction("highest"), HighestNoteReduction)
    assert isinstance(make_reduction("last"), LastNoteReduction)


def test_last_note_cuts_previous():
    notes = [_n(60, 0, 1000), _n(64, 500, 1500)]
    out = LastNoteReduction().apply(notes, ReductionConfig())
    assert _spans(out) == [(60, 0, 500), (64, 500, 1500)]
    # input notes are left untouched
    assert notes[0].end == 1000


def test_last_note_chord_keeps_one():
    out = LastNoteReduction().apply([_n(60, 0, 1000), _n(64, 0, 1000)], ReductionConfig())
    assert len(out) == 1


def test_highest_keeps_melody():
    notes = [_n(48, 0, 2000), _n(72, 500, 1000), _n(50, 1200, 1500)]
    out = HighestNoteReduction().apply(notes, ReductionConfig())
    assert _spans(out) == [(48, 0, 500), (72, 500, 1000), (50, 1200, 1500)]


def test_highest_trims_lower_note_under_higher():
    notes = [_n(72, 0, 1000), _n(60, 500, 1500), _n(55, 600, 900)]
    out = HighestNoteReduction().apply(notes, ReductionConfig())
    assert _spans(out) == [(72, 0, 1000), (60, 1000, 1500)]


def test_highest_chord_picks_top():
    out = HighestNoteReduction().apply([_n(60, 0, 500), _n(67, 0, 500), _n(64, 0, 500)],
                                       ReductionConfig())
    assert _spans(out) == [(67, 0, 500)]


def test_min_velocity_and_unclosed_dropped():
    notes = [_n(60, 0, 100, vel=10), _n(62, 100, 200), Note(64, 100, 0, 300)]
    out = LastNoteReduction().apply(notes, ReductionConfig(min_velocity=20))
    assert _spans(out) == [(62, 100, 200)]


def test_zero_length_dropped():
    out = LastNoteReduction().apply([_n(60, 50, 50), _n(62, 100, 200)], ReductionConfig())
    assert _spans(out) == [(62, 100, 200)]
