# render/script.py
"""MikroTik RouterOS script output.

    :beep frequency=440 length=1000ms;
    :delay 1000ms;
"""
from typing import List, Optional

from config import BuildConfig
from notes.model import MetaText, Note, Sequence
from notes.pitch import NOTES_IN_OCTAVE, check_pitch, frequency, note_name
from midi.events import CUE_POINT, LYRIC_TEXT, TEXT_MARKER

REPO_URL = "https://github.com/altucor/midi-to-mikrotik-go"

TEXT_LABELS = {
    LYRIC_TEXT: "Lyric",
    TEXT_MARKER: "Marker",
    CUE_POINT: "Cue point",
}


def time_as_text(ms: float) -> str:
    """HH:MM:SS:MS"""
    t = int(ms)
    hh = (t // (1000 * 60 * 60)) % 24
    mm = (t // (1000 * 60)) % 60
    ss = (t // 1000) % 60
    return f"{hh:02d}:{mm:02d}:{ss:02d}:{t % 1000:03d}"


def render_header(seq: Sequence, notes_count: int, source_name: str) -> str:
    lines = [
        "#----------------File Description-----------------#",
        "# This file generated by Midi To Mikrotik Converter",
        f"# Visit app repo: {REPO_URL}",
        f"# Original midi file name/path: {source_name}",
        f"# Milliseconds per pulse: {seq.ms_per_pulse:f}",
        f"# Track index: {seq.track}",
        f"# MIDI Channel: {seq.channel}",
        f"# Track BPM: {seq.bpm}",
        f"# Number of notes: {notes_count}",
        f"# Track length: {time_as_text(seq.length_ms)} HH:MM:SS:MS",
        f"# Track name: {seq.track_name}",
        f"# Instrument name: {seq.instrument_name}",
        f"# Track copyright: {seq.copyright}",
        "#-------------------------------------------------#",
    ]
    return "\n".join(lines) + "\n\n"


def _shifted(pitch: int, cfg: BuildConfig) -> int:
    return check_pitch(pitch + cfg.octave_shift * NOTES_IN_OCTAVE + cfg.note_shift)


def render_note(note: Note, cfg: BuildConfig) -> str:
    code = _shifted(note.pitch, cfg)
    freq = frequency(code) + cfg.fine_tuning
    length = f"{note.dur:f}ms;"
    out = f":beep frequency={freq:f} length={length}"
    if cfg.comments:
        out += f" # {note_name(code)}"
        if cfg.fine_tuning != 0:
            out += f" {cfg.fine_tuning:+.3f}Hz"
        out += f" @ {time_as_text(note.start)}"
    out += "\n"
    out += f":delay {length}\n"
    return out


def _render_text(t: MetaText) -> str:
    label = TEXT_LABELS.get(t.kind, "Text")
    text = " ".join(t.text.splitlines())
    return f"# {label} @ {time_as_text(t.time_ms)}: {text}\n"


def render_body(notes: List[Note], texts: List[MetaText], cfg: BuildConfig) -> str:
    parts = []
    pending = sorted(texts, key=lambda t: t.time_ms) if cfg.comments else []
    ti = 0
    now = 0.0
    for n in notes:
        while ti < len(pending) and pending[ti].time_ms <= n.start:
            parts.append(_render_text(pending[ti]))
            ti += 1
        if n.start > now:
            parts.append(f":delay {n.start - now:f}ms;\n")
        parts.append(render_note(n, cfg))
        now = n.end
    for t in pending[ti:]:
        parts.append(_render_text(t))
    return "".join(parts)


def render_script(seq: Sequence, cfg: BuildConfig, source_name: str, notes: Optional[List[Note]] = None) -> str:
    """notes defaults to seq.notes; pass a reduced list to render that instead.

    Notes must not overlap: one beeper, one tone at a time.
    """
    if notes is None:
        notes = seq.notes
    return render_header(seq, len(notes), source_name) + render_body(notes, seq.texts, cfg)
