# notes/reduction.py
from dataclasses import replace
from typing import List

from config import ReductionConfig
from notes.model import Note


class ReductionStrategy:
    """Folds a polyphonic note list down to what a single beeper can play."""

    def apply(self, notes: List[Note], cfg: ReductionConfig) -> List[Note]:
        filt = [n for n in notes if n.closed and n.velocity >= cfg.min_velocity]
        filt.sort(key=lambda n: (n.start, -n.pitch))
        out: List[Note] = []
        for n in filt:
            self._place(out, replace(n))
        return [n for n in out if n.dur > 0]

    def _place(self, out: List[Note], n: Note):
        raise NotImplementedError


class LastNoteReduction(ReductionStrategy):
    """A new note cuts whatever is still sounding."""

    def _place(self, out: List[Note], n: Note):
        if out and out[-1].end > n.start:
            out[-1].end = n.start
            if out[-1].dur <= 0:
                out.pop()
        out.append(n)


class HighestNoteReduction(ReductionStrategy):
    """Melody line: the higher pitch wins wherever two notes overlap."""

    def _place(self, out: List[Note], n: Note):
        if out and out[-1].end > n.start:
            prev = out[-1]
            if n.pitch > prev.pitch:
                prev.end = n.start
                if prev.dur <= 0:
                    out.pop()
            else:
                if n.end <= prev.end:
                    return
                n.start = prev.end
        out.append(n)


def make_reduction(mode: str) -> ReductionStrategy:
    return HighestNoteReduction() if mode == "highest" else LastNoteReduction()
