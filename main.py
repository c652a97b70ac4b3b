# main.py
import sys, os
sys.path.append(os.path.dirname(__file__))  # 確保能找到 config.py

import argparse
import logging
from typing import List, Optional

from config import AppConfig, BuildConfig, ReductionConfig, LogConfig
from midi.errors import MidiError
from midi.parser import MidiFile, load_midi
from notes.reduction import make_reduction
from notes.sequencer import analyze, build_sequence
from render.script import render_script
from utils.crashlog import setup_crashlog, log_exception, log_dir

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

def _init_logging(cfg: LogConfig):
    if logging.getLogger().handlers:
        return

    logging.basicConfig(level=logging.DEBUG if cfg.verbose else logging.INFO, format=LOG_FORMAT)
    if not cfg.to_file:
        return
    try:
        from logging.handlers import RotatingFileHandler
        log_path = os.path.join(log_dir(cfg.directory), "app.log")
        fh = RotatingFileHandler(log_path, maxBytes=2*1024*1024, backupCount=3, encoding="utf-8")
        fh.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(fh)
    except OSError as e:
        logging.warning("無法建立 log 檔：%s", e)

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Convert a MIDI track into a MikroTik :beep script")
    ap.add_argument('file', help="path to midi file")
    ap.add_argument('--track', type=int, default=0, help="track to extract notes from")
    ap.add_argument('--channel', type=int, default=0, help="channel to extract notes from")
    ap.add_argument('--bpm', type=int, default=0, help="custom BPM (0 = from file)")
    ap.add_argument('--octave', type=int, default=0, help="shift all notes +/- octaves")
    ap.add_argument('--note', type=int, default=0, help="shift all notes +/- semitones")
    ap.add_argument('--fine', type=float, default=0.0, help="shift all notes +/- Hz")
    ap.add_argument('--comments', action='store_true', help="comment every note")
    ap.add_argument('--print', dest='print_stdout', action='store_true', help="also print script to stdout")
    ap.add_argument('--output', default=None, help="output path (single track only)")
    ap.add_argument('--analyze', action='store_true', help="list tracks/channels with note counts")
    ap.add_argument('--all', dest='process_all', action='store_true', help="with --analyze, convert every track/channel")
    ap.add_argument('--reduction_mode', default='last', choices=['last', 'highest'])
    ap.add_argument('--reduction_vel', type=int, default=1)
    ap.add_argument('--no-reduction', dest='reduction', action='store_false')
    ap.add_argument('--log-dir', default=None)
    ap.add_argument('--no-log-file', dest='log_file', action='store_false')
    ap.add_argument('--verbose', action='store_true')
    return ap

def config_from_args(args) -> AppConfig:
    return AppConfig(
        build=BuildConfig(
            track=args.track,
            channel=args.channel,
            bpm=args.bpm,
            octave_shift=args.octave,
            note_shift=args.note,
            fine_tuning=args.fine,
            comments=args.comments,
        ),
        reduce=ReductionConfig(
            min_velocity=args.reduction_vel,
            mode=args.reduction_mode,
            enabled=args.reduction,
        ),
        log=LogConfig(directory=args.log_dir, verbose=args.verbose, to_file=args.log_file),
    )

def convert(midi: MidiFile, cfg: AppConfig, source_name: str) -> str:
    b = cfg.build
    seq = build_sequence(midi, track=b.track, channel=b.channel, bpm=b.bpm)
    notes = seq.notes
    if cfg.reduce.enabled:
        notes = make_reduction(cfg.reduce.mode).apply(notes, cfg.reduce)
    logging.info("track %d channel %d: %d notes (%d after reduction), %d overlaps",
                 b.track, b.channel, len(seq.notes), len(notes), len(seq.diagnostics))
    return render_script(seq, b, source_name, notes)

def _write(path: str, text: str):
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    logging.info("wrote %s", path)

def _run(args, cfg: AppConfig):
    midi = load_midi(args.file)
    if not args.analyze:
        script = convert(midi, cfg, args.file)
        _write(args.output or f"{args.file}_{cfg.build.track}.txt", script)
        if args.print_stdout:
            print(script, end="")
        return

    for summary in analyze(midi):
        for ch, counts in sorted(summary.channels.items()):
            print(f"# Track index: {summary.index} Track name: {summary.name} "
                  f"Channel: {ch} Found notes ON/OFF: {counts.on} / {counts.off}")
            if not args.process_all:
                continue
            print("# Processing...")
            cfg.build.track, cfg.build.channel = summary.index, ch
            script = convert(midi, cfg, args.file)
            _write(f"{args.file}_{summary.index}_{ch}.txt", script)
            if args.print_stdout:
                print(script, end="")

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = config_from_args(args)
    _init_logging(cfg.log)
    logging.debug("config: %s", cfg)

    try:
        _run(args, cfg)
    except (MidiError, OSError) as e:
        logging.error("轉換失敗：%s", e, exc_info=True)
        if cfg.log.to_file:
            log_exception("convert", e, cfg.log.directory)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0

if __name__ == '__main__':
    setup_crashlog()
    sys.exit(main())
