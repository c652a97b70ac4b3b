# ========================= config.py =========================
from dataclasses import dataclass, field
from typing import Optional

@dataclass
class BuildConfig:
    track: int = 0
    channel: int = 0
    bpm: int = 0              # 0 => take tempo from the file
    octave_shift: int = 0
    note_shift: int = 0
    fine_tuning: float = 0.0  # Hz added to every frequency
    comments: bool = False

@dataclass
class ReductionConfig:
    min_velocity: int = 1
    mode: str = "last"  # or "highest"
    enabled: bool = True

@dataclass
class LogConfig:
    directory: Optional[str] = None  # None => ./logs
    verbose: bool = False
    to_file: bool = True

@dataclass
class AppConfig:
    build: BuildConfig = field(default_factory=BuildConfig)
    reduce: ReductionConfig = field(default_factory=ReductionConfig)
    log: LogConfig = field(default_factory=LogConfig)
