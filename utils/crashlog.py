# utils/crashlog.py
import os, sys, faulthandler, datetime, traceback
from typing import Optional

_fault_file = None
_dir: Optional[str] = None

def log_dir(base: Optional[str] = None) -> str:
    d = base or os.path.join(os.getcwd(), "logs")
    os.makedirs(d, exist_ok=True)
    return d

def _new_log_path(prefix: str, directory: Optional[str] = None) -> str:
    stamp = datetime.datetime.now().strftime("%Y%m%d-%H%M%S-%f")
    return os.path.join(log_dir(directory or _dir), f"{prefix}-{stamp}.txt")

def setup_crashlog(directory: Optional[str] = None):
    """Native faults -> native-*.txt, uncaught exceptions -> crash-*.txt."""
    global _fault_file, _dir
    _dir = log_dir(directory)
    try:
        if _fault_file is None:
            _fault_file = open(_new_log_path("native"), "w", encoding="utf-8")
        faulthandler.enable(_fault_file, all_threads=True)
    except OSError:
        _fault_file = None

    def _hook(exc_type, exc, tb):
        try:
            with open(_new_log_path("crash"), "w", encoding="utf-8") as out:
                out.write("UNCAUGHT EXCEPTION\n")
                out.write("=" * 60 + "\n")
                traceback.print_exception(exc_type, exc, tb, file=out)
        finally:
            sys.__excepthook__(exc_type, exc, tb)
    sys.excepthook = _hook

def log_exception(title: str, exc: BaseException, directory: Optional[str] = None) -> str:
    path = _new_log_path("error", directory)
    with open(path, "w", encoding="utf-8") as out:
        out.write(f"[{title}] {type(exc).__name__}: {exc}\n")
        out.write("Traceback:\n")
        out.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    return path
