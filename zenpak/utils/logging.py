"""
Console + file logging for container header builds.

Every message goes to stdout/stderr and to convert.log. Warnings (skipped
packages) and errors (packages that failed to convert) are remembered so the
run can end with a summary and an exit code.

Usage:
    from zenpak.utils import log, logWarning, logError, logDebug, init_logging, print_summary

    init_logging()                      # optional, first log call does it
    log("Building container header...")
    logWarning("Hero.uasset is a cooked asset; skipped")
    logError("Crate.uasset: bad export bundle command")
    logDebug("summary offsets 0x48/0x1A0/0x1F0")   # file only
    print_summary()
"""

import sys
import atexit
from pathlib import Path
from datetime import datetime
from typing import List, Optional, TextIO, Tuple


class Colors:
    YELLOW = '\033[93m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    BOLD = '\033[1m'
    RESET = '\033[0m'


_RULE = "=" * 70

_log_file: Optional[TextIO] = None
_initialized = False
_atexit_registered = False
_warnings: List[str] = []
_errors: List[str] = []


def _timestamp() -> str:
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def init_logging(log_path: Optional[Path] = None):
    """
    Open the log file and reset the warning/error tallies.

    Does nothing if logging is already initialized; call close_logging()
    first to start a new log.

    Args:
        log_path: Log file location (default: convert.log in the working directory)
    """
    global _log_file, _initialized, _atexit_registered, _warnings, _errors

    if _initialized:
        return

    _warnings = []
    _errors = []
    _initialized = True

    path = Path(log_path) if log_path is not None else Path.cwd() / "convert.log"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        _log_file = open(path, 'w', encoding='utf-8')
    except OSError as e:
        print(f"Warning: Could not open log file {path}: {e}", file=sys.stderr)
        _log_file = None
        return

    _write_to_file(f"Build started: {_timestamp()}\n{_RULE}\n")

    if not _atexit_registered:
        atexit.register(close_logging)
        _atexit_registered = True


def close_logging():
    """Finish and close the log file. Tallies survive until the next init_logging()."""
    global _log_file, _initialized

    if _log_file is not None:
        _write_to_file(f"\n{_RULE}\nBuild finished: {_timestamp()}")
        try:
            _log_file.close()
        except OSError:
            pass
        _log_file = None

    _initialized = False


def _write_to_file(msg: str, end: str = "\n"):
    if _log_file is None:
        return
    try:
        _log_file.write(msg + end)
        _log_file.flush()
    except OSError:
        pass


def _emit(console: Optional[str], file_text: str, end: str, stream=None):
    if not _initialized:
        init_logging()
    if console is not None:
        print(console, end=end, file=stream or sys.stdout)
    _write_to_file(file_text, end)


def log(msg: str = "", end: str = "\n"):
    """Progress and section headers."""
    _emit(msg, msg, end)


def logWarning(msg: str, end: str = "\n"):
    """
    A package was skipped or looks suspicious. Shown in yellow and
    counted for the summary.
    """
    text = f"Warning: {msg}"
    _emit(f"{Colors.YELLOW}{text}{Colors.RESET}", text, end)
    _warnings.append(msg)


def logError(msg: str, end: str = "\n"):
    """
    A package could not be converted. Shown in red on stderr and counted
    for the summary.
    """
    text = f"ERROR: {msg}"
    _emit(f"{Colors.RED}{text}{Colors.RESET}", text, end, sys.stderr)
    _errors.append(msg)


def logDebug(msg: str, end: str = "\n"):
    """Per-field decode detail, written to the log file only."""
    _emit(None, f"[DEBUG] {msg}", end)


def get_counts() -> Tuple[int, int]:
    """(error_count, warning_count) since the last init_logging()."""
    return len(_errors), len(_warnings)


def print_summary():
    """List every warning and error, then a one-line tally."""
    log("\n" + _RULE)
    log("BUILD SUMMARY")
    log(_RULE)

    for label, items, color in (("Errors", _errors, Colors.RED), ("Warnings", _warnings, Colors.YELLOW)):
        if not items:
            continue
        print(f"\n{color}{Colors.BOLD}{label} ({len(items)}):{Colors.RESET}")
        _write_to_file(f"\n{label} ({len(items)}):")
        for item in items:
            print(f"  {color}- {item}{Colors.RESET}")
            _write_to_file(f"  - {item}")

    def tally(count: int, noun: str, color: str) -> str:
        if count:
            return f"{color}{Colors.BOLD}{count} {noun}(s){Colors.RESET}"
        return f"{Colors.GREEN}0 {noun}s{Colors.RESET}"

    print()
    print(f"{tally(len(_errors), 'Error', Colors.RED)} | {tally(len(_warnings), 'Warning', Colors.YELLOW)}")
    _write_to_file(f"\n{len(_errors)} Error(s) | {len(_warnings)} Warning(s)")
