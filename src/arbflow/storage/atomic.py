"""Crash-safe file replacement with ``.bak`` snapshots.

A write first copies the current file (if any) to ``<path>.bak``, then
writes the new content to a temporary file in the same directory and
renames it over the target. The rename happens on a single filesystem, so a
reader sees either the old content or the new content, never a partial file.
"""

from __future__ import annotations

import logging
import os
import shutil
import time
from pathlib import Path

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"


def backup_path_for(path: str | Path) -> Path:
    path = Path(path)
    return path.with_name(path.name + BACKUP_SUFFIX)


def _temp_path_for(path: Path) -> Path:
    # Timestamp plus basename; several writes to one file happen per run.
    return path.with_name(f".tmp-{time.time_ns()}-{os.getpid()}-{path.name}")


def atomic_write(
    path: str | Path,
    content: str,
    *,
    log: logging.Logger | None = None,
) -> None:
    """Atomically replace the file at *path* with *content*.

    Each call overwrites the previous ``.bak``, so the backup always holds the
    state immediately before the most recent write.

    Raises:
        OSError: If the temporary file cannot be written or renamed. The
            original file is left untouched in that case.
    """
    log = log or logger
    path = Path(path)
    backup = backup_path_for(path)

    if path.exists():
        try:
            shutil.copy2(path, backup)
            log.debug("Backup created: %s", backup)
        except OSError as exc:
            log.debug("Backup of %s skipped: %s", path, exc)

    tmp = _temp_path_for(path)
    try:
        with open(tmp, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp, path)
    except OSError:
        try:
            tmp.unlink()
        except FileNotFoundError:
            pass
        raise

    log.debug("Atomically replaced %s", path)


def read_text_or_default(path: str | Path, default: str = "") -> str:
    """Return the file's text, or *default* when it is absent or unreadable."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return default
