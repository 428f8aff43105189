"""Filesystem helpers using pathlib.

Examples
--------
>>> from pathlib import Path
>>> from metricsdoc_common.fs import atomic_write
>>> atomic_write(Path("/tmp/metrics.md"), "# Metrics\\n")
"""

from __future__ import annotations

import sys
import tempfile
from pathlib import Path

from metricsdoc_common.logging import get_logger

__all__ = ["atomic_write", "ensure_dir", "read_bytes"]

logger = get_logger(__name__)


def ensure_dir(path: Path, *, exist_ok: bool = True) -> Path:
    """Create directory if it does not exist, including parent directories.

    Parameters
    ----------
    path : Path
        Directory path to create.
    exist_ok : bool, optional
        If True, do not raise when the directory already exists. Defaults to True.

    Returns
    -------
    Path
        The created or existing directory path (same as input).
    """
    path.mkdir(parents=True, exist_ok=exist_ok)
    return path


def read_bytes(path: Path) -> bytes:
    """Read a file as raw bytes.

    Parameters
    ----------
    path : Path
        File to read.

    Returns
    -------
    bytes
        File contents.

    Raises
    ------
    OSError
        If the file cannot be read.
    """
    return path.read_bytes()


def atomic_write(path: Path, data: str) -> None:
    """Write UTF-8 text atomically using a temporary file and rename.

    The final file is either completely written or not present, so readers
    never observe a partially generated document.

    Parameters
    ----------
    path : Path
        Final file path to write. Parent directories are created if needed.
    data : str
        Content to write.

    Raises
    ------
    OSError
        If parent directory creation, temporary file creation, or the rename
        fails.
    """
    ensure_dir(path.parent, exist_ok=True)
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=str(path.parent),
            delete=False,
            encoding="utf-8",
            newline="",
        ) as temp_file:
            tmp_path = Path(temp_file.name)
            temp_file.write(data)
            temp_file.flush()
        tmp_path.replace(path)
        logger.debug("Wrote file", extra={"operation": "write", "path": str(path)})
    finally:
        if tmp_path is not None and sys.exc_info()[0] is not None:
            tmp_path.unlink(missing_ok=True)
