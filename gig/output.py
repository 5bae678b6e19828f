"""Write the generated document to disk without leaving partial files."""

from __future__ import annotations

import enum
import os
import shutil
import tempfile
from pathlib import Path

from .errors import OutputExistsError


class WriteMode(enum.Enum):
    FAIL_IF_EXISTS = "fail-if-exists"
    OVERWRITE = "overwrite"


def detect_eol(raw: bytes) -> str:
    """Line ending style of existing content (CRLF if any CRLF is present)."""
    return "\r\n" if b"\r\n" in raw else "\n"


def read_existing(path: Path) -> tuple[str, str] | None:
    """Return ``(text, eol)`` for an existing file, or None when absent."""
    if not path.exists():
        return None
    raw = path.read_bytes()
    return raw.decode("utf-8"), detect_eol(raw)


def write_output(
    path: Path,
    text: str,
    mode: WriteMode = WriteMode.FAIL_IF_EXISTS,
    eol: str = "\n",
) -> None:
    """Write *text* to *path* as UTF-8.

    ``FAIL_IF_EXISTS`` never touches an existing file and raises
    OutputExistsError instead.  ``OVERWRITE`` writes a sibling temp file
    and renames it over *path*, so readers see either the old or the new
    content.  A symlinked *path* is followed: the link stays and its
    target receives the new content.
    """
    if eol != "\n":
        text = text.replace("\n", eol)
    data = text.encode("utf-8")

    if mode is WriteMode.FAIL_IF_EXISTS:
        try:
            f = path.open("xb")
        except FileExistsError as exc:
            raise OutputExistsError(path) from exc
        written = False
        try:
            with f:
                f.write(data)
            written = True
        finally:
            if not written:
                path.unlink(missing_ok=True)
        return

    if path.is_symlink():
        path = path.resolve()
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent,
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        if path.exists():
            shutil.copymode(path, tmp_path)
        else:
            tmp_path.chmod(0o644)
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)
