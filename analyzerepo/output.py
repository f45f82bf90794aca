"""Writing analysis output to disk."""

from __future__ import annotations

import os
from pathlib import Path


def write_to_file(file_path: str | os.PathLike[str], data: bytes | str) -> None:
    """Write data to file_path, creating parent directories as needed."""
    path = Path(file_path)
    directory = path.parent
    try:
        directory.mkdir(mode=0o755, parents=True, exist_ok=True)
    except OSError as exc:
        raise OSError(f"failed to create directory {directory}: {exc}") from exc

    payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
    except OSError as exc:
        raise OSError(f"failed to write file {path}: {exc}") from exc