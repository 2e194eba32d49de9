"""Reading and writing individual cache files in an assets directory."""

import os
from pathlib import Path

from .errors import AssetIOError
from .roles import Role

PRIVATE_FILE_MODE = 0o600
PUBLIC_FILE_MODE = 0o644


def read_cache_file(path: Path, role: Role | None = None) -> bytes | None:
    """Return the file's bytes verbatim, or None if it does not exist.

    Raises:
        AssetIOError: If the file exists but cannot be read
    """
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise AssetIOError(f"failed to read cache file: {e}", role=role, path=path, operation="read") from e


def write_cache_file(path: Path, data: bytes, role: Role | None = None, private: bool = True) -> None:
    """Atomically replace path with data.

    A crash leaves either the previous file or the new one, never a
    truncated file; a leftover *.tmp is overwritten on the next write.

    Raises:
        AssetIOError: If the directory or file cannot be written
    """
    tmp = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_bytes(data)
        os.chmod(tmp, PRIVATE_FILE_MODE if private else PUBLIC_FILE_MODE)
        os.replace(tmp, path)
    except OSError as e:
        raise AssetIOError(f"failed to write cache file: {e}", role=role, path=path, operation="write") from e


def remove_cache_file(path: Path, role: Role | None = None) -> None:
    """Delete path if it exists.

    Raises:
        AssetIOError: If the file exists but cannot be removed
    """
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise AssetIOError(f"failed to remove cache file: {e}", role=role, path=path, operation="remove") from e
