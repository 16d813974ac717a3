"""
JSON File Storage Implementation

DESIGN DECISION: Each key is stored as its own file (`<data_dir>/<key>.json`)
holding the value verbatim, so the state blob on disk is plain JSON a user
can open and read.

Writes go to a temporary file in the same directory and are moved into
place with `os.replace`, so a reader never sees a half-written blob.
Transient OS errors are retried a few times before giving up.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from daily_spend.services.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
)


_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")

_io_retry = retry(
    retry=retry_if_exception_type(OSError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.05, max=1),
    reraise=True,
)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    File-per-key storage backend.

    Parameters
    ----------
    data_dir:
        Directory holding the files. Created on first write.
    """

    def __init__(self, data_dir: Union[str, Path]):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """File path backing a key."""
        if not _SAFE_KEY.match(key) or key in {".", ".."}:
            raise StorageError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}.json"

    @_io_retry
    def _read(self, path: Path) -> str:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            return handle.read()

    @_io_retry
    def _write(self, path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return self._read(path)
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}")

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            self._write(path, value)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}")
