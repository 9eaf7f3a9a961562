"""Plain text log of the files written by a mirror run."""

import logging
from pathlib import Path
from typing import IO, Any, Optional

logger = logging.getLogger(__name__)


class DiffLog:
    """One local path per downloaded file, newline-terminated.

    The file is truncated when opened, so it lists the changes of a single
    run in the order the downloads completed.
    """

    def __init__(self, path: Path):
        self.path = path
        self._file: Optional[IO[str]] = None
        self.count = 0

    def open(self) -> "DiffLog":
        self._file = open(self.path, "w", encoding="utf-8")
        logger.debug("Writing diff list to %s", self.path)
        return self

    def append(self, local_path: Path) -> None:
        if self._file is None:
            raise RuntimeError("Diff log is not open")
        self._file.write(f"{local_path}\n")
        self._file.flush()
        self.count += 1

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "DiffLog":
        return self.open()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
