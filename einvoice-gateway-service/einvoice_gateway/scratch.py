"""
Request-scoped scratch files for pdf/docx reports.

Each render gets its own file name, so concurrent requests never write to
the same path. Whoever receives the path owns it and must `release` it once
the file has been sent.
"""

from __future__ import annotations

import logging
import secrets
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "report-"


class ScratchSpace:
    """
    A directory holding transient report files.

    The directory itself is supplied by the environment; `ensure` creates it
    if it is missing but nothing here ever removes it.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def ensure(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def allocate(self, extension: str) -> Path:
        """
        Return a fresh, unused path ending in `.<extension>`.
        """
        return self.root / f"{SCRATCH_PREFIX}{secrets.token_hex(16)}.{extension}"

    def release(self, path: Union[str, Path]) -> None:
        Path(path).unlink(missing_ok=True)

    def sweep(self) -> int:
        """
        Remove every leftover report file. Returns the number removed.
        """
        if not self.root.is_dir():
            return 0
        removed = 0
        for path in self.root.glob(f"{SCRATCH_PREFIX}*"):
            try:
                path.unlink()
                removed += 1
            except FileNotFoundError:
                continue
            except OSError as exc:
                logger.warning("Could not remove scratch file %s: %s", path, exc)
        if removed:
            logger.info("Swept %d scratch file(s) from %s", removed, self.root)
        return removed
