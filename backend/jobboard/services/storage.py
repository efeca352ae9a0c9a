"""Resume files on the local upload directory."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import BinaryIO

from jobboard.core.logging import get_logger
from jobboard.domain.exceptions import UploadFailedError

logger = get_logger(__name__)


class ResumeStorage:
    """Stores and removes uploaded resumes under ``root``."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def path_for(self, filename: str) -> Path:
        # Only the final component is honored so names cannot escape the root.
        return self.root / Path(filename).name

    def save(self, filename: str, stream: BinaryIO) -> Path:
        target = self.path_for(filename)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            with target.open("wb") as out:
                shutil.copyfileobj(stream, out)
        except OSError as exc:
            logger.error("Resume upload failed", extra={"file": filename, "error": str(exc)})
            raise UploadFailedError("Resume Upload Failed") from exc
        logger.info("Resume stored", extra={"file": target.name})
        return target

    def delete(self, filename: str) -> bool:
        """Best-effort removal; failures are logged and reported as ``False``."""
        target = self.path_for(filename)
        try:
            target.unlink()
        except OSError as exc:
            logger.warning("Could not delete resume", extra={"file": filename, "error": str(exc)})
            return False
        return True
