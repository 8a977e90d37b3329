"""
Storage Slots

A storage slot holds one serialized state document under a single name.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class StorageSlot:
    """Interface for a single named storage slot."""

    name: str = ""

    def read(self) -> Optional[str]:
        """Return the stored text, or None if nothing was ever written."""
        raise NotImplementedError

    def write(self, payload: str) -> None:
        """Replace the stored text. Raises OSError on failure."""
        raise NotImplementedError


class MemoryStorageSlot(StorageSlot):
    """In-process slot. Nothing survives the interpreter."""

    def __init__(self, name: str = "ai_sparck_state_v1", initial: Optional[str] = None):
        self.name = name
        self._payload: Optional[str] = initial

    def read(self) -> Optional[str]:
        return self._payload

    def write(self, payload: str) -> None:
        self._payload = payload


class FileStorageSlot(StorageSlot):
    """
    Slot backed by a JSON file in a state directory.

    Writes go to a temporary file in the same directory which is then
    renamed over the target, so a reader never sees a half-written document.
    """

    def __init__(self, state_dir: Path, name: str = "ai_sparck_state_v1"):
        self.name = name
        self.state_dir = Path(state_dir).expanduser()
        self.path = self.state_dir / f"{name}.json"

    def read(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"⚠️ [FileStorageSlot] Could not read {self.path}: {e}")
            return None

    def write(self, payload: str) -> None:
        self.state_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=f".{self.name}.", suffix=".tmp", dir=self.state_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

