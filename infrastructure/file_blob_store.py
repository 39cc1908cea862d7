import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from application.ports import BlobStore

logger = logging.getLogger("zap.storage")


class FileBlobStore(BlobStore):
    """One file per cluster under a data directory.

    Writes go to a temp file in the same directory and are renamed over the
    target, so a concurrent read sees either the old or the new document.
    """

    SUFFIX = ".yaml"

    def __init__(self, root: Path):
        self.root = Path(root)

    def _resolve_path(self, name: str) -> Path:
        # SEC: cluster names are user input from the command line
        if not name or ".." in name or "/" in name or "\\" in name or name.startswith("."):
            logger.warning("Rejected cluster name %r", name)
            raise ValueError(f"Invalid cluster name: {name!r}")
        resolved = (self.root / f"{name}{self.SUFFIX}").resolve()
        if not resolved.is_relative_to(self.root.resolve()):
            raise ValueError(f"Path traversal detected: {resolved} is outside {self.root}")
        return resolved

    def read(self, name: str) -> Optional[bytes]:
        path = self._resolve_path(name)
        if not path.exists():
            return None
        return path.read_bytes()

    def write(self, name: str, data: bytes) -> None:
        target = self._resolve_path(name)
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp_path: Optional[Path] = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="wb",
                delete=False,
                dir=str(target.parent),
                prefix=f".{name}.",
                suffix=".tmp",
            ) as tmp:
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
                tmp_path = Path(tmp.name)
            os.replace(str(tmp_path), str(target))
            logger.debug("Wrote %d bytes to %s", len(data), target)
        finally:
            if tmp_path and tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    pass

    def list(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted(
            f.stem for f in self.root.iterdir() if f.is_file() and f.suffix == self.SUFFIX and not f.name.startswith(".")
        )
