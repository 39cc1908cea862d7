from typing import Dict, List, Optional

import pytest


class MemoryBlobStore:
    """In-memory BlobStore used by store and session tests."""

    def __init__(self, blobs: Optional[Dict[str, bytes]] = None):
        self.blobs: Dict[str, bytes] = dict(blobs or {})
        self.writes = 0

    def read(self, name: str) -> Optional[bytes]:
        return self.blobs.get(name)

    def write(self, name: str, data: bytes) -> None:
        self.writes += 1
        self.blobs[name] = data

    def list(self) -> List[str]:
        return sorted(self.blobs)


class FailingBlobStore(MemoryBlobStore):
    def write(self, name: str, data: bytes) -> None:
        raise OSError("disk full")


@pytest.fixture
def memory_storage():
    return MemoryBlobStore()


@pytest.fixture
def failing_storage():
    return FailingBlobStore()
