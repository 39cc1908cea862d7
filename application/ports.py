from typing import List, Optional, Protocol


class BlobStore(Protocol):
    def read(self, name: str) -> Optional[bytes]:
        ...

    def write(self, name: str, data: bytes) -> None:
        ...

    def list(self) -> List[str]:
        ...
