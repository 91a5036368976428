from __future__ import annotations

import logging
from pathlib import Path

from ...domain.models.item import Bitstream

logger = logging.getLogger(__name__)


class FilesystemContentStore:
    """
    Adapter reading bitstream content from files under a root directory.

    A bitstream id is a path relative to the root; ids escaping the root are rejected.
    """

    def __init__(self, root_dir: Path | str) -> None:
        self.root_dir = Path(root_dir).resolve()

    def path_for(self, bitstream: Bitstream) -> Path:
        path = (self.root_dir / bitstream.id).resolve()
        if not path.is_relative_to(self.root_dir):
            raise PermissionError(f"Bitstream '{bitstream.id}' resolves outside of {self.root_dir}")
        return path

    def retrieve(self, bitstream: Bitstream) -> bytes:
        path = self.path_for(bitstream)
        if not path.is_file():
            raise FileNotFoundError(f"Content for bitstream '{bitstream.id}' not found: {path}")
        data = path.read_bytes()
        logger.debug(
            f"Retrieved {len(data)} bytes for bitstream '{bitstream.id}'",
            extra={"bitstream_id": bitstream.id, "path": str(path)},
        )
        return data
