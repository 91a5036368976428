from typing import Protocol, runtime_checkable

from ...domain.models.item import Bitstream


@runtime_checkable
class ContentStorePort(Protocol):
    def retrieve(self, bitstream: Bitstream) -> bytes:
        """
        Read the stored content of a bitstream.

        Args:
            bitstream: Bitstream whose content is requested

        Returns:
            Complete file content

        Raises:
            FileNotFoundError: If the content is missing from storage
            OSError: If the content cannot be read
        """
        ...
