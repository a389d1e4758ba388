"""
Container header position.

Where the container header and the file data live inside a .ucas depends on
the engine version:
- UE 4.25 to 4.26: the header sits at the start, files begin at a fixed 0x10000
- UE 4.27 onwards: files begin at 0, the header follows the file data,
  aligned to the compression block size
"""

from dataclasses import dataclass
from enum import Enum

from zenpak.constants import DEFAULT_COMPRESSION_BLOCK_SIZE, FIXED_CONTAINER_HEADER_SPLIT
from zenpak.utils import align_up


class ContainerPositionKind(Enum):
    FIXED = "fixed"
    TRAILING = "trailing"


@dataclass
class ContainerLayout:
    """What the table of contents knows about the container being assembled."""
    files_size: int = 0
    compression_block_size: int = DEFAULT_COMPRESSION_BLOCK_SIZE


class ContainerHeaderPosition:
    kind: ContainerPositionKind

    def cursor_to_header(self, layout: ContainerLayout) -> int:
        raise NotImplementedError

    def cursor_to_beginning_of_files(self, layout: ContainerLayout) -> int:
        raise NotImplementedError


class FixedContainerPosition(ContainerHeaderPosition):
    kind = ContainerPositionKind.FIXED

    def cursor_to_header(self, layout: ContainerLayout) -> int:
        return 0

    def cursor_to_beginning_of_files(self, layout: ContainerLayout) -> int:
        return FIXED_CONTAINER_HEADER_SPLIT


class TrailingContainerPosition(ContainerHeaderPosition):
    kind = ContainerPositionKind.TRAILING

    def cursor_to_header(self, layout: ContainerLayout) -> int:
        return align_up(layout.files_size, layout.compression_block_size)

    def cursor_to_beginning_of_files(self, layout: ContainerLayout) -> int:
        return 0


_POSITIONS = {
    ContainerPositionKind.FIXED: FixedContainerPosition(),
    ContainerPositionKind.TRAILING: TrailingContainerPosition(),
}


def get_container_position(kind: ContainerPositionKind) -> ContainerHeaderPosition:
    return _POSITIONS[kind]
