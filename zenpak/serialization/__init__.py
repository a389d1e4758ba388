"""
Serialization Package

Builds and writes the container header store entries of converted packages.

- container_header: ContainerHeaderPackage, store entry reader/writer
- container_position: where the header and file data sit in a container
"""

from .container_header import (
    ContainerHeaderPackage,
    StoreEntry,
    VariableRegionCursor,
    build_container_header_package,
    read_store_entry,
    read_store_entries,
    write_store_entries,
)
from .container_position import (
    ContainerLayout,
    ContainerPositionKind,
    ContainerHeaderPosition,
    FixedContainerPosition,
    TrailingContainerPosition,
    get_container_position,
)
