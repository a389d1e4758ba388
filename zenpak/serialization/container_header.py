#!/usr/bin/env python3
"""
Container Header Package Builder

Builds the store entry a container header keeps for every package, from the
package's IO Store header.

Store entry (fixed part, 0x20 bytes):
- u64 export_bundle_size
- u32 export_count
- u32 export_bundle_count (written as 1, see to_buffer_store_entry)
- u32 load_order
- u32 padding
- u32 imported_package_count
- u32 relative_offset_to_imports

The imported package ids are not stored inline. All fixed entries are written
back to back and the id arrays go into a separate region after them. The
relative offset is measured from the imported_package_count field of the
entry that owns the array.
"""

from dataclasses import dataclass, field
from typing import BinaryIO, List, Sequence

from zenpak.constants import CONTAINER_HEADER_PACKAGE_SIZE, STORE_ENTRY_IMPORTS_VIEW_OFFSET
from zenpak.errors import DecodeError, EncodeError, UnsupportedLayoutError
from zenpak.parsers.dependency_graph import imported_package_hashes, read_dependency_graph, read_imported_package
from zenpak.parsers.export_bundles import BundleLayout, get_bundle_decoder
from zenpak.parsers.package_summary import SummaryLayout, read_summary_offsets
from zenpak.utils import ByteOrder, logDebug, read_struct, read_u32, write_struct, write_u32, write_u64

STORE_ENTRY_FORMAT = 'QIIIIII'


@dataclass
class VariableRegionCursor:
    """
    Bytes already appended to the variable region of a container header.

    Shared by every to_buffer_store_entry call of one container, in order.
    """
    value: int = 0


@dataclass
class StoreEntry:
    """A store entry as read back from a container header."""
    export_bundle_byte_size: int
    export_count: int
    export_bundle_count: int
    load_order: int
    imported_package_count: int
    relative_offset_to_imports: int
    imported_package_hashes: List[int] = field(default_factory=list)


@dataclass
class ContainerHeaderPackage:
    """One package's entry in the container header."""
    package_hash: int
    export_bundle_byte_size: int
    export_count: int
    export_bundle_count: int
    load_order: int = 0
    imported_package_hashes: List[int] = field(default_factory=list)

    @classmethod
    def from_package_summary(cls, reader: BinaryIO, package_hash: int, size: int,
                             summary_layout: SummaryLayout, bundle_layout: BundleLayout,
                             order: ByteOrder) -> 'ContainerHeaderPackage':
        """
        Decode the summary, export bundles and graph to fill in the entry.

        Args:
            reader: Stream positioned at the start of the package header
            package_hash: Package id of this package
            size: Export bundle size in bytes (header + export data)
            summary_layout: FPackageSummary layout of the engine version
            bundle_layout: Export bundle header shape of the engine version
            order: Byte order of the header
        """
        header_start = reader.tell()
        summary = read_summary_offsets(reader, summary_layout, order)
        export_count = summary.export_count()

        reader.seek(header_start + summary.export_bundle_offset)
        decoder = get_bundle_decoder(bundle_layout)
        bundle_entries = decoder.decode(reader, order)
        export_bundle_count = decoder.export_bundle_count(bundle_entries)

        reader.seek(header_start + summary.dependency_graph_offset)
        imports = imported_package_hashes(read_dependency_graph(reader, order))

        logDebug(f"Package 0x{package_hash:016X}: {export_count} exports, "
                 f"{export_bundle_count} export bundles, {len(imports)} imported packages")

        return cls(
            package_hash=package_hash,
            export_bundle_byte_size=size,
            export_count=export_count,
            export_bundle_count=export_bundle_count,
            load_order=0,  # not load order sensitive yet
            imported_package_hashes=imports,
        )

    @classmethod
    def from_header_package(cls, reader: BinaryIO, package_hash: int, size: int,
                            summary_layout: SummaryLayout, bundle_layout: BundleLayout,
                            order: ByteOrder) -> 'ContainerHeaderPackage':
        """
        Shallow decode: counts only, without reading the bundle entries.

        - export count is (export bundle offset - export map offset) / 0x48
        - export bundle count is the serialized entry count minus the export count
        - imported packages are read from the graph

        Only the UE4 bundle header ({first, count}) is understood here.

        Raises:
            UnsupportedLayoutError: for any other bundle layout
        """
        if bundle_layout != BundleLayout.UE4:
            raise UnsupportedLayoutError(bundle_layout.name, "shallow export bundle count")

        header_start = reader.tell()
        summary = read_summary_offsets(reader, summary_layout, order)
        export_count = summary.export_count()

        # FExportBundleHeader->EntryCount
        reader.seek(header_start + summary.export_bundle_offset + 4)
        serialized_entry_count = read_u32(reader, order)
        export_bundle_count = serialized_entry_count - export_count
        if export_bundle_count < 0:
            raise DecodeError(
                f"Export bundle entry count {serialized_entry_count} is below the export count {export_count}",
                field="entry_count",
                value=serialized_entry_count,
                offset=header_start + summary.export_bundle_offset + 4,
            )

        reader.seek(header_start + summary.dependency_graph_offset)
        imported_package_count = read_u32(reader, order)
        imports = [read_imported_package(reader, order).imported_package_hash
                   for _ in range(imported_package_count)]

        logDebug(f"Package 0x{package_hash:016X} (shallow): {export_count} exports, "
                 f"{export_bundle_count} export bundles, {len(imports)} imported packages")

        return cls(
            package_hash=package_hash,
            export_bundle_byte_size=size,
            export_count=export_count,
            export_bundle_count=export_bundle_count,
            load_order=0,
            imported_package_hashes=imports,
        )

    def to_buffer_store_entry(self, writer: BinaryIO, base_offset: int,
                              cursor: VariableRegionCursor, order: ByteOrder):
        """
        Write the fixed store entry and append the imported package ids.

        Args:
            writer: Seekable stream positioned where this fixed entry goes
            base_offset: Absolute start of the variable region
            cursor: Variable region bytes written so far, advanced here
            order: Byte order of the container header

        Raises:
            EncodeError: if the variable region is out of reach of the
                relative offset field; nothing is written in that case
        """
        count = len(self.imported_package_hashes)
        data_position = base_offset + cursor.value
        view_position = writer.tell() + STORE_ENTRY_IMPORTS_VIEW_OFFSET
        relative_offset = data_position - view_position if count else 0
        if not 0 <= relative_offset <= 0xFFFFFFFF:
            raise EncodeError(
                f"Variable region at 0x{data_position:X} cannot be addressed from 0x{view_position:X}",
                field="relative_offset_to_imports",
                value=relative_offset,
                offset=view_position,
            )

        write_u64(writer, order, self.export_bundle_byte_size)
        write_u32(writer, order, self.export_count)
        # Known limitation: the runtime is given 1 bundle per package, not export_bundle_count
        write_u32(writer, order, 1)
        write_u32(writer, order, self.load_order)
        write_u32(writer, order, 0)  # padding

        if not count:
            write_u32(writer, order, 0)
            write_u32(writer, order, 0)
            return

        write_u32(writer, order, count)
        write_u32(writer, order, relative_offset)

        return_position = writer.tell()
        writer.seek(data_position)
        write_struct(writer, f'{count}Q', order, *self.imported_package_hashes)
        writer.seek(return_position)
        cursor.value += 8 * count


def read_store_entry(reader: BinaryIO, order: ByteOrder) -> StoreEntry:
    """
    Read one fixed store entry and follow its relative offset to the imports.

    Leaves the reader at the end of the fixed entry.
    """
    entry_start = reader.tell()
    (bundle_size, export_count, bundle_count, load_order, _padding,
     import_count, relative_offset) = read_struct(reader, STORE_ENTRY_FORMAT, order)

    entry = StoreEntry(bundle_size, export_count, bundle_count, load_order, import_count, relative_offset)
    if import_count:
        end = reader.tell()
        reader.seek(entry_start + STORE_ENTRY_IMPORTS_VIEW_OFFSET + relative_offset)
        entry.imported_package_hashes = list(read_struct(reader, f'{import_count}Q', order))
        reader.seek(end)
    return entry


def write_store_entries(writer: BinaryIO, packages: Sequence[ContainerHeaderPackage], order: ByteOrder) -> int:
    """
    Write the store entries of a container header.

    Fixed entries start at the current position; the variable region
    follows the last one. The writer ends up after the variable region.

    Returns:
        Size of the variable region in bytes
    """
    start = writer.tell()
    base_offset = start + len(packages) * CONTAINER_HEADER_PACKAGE_SIZE
    cursor = VariableRegionCursor()

    for package in packages:
        package.to_buffer_store_entry(writer, base_offset, cursor, order)

    writer.seek(base_offset + cursor.value)
    logDebug(f"Wrote {len(packages)} store entries, {cursor.value} bytes of imported package ids")
    return cursor.value


def read_store_entries(reader: BinaryIO, count: int, order: ByteOrder) -> List[StoreEntry]:
    return [read_store_entry(reader, order) for _ in range(count)]


def build_container_header_package(reader: BinaryIO, package_hash: int, size: int,
                                   summary_layout: SummaryLayout, bundle_layout: BundleLayout,
                                   order: ByteOrder, shallow: bool = False) -> ContainerHeaderPackage:
    """Pick the full or shallow decode."""
    if shallow:
        return ContainerHeaderPackage.from_header_package(reader, package_hash, size, summary_layout,
                                                          bundle_layout, order)
    return ContainerHeaderPackage.from_package_summary(reader, package_hash, size, summary_layout, bundle_layout, order)


