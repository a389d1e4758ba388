"""
Package Summary Decoders

IO Store packages start with an FPackageSummary whose layout changed
between engine releases. The converter only needs three offsets from it,
all relative to the start of the header:
- export map offset
- export bundle offset
- graph data offset

Layouts (the bytes carry no version marker, the caller picks one):
- A  UE 4.25           skip 0x0C
- B  UE 4.25+ to 4.27  skip 0x2C (name, source name, flags, name map offsets...)
- C  UE 5.0 to 5.2     skip 0x20 (Zen summary, first generation)
- D  UE 5.3            dependency bundles replace the graph, not supported
"""

from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Dict

from zenpak.constants import EXPORT_MAP_ENTRY_SIZE
from zenpak.errors import DecodeError, UnsupportedLayoutError
from zenpak.utils import ByteOrder, logDebug, read_struct


class SummaryLayout(Enum):
    A = "ue4_25"
    B = "ue4_26"
    C = "ue5_0"
    D = "ue5_3"


@dataclass
class SummaryOffsets:
    """Offsets the container header needs, relative to the header start."""
    export_table_offset: int
    export_bundle_offset: int
    dependency_graph_offset: int

    def __post_init__(self):
        if not self.export_table_offset <= self.export_bundle_offset <= self.dependency_graph_offset:
            raise DecodeError(
                f"Summary offsets out of order: export map 0x{self.export_table_offset:X}, "
                f"export bundles 0x{self.export_bundle_offset:X}, graph 0x{self.dependency_graph_offset:X}",
                field="summary_offsets",
                value=(self.export_table_offset, self.export_bundle_offset, self.dependency_graph_offset),
            )

    def export_count(self, entry_size: int = EXPORT_MAP_ENTRY_SIZE) -> int:
        """
        Number of exports, from the size of the export map.

        Raises:
            DecodeError: if the export map is not a whole number of entries
        """
        span = self.export_bundle_offset - self.export_table_offset
        count, remainder = divmod(span, entry_size)
        if remainder:
            raise DecodeError(
                f"Export map size 0x{span:X} is not a multiple of 0x{entry_size:X}; wrong summary layout?",
                field="export_count",
                value=span,
                offset=self.export_table_offset,
            )
        return count


class PackageSummaryDecoder:
    """
    Reads SummaryOffsets for one layout.

    The reader must be positioned at the start of the package header.
    """

    layout: SummaryLayout
    SKIP = 0

    def decode(self, reader: BinaryIO, order: ByteOrder) -> SummaryOffsets:
        start = reader.tell()
        reader.seek(self.SKIP, 1)
        export_offset, export_bundle_offset, graph_offset = read_struct(reader, 'III', order)
        logDebug(
            f"Summary {self.layout.name} at 0x{start:X}: exports 0x{export_offset:X}, "
            f"bundles 0x{export_bundle_offset:X}, graph 0x{graph_offset:X}"
        )
        return SummaryOffsets(export_offset, export_bundle_offset, graph_offset)


class PackageSummaryDecoderA(PackageSummaryDecoder):
    """
    UE 4.25:
    - u32 package_flags
    - i32 name_map_offset
    - i32 import_map_offset
    - i32 export_map_offset
    - i32 export_bundle_offset
    - i32 graph_data_offset
    - i32 graph_data_size, bulk_data_start_offset, global_import_index, padding
    """
    layout = SummaryLayout.A
    SKIP = 0x0C


class PackageSummaryDecoderB(PackageSummaryDecoder):
    """
    UE 4.25+, 4.26, 4.27:
    - u64 name, u64 source_name (FMappedName)
    - u32 package_flags, u32 cooked_header_size
    - i32 name_map_names_offset, names_size, hashes_offset, hashes_size
    - i32 import_map_offset
    - i32 export_map_offset
    - i32 export_bundles_offset
    - i32 graph_data_offset
    - i32 graph_data_size, pad
    """
    layout = SummaryLayout.B
    SKIP = 0x2C


class PackageSummaryDecoderC(PackageSummaryDecoder):
    """
    UE 5.0 to 5.2 (Zen):
    - u32 has_version_info, u32 header_size
    - u64 name (FMappedName)
    - u32 package_flags, u32 cooked_header_size
    - i32 imported_public_export_hashes_offset
    - i32 import_map_offset
    - i32 export_map_offset
    - i32 export_bundle_entries_offset
    - i32 graph_data_offset
    """
    layout = SummaryLayout.C
    SKIP = 0x20


class PackageSummaryDecoderD(PackageSummaryDecoder):
    """
    UE 5.3 (Zen): dependency bundle headers/entries and an imported package
    name table replace the graph data, so there is no graph offset to read.
    """
    layout = SummaryLayout.D

    def decode(self, reader: BinaryIO, order: ByteOrder) -> SummaryOffsets:
        raise UnsupportedLayoutError(self.layout.name, "package summary decoding")


SUMMARY_DECODERS: Dict[SummaryLayout, PackageSummaryDecoder] = {
    SummaryLayout.A: PackageSummaryDecoderA(),
    SummaryLayout.B: PackageSummaryDecoderB(),
    SummaryLayout.C: PackageSummaryDecoderC(),
    SummaryLayout.D: PackageSummaryDecoderD(),
}


def get_summary_decoder(layout: SummaryLayout) -> PackageSummaryDecoder:
    return SUMMARY_DECODERS[layout]


def read_summary_offsets(reader: BinaryIO, layout: SummaryLayout, order: ByteOrder) -> SummaryOffsets:
    """Decode the summary offsets of the header the reader is positioned at."""
    return get_summary_decoder(layout).decode(reader, order)
