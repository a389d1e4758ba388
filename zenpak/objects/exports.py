"""
Export Record Codec

Builds IO Store export map entries from a legacy export table.

Export map entry (UE 4.25+ through 4.27, 0x48 bytes):
- i64 cooked_serial_offset
- i64 cooked_serial_size
- u64 object_name (FMappedName)
- u64 outer_index          (object reference)
- u64 class_index          (object reference)
- u64 super_index          (object reference)
- u64 template_index       (object reference)
- u64 global_import_index  (object reference)
- u32 object_flags
- u32 filter_flags         (always 0)

Legacy package indices: 0 is null, negative values address the import map
(-1 is the first import), positive values address the export map (1 is the
first export).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Dict, List, Optional, Sequence

from zenpak.constants import EXPORT_MAP_ENTRY_SIZE, RF_PUBLIC
from zenpak.errors import ResolutionError, UnsupportedLayoutError
from zenpak.utils import ByteOrder, logDebug, read_struct, write_struct
from .names import FName, GameIdentity, NameMap
from .object_index import (
    Empty,
    ExportRef,
    ObjectReference,
    PackageImport,
    decode_reference,
    encode_reference,
)


class ExportLayout(Enum):
    UE4_25 = "ue4_25"
    UE4_26 = "ue4_26"  # 4.25+, 4.26, 4.27
    UE5 = "ue5"


@dataclass
class ExportRecord:
    """One IO Store export map entry."""
    serial_offset: int
    serial_size: int
    name: FName
    outer: ObjectReference = field(default_factory=Empty)
    class_ref: ObjectReference = field(default_factory=Empty)
    super_ref: ObjectReference = field(default_factory=Empty)
    template_ref: ObjectReference = field(default_factory=Empty)
    global_import: ObjectReference = field(default_factory=Empty)
    object_flags: int = 0
    filter_flags: int = 0


@dataclass
class LegacyExport:
    """FObjectExport entry of a legacy package (fields the conversion needs)."""
    class_index: int
    super_index: int
    template_index: int
    outer_index: int
    object_name: FName
    object_flags: int
    serial_size: int
    serial_offset: int

    @property
    def is_public(self) -> bool:
        return bool(self.object_flags & RF_PUBLIC)

    def object_path(self, names: NameMap, export_map: Sequence['LegacyExport']) -> str:
        """Path of this export inside its package, e.g. 'Crate_C/Mesh'."""
        parts = [names.resolve(self.object_name)]
        outer = self.outer_index
        visited = 0

        while outer != 0:
            if outer < 0:
                raise ValueError(f"export outer {outer} points into the import map")
            outer_pos = outer - 1
            if outer_pos >= len(export_map):
                raise IndexError(f"outer export {outer_pos} out of range [0, {len(export_map)})")
            visited += 1
            if visited > len(export_map):
                raise ValueError("outer chain loops")
            entry = export_map[outer_pos]
            parts.append(names.resolve(entry.object_name))
            outer = entry.outer_index

        return "/".join(reversed(parts))

    def resolve(self, names: NameMap, imports: Sequence[ObjectReference],
                export_map: Sequence['LegacyExport'], file_name: str,
                game: GameIdentity) -> ExportRecord:
        """
        Resolve to an export map entry.

        Args:
            names: Name map of the package
            imports: Already resolved import map of the package
            export_map: Full legacy export table (for outer lookups)
            file_name: Package file path relative to the content root
            game: Game identity used to qualify global import paths
        """
        if self.outer_index < 0:
            raise ValueError(f"export outer {self.outer_index} points into the import map")

        global_import: ObjectReference = Empty()
        if self.is_public:
            package_path = game.package_path(file_name)
            global_import = PackageImport(f"{package_path}/{self.object_path(names, export_map)}")
        else:
            names.resolve(self.object_name)

        return ExportRecord(
            serial_offset=self.serial_offset,
            serial_size=self.serial_size,
            name=self.object_name,
            outer=_package_index_to_reference(self.outer_index, imports, len(export_map)),
            class_ref=_package_index_to_reference(self.class_index, imports, len(export_map)),
            super_ref=_package_index_to_reference(self.super_index, imports, len(export_map)),
            template_ref=_package_index_to_reference(self.template_index, imports, len(export_map)),
            global_import=global_import,
            object_flags=self.object_flags,
        )


def _package_index_to_reference(index: int, imports: Sequence[ObjectReference], export_count: int) -> ObjectReference:
    if index == 0:
        return Empty()
    if index < 0:
        import_pos = -index - 1
        if import_pos >= len(imports):
            raise IndexError(f"import {import_pos} out of range [0, {len(imports)})")
        return imports[import_pos]
    export_pos = index - 1
    if export_pos >= export_count:
        raise IndexError(f"export {export_pos} out of range [0, {export_count})")
    return ExportRef(export_pos)


class ExportRecordCodec:
    """Serializes export map entries for one engine layout."""

    layout: ExportLayout
    record_size: int

    def write(self, writer: BinaryIO, record: ExportRecord, order: ByteOrder):
        raise UnsupportedLayoutError(self.layout.name, "export record serialization")

    def read(self, reader: BinaryIO, order: ByteOrder) -> ExportRecord:
        raise UnsupportedLayoutError(self.layout.name, "export record deserialization")


class ExportRecordCodec4_26(ExportRecordCodec):
    """FExportMapEntry for UE 4.25+ through 4.27."""

    layout = ExportLayout.UE4_26
    record_size = EXPORT_MAP_ENTRY_SIZE
    FORMAT = 'qqQQQQQQII'

    def write(self, writer: BinaryIO, record: ExportRecord, order: ByteOrder):
        write_struct(
            writer, self.FORMAT, order,
            record.serial_offset,
            record.serial_size,
            record.name.to_mapped_name(),
            encode_reference(record.outer, order),
            encode_reference(record.class_ref, order),
            encode_reference(record.super_ref, order),
            encode_reference(record.template_ref, order),
            encode_reference(record.global_import, order),
            record.object_flags,
            0,  # filter flags are not populated yet
        )

    def read(self, reader: BinaryIO, order: ByteOrder) -> ExportRecord:
        (serial_offset, serial_size, mapped_name, outer, class_ref, super_ref,
         template_ref, global_import, object_flags, filter_flags) = read_struct(reader, self.FORMAT, order)
        return ExportRecord(
            serial_offset=serial_offset,
            serial_size=serial_size,
            name=FName.from_mapped_name(mapped_name),
            outer=decode_reference(outer),
            class_ref=decode_reference(class_ref),
            super_ref=decode_reference(super_ref),
            template_ref=decode_reference(template_ref),
            global_import=decode_reference(global_import),
            object_flags=object_flags,
            filter_flags=filter_flags,
        )


class ExportRecordCodec4_25(ExportRecordCodec):
    """UE 4.25 export map entry (no cooked serial offset). Not implemented."""
    layout = ExportLayout.UE4_25
    record_size = 0x40


class ExportRecordCodec5(ExportRecordCodec):
    """UE 5 export map entry (public export hash instead of global import). Not implemented."""
    layout = ExportLayout.UE5
    record_size = EXPORT_MAP_ENTRY_SIZE


EXPORT_RECORD_CODECS: Dict[ExportLayout, ExportRecordCodec] = {
    ExportLayout.UE4_25: ExportRecordCodec4_25(),
    ExportLayout.UE4_26: ExportRecordCodec4_26(),
    ExportLayout.UE5: ExportRecordCodec5(),
}


def get_export_codec(layout: ExportLayout) -> ExportRecordCodec:
    return EXPORT_RECORD_CODECS[layout]


def resolve_exports(export_map: Sequence[LegacyExport], names: NameMap,
                    imports: Sequence[ObjectReference], file_name: str,
                    game: GameIdentity, package: Optional[str] = None) -> List[ExportRecord]:
    """
    Resolve every entry of a legacy export table.

    Raises:
        ResolutionError: on the first entry that cannot be resolved
    """
    records = []
    for i, entry in enumerate(export_map):
        try:
            records.append(entry.resolve(names, imports, export_map, file_name, game))
        except (ValueError, IndexError) as e:
            raise ResolutionError("export", i, entry, str(e), package or file_name) from e

    logDebug(f"Resolved {len(records)} exports for {package or file_name}")
    return records


def write_export_map(writer: BinaryIO, records: Sequence[ExportRecord], order: ByteOrder,
                     layout: ExportLayout = ExportLayout.UE4_26):
    """Serialize an export map with the codec for `layout`."""
    codec = get_export_codec(layout)
    for record in records:
        codec.write(writer, record, order)
