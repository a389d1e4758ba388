"""
Legacy table conversion.

Resolves a legacy package's import and export tables and writes the IO Store
import map followed by the export map. Nothing is written unless both tables
resolve, so a failing package leaves the output untouched.
"""

import io
from dataclasses import dataclass
from typing import BinaryIO, List, Optional, Sequence

from zenpak.utils import ByteOrder
from .exports import ExportLayout, ExportRecord, LegacyExport, resolve_exports, write_export_map
from .imports import LegacyImport, resolve_imports, write_import_map
from .names import GameIdentity, NameMap
from .object_index import ObjectReference


@dataclass
class ConvertedTables:
    imports: List[ObjectReference]
    exports: List[ExportRecord]
    import_map_offset: int
    export_map_offset: int


def convert_package_tables(writer: BinaryIO, import_map: Sequence[LegacyImport],
                           export_map: Sequence[LegacyExport], names: NameMap,
                           file_name: str, game: GameIdentity, order: ByteOrder,
                           layout: ExportLayout = ExportLayout.UE4_26,
                           package: Optional[str] = None) -> ConvertedTables:
    """
    Write the import map and export map of one package.

    Offsets in the result are absolute positions in `writer`.

    Raises:
        ResolutionError: if any import or export cannot be resolved
        UnsupportedLayoutError: if `layout` has no export record codec
    """
    imports = resolve_imports(import_map, names, package or file_name)
    exports = resolve_exports(export_map, names, imports, file_name, game, package)

    buffer = io.BytesIO()
    write_import_map(buffer, imports, order)
    export_start = buffer.tell()
    write_export_map(buffer, exports, order, layout)

    import_map_offset = writer.tell()
    writer.write(buffer.getvalue())
    return ConvertedTables(imports, exports, import_map_offset, import_map_offset + export_start)
