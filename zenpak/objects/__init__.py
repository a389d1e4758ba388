"""
IO Store Object Model

Object references and the conversion of legacy import/export tables:

- object_index: 64-bit tagged FPackageObjectIndex codec
- names: NameMap, FName and GameIdentity
- imports: LegacyImport table resolution
- exports: LegacyExport table resolution and export map serialization
"""

from .object_index import (
    ObjectIndexType,
    ObjectReference,
    ExportRef,
    ScriptImport,
    PackageImport,
    Empty,
    generate_import_hash,
    encode_reference,
    decode_reference,
    reference_type,
    read_reference,
    write_reference,
    read_reference_list,
    write_reference_list,
)

from .names import FName, NameMap, GameIdentity

from .imports import LegacyImport, resolve_imports, write_import_map

from .package_tables import ConvertedTables, convert_package_tables

from .exports import (
    ExportLayout,
    ExportRecord,
    LegacyExport,
    ExportRecordCodec,
    get_export_codec,
    resolve_exports,
    write_export_map,
)

__all__ = [
    # Object references
    'ObjectIndexType',
    'ObjectReference',
    'ExportRef',
    'ScriptImport',
    'PackageImport',
    'Empty',
    'generate_import_hash',
    'encode_reference',
    'decode_reference',
    'reference_type',
    'read_reference',
    'write_reference',
    'read_reference_list',
    'write_reference_list',
    # Names
    'FName',
    'NameMap',
    'GameIdentity',
    # Imports
    'LegacyImport',
    'resolve_imports',
    'write_import_map',
    # Exports
    'ExportLayout',
    'ExportRecord',
    'LegacyExport',
    'ExportRecordCodec',
    'get_export_codec',
    'resolve_exports',
    'write_export_map',
    # Table conversion
    'ConvertedTables',
    'convert_package_tables',
]
