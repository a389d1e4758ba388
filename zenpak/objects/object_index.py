"""
Object Index Codec

IO Store packages address every cross-object pointer with a 64-bit
FPackageObjectIndex:
- top 2 bits: type tag
  - 0 Export        (index of another export in the same package)
  - 1 ScriptImport  (hash of a path under /Script/)
  - 2 PackageImport (hash of a path in another content package)
  - 3 Null          (all bits set)
- low 62 bits: export index, or CityHash64 of the lowercase path

Hashed references cannot be turned back into text. Decoding a hashed value
keeps the hash in `known_hash` so it re-encodes to the same bits.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import BinaryIO, Iterable, List, Optional, Union

from zenpak.constants import OBJECT_INDEX_HASH_MASK, OBJECT_INDEX_NULL, OBJECT_INDEX_TAG_SHIFT
from zenpak.utils import ByteOrder, city_hash_path, read_u64, write_u64


class ObjectIndexType(IntEnum):
    EXPORT = 0
    SCRIPT_IMPORT = 1
    PACKAGE_IMPORT = 2
    NULL = 3


@dataclass(frozen=True)
class ExportRef:
    """Reference to another export of the same package, by position."""
    index: int


@dataclass(frozen=True)
class ScriptImport:
    """Reference into the engine's /Script/ namespace."""
    path: str = ""
    known_hash: Optional[int] = None


@dataclass(frozen=True)
class PackageImport:
    """Reference to an object in another content package."""
    path: str = ""
    known_hash: Optional[int] = None


@dataclass(frozen=True)
class Empty:
    """Null reference."""


ObjectReference = Union[ExportRef, ScriptImport, PackageImport, Empty]

_HASHED_TYPES = {
    ScriptImport: ObjectIndexType.SCRIPT_IMPORT,
    PackageImport: ObjectIndexType.PACKAGE_IMPORT,
}


def generate_import_hash(path: str, obj_type: ObjectIndexType, order: ByteOrder = ByteOrder.LITTLE) -> int:
    """
    Hash a path into a tagged 64-bit reference value.

    Args:
        path: Object path, lowercased before hashing
        obj_type: SCRIPT_IMPORT or PACKAGE_IMPORT
        order: Byte order of the UTF-16 code units fed to the hash
    """
    value = city_hash_path(path, order) & OBJECT_INDEX_HASH_MASK
    return value | (int(obj_type) << OBJECT_INDEX_TAG_SHIFT)


def encode_reference(ref: ObjectReference, order: ByteOrder = ByteOrder.LITTLE) -> int:
    """Encode an object reference as its 64-bit wire value."""
    if isinstance(ref, ExportRef):
        # Export indices are written as-is, never hashed
        if not 0 <= ref.index <= OBJECT_INDEX_HASH_MASK:
            raise ValueError(f"Export index {ref.index} does not fit in 62 bits")
        return ref.index

    if isinstance(ref, Empty):
        return OBJECT_INDEX_NULL

    obj_type = _HASHED_TYPES.get(type(ref))
    if obj_type is None:
        raise TypeError(f"Not an object reference: {ref!r}")

    if ref.path:
        return generate_import_hash(ref.path, obj_type, order)
    if ref.known_hash is not None:
        return (ref.known_hash & OBJECT_INDEX_HASH_MASK) | (int(obj_type) << OBJECT_INDEX_TAG_SHIFT)
    raise ValueError(f"{type(ref).__name__} has neither a path nor a known hash")


def decode_reference(raw: int) -> ObjectReference:
    """Decode a 64-bit wire value. Hashed variants only recover the hash."""
    obj_type = ObjectIndexType(raw >> OBJECT_INDEX_TAG_SHIFT)
    low = raw & OBJECT_INDEX_HASH_MASK

    if obj_type == ObjectIndexType.EXPORT:
        return ExportRef(low)
    if obj_type == ObjectIndexType.SCRIPT_IMPORT:
        return ScriptImport(known_hash=low)
    if obj_type == ObjectIndexType.PACKAGE_IMPORT:
        return PackageImport(known_hash=low)
    return Empty()


def reference_type(ref: ObjectReference) -> ObjectIndexType:
    if isinstance(ref, ExportRef):
        return ObjectIndexType.EXPORT
    if isinstance(ref, Empty):
        return ObjectIndexType.NULL
    return _HASHED_TYPES[type(ref)]


def write_reference(writer: BinaryIO, ref: ObjectReference, order: ByteOrder):
    write_u64(writer, order, encode_reference(ref, order))


def read_reference(reader: BinaryIO, order: ByteOrder) -> ObjectReference:
    return decode_reference(read_u64(reader, order))


def write_reference_list(writer: BinaryIO, refs: Iterable[ObjectReference], order: ByteOrder):
    """Write a run of references back to back, e.g. the import map."""
    for ref in refs:
        write_reference(writer, ref, order)


def read_reference_list(reader: BinaryIO, count: int, order: ByteOrder) -> List[ObjectReference]:
    return [read_reference(reader, order) for _ in range(count)]
