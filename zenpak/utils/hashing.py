"""
Deterministic Path Hashing

Generates the 64-bit content hashes IO Store uses to address imports and
packages. The hash is CityHash64 over the lowercase path encoded as UTF-16
code units with no terminator, so the same path always produces the same
value in any process and on any machine with the same byte order.
"""

from cityhash import CityHash64

from .binary import ByteOrder


def path_to_utf16(path: str, order: ByteOrder = ByteOrder.LITTLE) -> bytes:
    """
    Normalize a path and serialize it one 16-bit code unit at a time.

    Args:
        path: Object or package path, any case
        order: Byte order of each code unit

    Returns:
        Lowercase path as UTF-16 bytes, no BOM, no null terminator
    """
    return path.lower().encode(order.utf16_codec)


def city_hash_path(path: str, order: ByteOrder = ByteOrder.LITTLE) -> int:
    """
    Hash a path with CityHash64.

    Example:
        city_hash_path("/Script/Engine/Actor") == city_hash_path("/SCRIPT/ENGINE/ACTOR")
    """
    return CityHash64(path_to_utf16(path, order))
