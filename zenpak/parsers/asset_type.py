"""
Asset type detection.

IO Store package headers have no magic, while legacy cooked .uasset files
start with PACKAGE_FILE_TAG. Feeding a cooked asset to the summary decoders
would read garbage offsets, so callers check first.
"""

import struct
from typing import BinaryIO

from zenpak.constants import UASSET_MAGIC
from zenpak.utils import ByteOrder


def is_legacy_cooked_asset(reader: BinaryIO, order: ByteOrder = ByteOrder.LITTLE) -> bool:
    """
    Check whether the stream holds a legacy cooked asset.

    Reads the first 4 bytes from the current position and seeks back.
    """
    start = reader.tell()
    try:
        data = reader.read(4)
    finally:
        reader.seek(start)
    if len(data) < 4:
        return False
    return struct.unpack(order.value + 'I', data)[0] == UASSET_MAGIC


def is_valid_asset_type(reader: BinaryIO, order: ByteOrder = ByteOrder.LITTLE) -> bool:
    """True if the stream can be treated as an IO Store package header."""
    return not is_legacy_cooked_asset(reader, order)
