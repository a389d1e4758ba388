"""
Binary Stream Utilities

Common helpers for reading and writing IO Store header structures on
seekable streams. Every helper takes the byte order explicitly; layouts
are not self-describing so the caller's configuration decides it.
"""

import struct
import sys
from enum import Enum
from typing import BinaryIO, Tuple


class ByteOrder(Enum):
    """Byte order of every integer in a header, as a struct/numpy prefix."""
    LITTLE = '<'
    BIG = '>'
    NATIVE = '='

    @classmethod
    def from_name(cls, name: str) -> 'ByteOrder':
        """Parse 'little', 'big' or 'native' (case-insensitive)."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown byte order '{name}' (expected little, big or native)") from None

    @property
    def is_little(self) -> bool:
        if self is ByteOrder.NATIVE:
            return sys.byteorder == 'little'
        return self is ByteOrder.LITTLE

    @property
    def utf16_codec(self) -> str:
        """Codec name that serializes UTF-16 code units in this order, without BOM."""
        return 'utf-16-le' if self.is_little else 'utf-16-be'


def read_exact(reader: BinaryIO, size: int) -> bytes:
    """
    Read exactly `size` bytes.

    Raises:
        EOFError: if the stream ends first
    """
    data = reader.read(size)
    if len(data) != size:
        raise EOFError(
            f"Unexpected end of stream at 0x{reader.tell():X}: wanted {size} bytes, got {len(data)}"
        )
    return data


def read_struct(reader: BinaryIO, fmt: str, order: ByteOrder) -> Tuple:
    """Read and unpack a struct format (without its byte order prefix)."""
    full = order.value + fmt
    return struct.unpack(full, read_exact(reader, struct.calcsize(full)))


def read_u32(reader: BinaryIO, order: ByteOrder) -> int:
    return read_struct(reader, 'I', order)[0]


def read_u64(reader: BinaryIO, order: ByteOrder) -> int:
    return read_struct(reader, 'Q', order)[0]


def write_struct(writer: BinaryIO, fmt: str, order: ByteOrder, *values):
    """Pack and write values with the given struct format."""
    writer.write(struct.pack(order.value + fmt, *values))


def write_u32(writer: BinaryIO, order: ByteOrder, value: int):
    write_struct(writer, 'I', order, value)


def write_u64(writer: BinaryIO, order: ByteOrder, value: int):
    write_struct(writer, 'Q', order, value)


def write_i64(writer: BinaryIO, order: ByteOrder, value: int):
    write_struct(writer, 'q', order, value)


def align_up(value: int, alignment: int) -> int:
    """Round value up to the next multiple of alignment."""
    if alignment <= 0:
        raise ValueError(f"Alignment must be positive, got {alignment}")
    return (value + alignment - 1) // alignment * alignment
