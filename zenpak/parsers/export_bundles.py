"""
Export Bundle Decoders

Export bundles list the order in which exports are created and serialized
when a package loads.

Header shapes:
- UE4 (4.25 to 4.27):
  - u32 first_entry_index
  - u32 entry_count
- UE5 (5.0+):
  - u64 serial_offset
  - u32 first_entry_index
  - u32 entry_count

Both are followed by entry_count entries of:
  - u32 local_export_index
  - u32 command_type (0 Create, 1 Serialize, 2 Count)
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import BinaryIO, Dict, List, Sequence

import numpy as np

from zenpak.errors import DecodeError, UnsupportedLayoutError
from zenpak.utils import ByteOrder, logDebug, read_exact, read_struct


class ExportBundleCommand(IntEnum):
    CREATE = 0
    SERIALIZE = 1
    COUNT = 2


class BundleLayout(Enum):
    UE4 = "ue4"
    UE5 = "ue5"


@dataclass
class ExportBundleEntry:
    """One command of an export bundle."""
    local_export_index: int
    command: ExportBundleCommand


@dataclass
class ExportBundleHeader:
    first_entry_index: int
    entry_count: int
    serial_offset: int = 0


ENTRY_SIZE = 8  # u32 + u32


def _entry_dtype(order: ByteOrder) -> np.dtype:
    return np.dtype([
        ('local_export_index', order.value + 'u4'),
        ('command', order.value + 'u4'),
    ])


def read_bundle_entries(reader: BinaryIO, entry_count: int, order: ByteOrder) -> List[ExportBundleEntry]:
    """
    Read `entry_count` bundle entries using numpy for the bulk decode.

    Raises:
        DecodeError: if a command is outside {Create, Serialize, Count}
    """
    start = reader.tell()
    data = read_exact(reader, entry_count * ENTRY_SIZE)
    entries = np.frombuffer(data, dtype=_entry_dtype(order))

    valid = np.isin(entries['command'], [int(c) for c in ExportBundleCommand])
    if not valid.all():
        bad = int(np.argmin(valid))
        value = int(entries['command'][bad])
        raise DecodeError(
            f"An invalid type \"{value}\" for ExportBundleCommandType was provided (entry {bad})",
            field="command_type",
            value=value,
            offset=start + bad * ENTRY_SIZE + 4,
        )

    return [
        ExportBundleEntry(int(index), ExportBundleCommand(int(command)))
        for index, command in zip(entries['local_export_index'], entries['command'])
    ]


class ExportBundleDecoder:
    """Reads the export bundle of one header shape; reader at the bundle start."""

    layout: BundleLayout

    def read_header(self, reader: BinaryIO, order: ByteOrder) -> ExportBundleHeader:
        raise NotImplementedError

    def decode(self, reader: BinaryIO, order: ByteOrder) -> List[ExportBundleEntry]:
        header = self.read_header(reader, order)
        entries = read_bundle_entries(reader, header.entry_count, order)
        logDebug(f"Export bundle {self.layout.name}: {header.entry_count} entries")
        return entries

    def export_bundle_count(self, entries: Sequence[ExportBundleEntry]) -> int:
        raise NotImplementedError


class ExportBundleDecoderUE4(ExportBundleDecoder):
    layout = BundleLayout.UE4

    def read_header(self, reader: BinaryIO, order: ByteOrder) -> ExportBundleHeader:
        first_entry_index, entry_count = read_struct(reader, 'II', order)
        return ExportBundleHeader(first_entry_index, entry_count)

    def export_bundle_count(self, entries: Sequence[ExportBundleEntry]) -> int:
        """
        Highest local export index + 1, or 0 with no entries.

        Not the entry count: one export appears once per command.
        """
        if not entries:
            return 0
        indices = np.fromiter((e.local_export_index for e in entries), dtype=np.uint64, count=len(entries))
        return int(indices.max()) + 1


class ExportBundleDecoderUE5(ExportBundleDecoder):
    layout = BundleLayout.UE5

    def read_header(self, reader: BinaryIO, order: ByteOrder) -> ExportBundleHeader:
        serial_offset, first_entry_index, entry_count = read_struct(reader, 'QII', order)
        return ExportBundleHeader(first_entry_index, entry_count, serial_offset)

    def export_bundle_count(self, entries: Sequence[ExportBundleEntry]) -> int:
        raise UnsupportedLayoutError(self.layout.name, "export bundle count derivation")


BUNDLE_DECODERS: Dict[BundleLayout, ExportBundleDecoder] = {
    BundleLayout.UE4: ExportBundleDecoderUE4(),
    BundleLayout.UE5: ExportBundleDecoderUE5(),
}


def get_bundle_decoder(layout: BundleLayout) -> ExportBundleDecoder:
    return BUNDLE_DECODERS[layout]


def export_bundle_count(entries: Sequence[ExportBundleEntry], layout: BundleLayout = BundleLayout.UE4) -> int:
    return get_bundle_decoder(layout).export_bundle_count(entries)
