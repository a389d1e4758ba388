"""
Builders for synthetic IO Store package headers.
"""

import io
import struct
from typing import List, Sequence, Tuple

from zenpak.constants import EXPORT_MAP_ENTRY_SIZE

SUMMARY_SKIP = {'A': 0x0C, 'B': 0x2C, 'C': 0x20}


def bundle_bytes(entries: Sequence[Tuple[int, int]], order: str = '<', serial_offset=None) -> bytes:
    """FExportBundleHeader (+ optional UE5 serial offset) followed by its entries."""
    out = b''
    if serial_offset is not None:
        out += struct.pack(order + 'Q', serial_offset)
    out += struct.pack(order + 'II', 0, len(entries))
    for index, command in entries:
        out += struct.pack(order + 'II', index, command)
    return out


def graph_bytes(packages: Sequence[Tuple[int, List[Tuple[int, int]]]], order: str = '<') -> bytes:
    out = struct.pack(order + 'I', len(packages))
    for package_hash, arcs in packages:
        out += struct.pack(order + 'QI', package_hash, len(arcs))
        for a, b in arcs:
            out += struct.pack(order + 'II', a, b)
    return out


def package_header(layout: str = 'B', export_count: int = 2,
                   bundle_entries: Sequence[Tuple[int, int]] = ((0, 0), (0, 1), (1, 0), (1, 1)),
                   graph: Sequence[Tuple[int, List[Tuple[int, int]]]] = (),
                   order: str = '<', serial_offset=None) -> bytes:
    """
    Build a header with the summary, an export map of zeros, the export
    bundle and the graph, in that order.
    """
    skip = SUMMARY_SKIP[layout]
    export_offset = skip + 12 + 4
    bundle_offset = export_offset + export_count * EXPORT_MAP_ENTRY_SIZE
    bundle = bundle_bytes(bundle_entries, order, serial_offset)
    graph_offset = bundle_offset + len(bundle)

    buffer = io.BytesIO()
    buffer.write(b'\xAA' * skip)
    buffer.write(struct.pack(order + 'III', export_offset, bundle_offset, graph_offset))
    buffer.write(b'\x00' * 4)
    buffer.write(b'\x00' * (export_count * EXPORT_MAP_ENTRY_SIZE))
    buffer.write(bundle)
    buffer.write(graph_bytes(graph, order))
    return buffer.getvalue()
