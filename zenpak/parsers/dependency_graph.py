"""
Dependency Graph Decoder

Graph data of an IO Store package (UE 4.25 to 5.2):
- u32 imported_packages_count
- For each imported package:
  - u64 imported_package_id (hash of the package path)
  - u32 external_arc_count
  - external_arc_count arcs of:
    - u32 from_export_bundle_index
    - u32 to_export_bundle_index

Arcs are parsed so the stream ends up past the graph, but not validated.
"""

from dataclasses import dataclass, field
from typing import BinaryIO, List

import numpy as np

from zenpak.utils import ByteOrder, logDebug, read_exact, read_struct, read_u32


@dataclass
class GraphArc:
    from_bundle_index: int
    to_bundle_index: int


@dataclass
class ImportedPackageRecord:
    imported_package_hash: int
    arcs: List[GraphArc] = field(default_factory=list)


def _arc_dtype(order: ByteOrder) -> np.dtype:
    return np.dtype([
        ('from_bundle_index', order.value + 'u4'),
        ('to_bundle_index', order.value + 'u4'),
    ])


def read_imported_package(reader: BinaryIO, order: ByteOrder) -> ImportedPackageRecord:
    package_hash, arc_count = read_struct(reader, 'QI', order)
    raw = np.frombuffer(read_exact(reader, arc_count * 8), dtype=_arc_dtype(order))
    arcs = [GraphArc(int(a), int(b)) for a, b in zip(raw['from_bundle_index'], raw['to_bundle_index'])]
    return ImportedPackageRecord(package_hash, arcs)


def read_dependency_graph(reader: BinaryIO, order: ByteOrder) -> List[ImportedPackageRecord]:
    """Read the graph data; reader positioned at imported_packages_count."""
    count = read_u32(reader, order)
    packages = [read_imported_package(reader, order) for _ in range(count)]
    logDebug(f"Dependency graph: {count} imported packages, "
             f"{sum(len(p.arcs) for p in packages)} arcs")
    return packages


def imported_package_hashes(packages: List[ImportedPackageRecord]) -> List[int]:
    return [p.imported_package_hash for p in packages]
