"""
IO Store Package Header Parsers

This package provides decoders for the parts of an IO Store package header
the container header needs:

- package_summary: FPackageSummary layouts (SummaryOffsets)
- export_bundles: export bundle headers and entries
- dependency_graph: imported packages and their arcs
- asset_type: legacy cooked asset detection

Usage:
    from zenpak.parsers import read_summary_offsets, SummaryLayout
    from zenpak.utils import ByteOrder

    with open("Hero.uasset", "rb") as f:
        offsets = read_summary_offsets(f, SummaryLayout.B, ByteOrder.LITTLE)
        print(offsets.export_count())
"""

from .package_summary import (
    SummaryLayout,
    SummaryOffsets,
    PackageSummaryDecoder,
    get_summary_decoder,
    read_summary_offsets,
)

from .export_bundles import (
    BundleLayout,
    ExportBundleCommand,
    ExportBundleEntry,
    ExportBundleHeader,
    ExportBundleDecoder,
    get_bundle_decoder,
    read_bundle_entries,
    export_bundle_count,
)

from .dependency_graph import (
    GraphArc,
    ImportedPackageRecord,
    read_dependency_graph,
    read_imported_package,
    imported_package_hashes,
)

from .asset_type import is_legacy_cooked_asset, is_valid_asset_type

__all__ = [
    # Summary
    'SummaryLayout',
    'SummaryOffsets',
    'PackageSummaryDecoder',
    'get_summary_decoder',
    'read_summary_offsets',
    # Export bundles
    'BundleLayout',
    'ExportBundleCommand',
    'ExportBundleEntry',
    'ExportBundleHeader',
    'ExportBundleDecoder',
    'get_bundle_decoder',
    'read_bundle_entries',
    'export_bundle_count',
    # Dependency graph
    'GraphArc',
    'ImportedPackageRecord',
    'read_dependency_graph',
    'read_imported_package',
    'imported_package_hashes',
    # Asset type
    'is_legacy_cooked_asset',
    'is_valid_asset_type',
]
