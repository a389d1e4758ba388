#!/usr/bin/env python3
"""
Build Container Header

Builds the container header store entries for a set of IO Store package
headers.

Pipeline:
1. Load engine configuration (engine.ini or --engine-version)
2. For each package:
   a. Reject legacy cooked assets
   b. Decode summary, export bundles and dependency graph
3. Write all store entries (fixed entries + imported package id region)
4. Optionally write a JSON manifest of package paths and ids

Usage:
    python -m zenpak.build_container_header --config engine.ini --content-root Content \\
        --output store_entries.bin Content/Characters/Hero.uasset ...
"""

import sys
import argparse
import json
import time
from pathlib import Path
from typing import List, Optional

from zenpak.config import BuildMode, EngineConfig
from zenpak.errors import DecodeError, EncodeError, PackagePathError, ResolutionError
from zenpak.objects import GameIdentity
from zenpak.parsers import is_legacy_cooked_asset
from zenpak.serialization import (
    ContainerHeaderPackage,
    ContainerLayout,
    build_container_header_package,
    get_container_position,
    write_store_entries,
)
from zenpak.utils import city_hash_path, log, logWarning, logError, init_logging, print_summary, get_counts


class ContainerHeaderBuilder:
    """
    Converts package headers and writes their store entries.
    """

    def __init__(self, config: EngineConfig, content_root: Optional[Path] = None, keep_going: bool = False):
        """
        Initialize builder

        Args:
            config: Engine configuration
            content_root: Directory package paths are taken relative to
            keep_going: Skip packages that fail instead of stopping
        """
        self.config = config
        self.content_root = Path(content_root) if content_root else None
        self.keep_going = keep_going
        self.game = GameIdentity(config.game_root)
        self.packages: List[ContainerHeaderPackage] = []
        self.package_paths: List[str] = []

    def package_path(self, file_path: Path) -> str:
        """Game path of a package file, e.g. /Game/Characters/Hero."""
        if self.content_root:
            try:
                relative = file_path.resolve().relative_to(self.content_root.resolve())
            except ValueError:
                raise PackagePathError(file_path, self.content_root) from None
        else:
            relative = Path(file_path.name)
        return self.game.package_path(relative.as_posix())

    def add_package(self, file_path: Path) -> Optional[ContainerHeaderPackage]:
        """
        Convert one package header.

        Returns:
            The store entry, or None if the file was skipped
        """
        file_path = Path(file_path)
        package_path = self.package_path(file_path)
        profile = self.config.profile
        order = self.config.byte_order

        with open(file_path, 'rb') as f:
            if is_legacy_cooked_asset(f, order):
                logWarning(f"{file_path} is a cooked .uasset, not an IO Store package; skipped")
                return None

            size = file_path.stat().st_size
            package = build_container_header_package(
                f,
                city_hash_path(package_path, order),
                size,
                profile.summary_layout,
                profile.bundle_layout,
                order,
                shallow=self.config.build_mode == BuildMode.SHALLOW,
            )

        self.packages.append(package)
        self.package_paths.append(package_path)
        log(f"  {package_path}: {package.export_count} exports, "
            f"{len(package.imported_package_hashes)} imported packages")
        return package

    def build_all(self, files: List[Path]) -> bool:
        """
        Convert every package; returns False if any failed.
        """
        log("=" * 70)
        log("CONTAINER HEADER BUILDER")
        log("=" * 70)
        self.config.print_summary()
        log()

        ok = True
        for i, file_path in enumerate(files, 1):
            log(f"[{i}/{len(files)}] {file_path}")
            try:
                self.add_package(file_path)
            except (DecodeError, ResolutionError, PackagePathError, EOFError, OSError) as e:
                logError(f"{file_path}: {e}")
                ok = False
                if not self.keep_going:
                    break
        return ok

    def write(self, output_path: Path) -> int:
        """Write the store entries; returns the total size written."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        order = self.config.byte_order

        with open(output_path, 'wb') as f:
            variable_size = write_store_entries(f, self.packages, order)
            total = f.tell()

        files_size = sum(p.export_bundle_byte_size for p in self.packages)
        position = get_container_position(self.config.profile.container_position)
        layout = ContainerLayout(files_size, self.config.compression_block_size)
        log(f"Wrote {len(self.packages)} store entries ({variable_size} bytes of imports) to {output_path}")
        log(f"  Container header offset: 0x{position.cursor_to_header(layout):X}")
        log(f"  File data offset: 0x{position.cursor_to_beginning_of_files(layout):X}")
        return total

    def write_manifest(self, manifest_path: Path):
        """Write package paths and ids, in store entry order."""
        manifest = [
            {
                "path": path,
                "package_id": f"0x{package.package_hash:016X}",
                "export_count": package.export_count,
                "export_bundle_count": package.export_bundle_count,
                "imported_packages": [f"0x{h:016X}" for h in package.imported_package_hashes],
            }
            for path, package in zip(self.package_paths, self.packages)
        ]
        with open(manifest_path, 'w', encoding='utf-8') as f:
            json.dump(manifest, f, indent=2)
        log(f"Manifest: {manifest_path}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Build IO Store container header store entries")
    parser.add_argument("packages", nargs="+", type=Path, help="IO Store package header files")
    parser.add_argument("--config", type=Path, help="engine.ini with an [engine] section")
    parser.add_argument("--engine-version", help="Engine version or branch, used when --config is absent")
    parser.add_argument("--byte-order", default="little", help="little, big or native (with --engine-version)")
    parser.add_argument("--shallow", action="store_true", help="Derive counts without decoding bundle entries")
    parser.add_argument("--content-root", type=Path, help="Directory package paths are relative to")
    parser.add_argument("--output", type=Path, required=True, help="Output store entry file")
    parser.add_argument("--manifest", type=Path, help="Optional JSON manifest output")
    parser.add_argument("--keep-going", action="store_true", help="Skip packages that fail to convert")
    parser.add_argument("--log", type=Path, help="Log file path (default: convert.log)")
    args = parser.parse_args(argv)

    init_logging(args.log)

    try:
        if args.config:
            config = EngineConfig(args.config)
        elif args.engine_version:
            config = EngineConfig.from_values(
                args.engine_version,
                byte_order=args.byte_order,
                build_mode="shallow" if args.shallow else "full",
            )
        else:
            parser.error("either --config or --engine-version is required")
    except (OSError, ValueError) as e:
        logError(f"{e}")
        return 1

    if args.config and args.shallow:
        config.build_mode = BuildMode.SHALLOW

    start_time = time.time()
    builder = ContainerHeaderBuilder(config, args.content_root, args.keep_going)
    ok = builder.build_all(args.packages)

    if ok or args.keep_going:
        try:
            builder.write(args.output)
            if args.manifest:
                builder.write_manifest(args.manifest)
        except (EncodeError, OSError) as e:
            logError(f"{args.output}: {e}")

    log(f"\nCompleted in {time.time() - start_time:.1f}s")
    print_summary()

    errors, _ = get_counts()
    return 1 if errors else 0


if __name__ == '__main__':
    sys.exit(main())
