#!/usr/bin/env python3
"""
Engine Configuration

Maps an Unreal Engine version to the header layouts the converter must use,
and parses engine.ini files that select one.

INI Format:
    [engine]
    version = 4.26              ; or a branch string like ++UE4+Release-4.26
    byte_order = little         ; little / big / native
    build_mode = full           ; full / shallow
    game_root = /Game
    compression_block_size = 0x10000
"""

import configparser
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

from zenpak.constants import DEFAULT_COMPRESSION_BLOCK_SIZE
from zenpak.objects.exports import ExportLayout
from zenpak.parsers.export_bundles import BundleLayout
from zenpak.parsers.package_summary import SummaryLayout
from zenpak.serialization.container_position import ContainerPositionKind
from zenpak.utils import ByteOrder, log, logWarning


class BuildMode(Enum):
    FULL = "full"
    SHALLOW = "shallow"


@dataclass(frozen=True)
class EngineProfile:
    """
    Header layouts used by one engine version family.

    export_layout is for callers of convert_package_tables; the container
    header builder never rewrites export maps and does not read it.
    """
    name: str
    summary_layout: SummaryLayout
    bundle_layout: BundleLayout
    export_layout: ExportLayout
    container_position: ContainerPositionKind


ENGINE_PROFILES: Dict[str, EngineProfile] = {
    "4.25": EngineProfile("4.25", SummaryLayout.A, BundleLayout.UE4, ExportLayout.UE4_25, ContainerPositionKind.FIXED),
    "4.25+": EngineProfile("4.25+", SummaryLayout.B, BundleLayout.UE4, ExportLayout.UE4_26, ContainerPositionKind.FIXED),
    "4.26": EngineProfile("4.26", SummaryLayout.B, BundleLayout.UE4, ExportLayout.UE4_26, ContainerPositionKind.FIXED),
    "4.27": EngineProfile("4.27", SummaryLayout.B, BundleLayout.UE4, ExportLayout.UE4_26, ContainerPositionKind.TRAILING),
    "5.0": EngineProfile("5.0", SummaryLayout.C, BundleLayout.UE5, ExportLayout.UE5, ContainerPositionKind.TRAILING),
    "5.1": EngineProfile("5.1", SummaryLayout.C, BundleLayout.UE5, ExportLayout.UE5, ContainerPositionKind.TRAILING),
    "5.2": EngineProfile("5.2", SummaryLayout.C, BundleLayout.UE5, ExportLayout.UE5, ContainerPositionKind.TRAILING),
    "5.3": EngineProfile("5.3", SummaryLayout.D, BundleLayout.UE5, ExportLayout.UE5, ContainerPositionKind.TRAILING),
}

# ++UE4+Release-4.26, ++UE5+Release-5.1, ...
_BRANCH_PATTERN = re.compile(r'^\+\+ue\d\+release-(\d+\.\d+\+?)', re.IGNORECASE)


def get_engine_profile(version: str) -> EngineProfile:
    """
    Look up a profile by version ('4.26') or engine branch string ('++UE4+Release-4.26').

    Raises:
        ValueError: if the version is not known
    """
    key = version.strip()
    match = _BRANCH_PATTERN.match(key)
    if match:
        key = match.group(1)

    profile = ENGINE_PROFILES.get(key)
    if profile is None:
        raise ValueError(
            f"Unknown engine version '{version}' (known: {', '.join(ENGINE_PROFILES)})"
        )
    return profile


class EngineConfig:
    """
    Engine configuration manager

    Loads engine.ini and resolves the engine profile it names.
    """

    SECTION = "engine"

    def __init__(self, config_path: Union[str, Path] = "engine.ini"):
        """
        Load engine configuration

        Args:
            config_path: Path to engine.ini file
        """
        self.config_path = Path(config_path)
        self.profile: Optional[EngineProfile] = None
        self.byte_order = ByteOrder.LITTLE
        self.build_mode = BuildMode.FULL
        self.game_root = "/Game"
        self.compression_block_size = DEFAULT_COMPRESSION_BLOCK_SIZE
        self._load_config()

    @classmethod
    def from_values(cls, version: str, byte_order: str = "little", build_mode: str = "full",
                    game_root: str = "/Game") -> 'EngineConfig':
        """Build a configuration without an INI file (e.g. from command line flags)."""
        config = cls.__new__(cls)
        config.config_path = None
        config.compression_block_size = DEFAULT_COMPRESSION_BLOCK_SIZE
        config._apply({
            'version': version,
            'byte_order': byte_order,
            'build_mode': build_mode,
            'game_root': game_root,
        })
        return config

    def _load_config(self):
        """Load and parse engine.ini"""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        config = configparser.ConfigParser(inline_comment_prefixes=(';', '#'))
        config.read(self.config_path, encoding='utf-8')

        if not config.has_section(self.SECTION):
            raise ValueError(f"Missing [{self.SECTION}] section in {self.config_path}")

        for section in config.sections():
            if section != self.SECTION:
                logWarning(f"Ignoring unknown section [{section}] in {self.config_path}")

        self._apply(config[self.SECTION])

    def _apply(self, data):
        version = data.get('version')
        if not version:
            raise ValueError("Missing 'version' field")
        self.profile = get_engine_profile(version)

        self.byte_order = ByteOrder.from_name(data.get('byte_order', 'little'))

        mode = data.get('build_mode', 'full').strip().lower()
        try:
            self.build_mode = BuildMode(mode)
        except ValueError:
            raise ValueError(f"Invalid build_mode '{mode}' (expected full or shallow)") from None

        self.game_root = data.get('game_root', '/Game').strip() or '/Game'

        block_size = data.get('compression_block_size')
        if block_size:
            self.compression_block_size = int(block_size, 0)
            if self.compression_block_size <= 0:
                raise ValueError(f"compression_block_size must be positive, got {block_size}")

    def print_summary(self):
        """Print configuration summary"""
        source = self.config_path if self.config_path else "command line"
        log(f"Engine configuration from {source}")
        log(f"  Engine version: {self.profile.name}")
        log(f"  Summary layout: {self.profile.summary_layout.name}")
        log(f"  Export bundles: {self.profile.bundle_layout.name}")
        log(f"  Byte order: {self.byte_order.name.lower()}")
        log(f"  Build mode: {self.build_mode.value}")
        log(f"  Game root: {self.game_root}")
