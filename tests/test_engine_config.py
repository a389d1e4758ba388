import pytest

from zenpak.config import BuildMode, EngineConfig, get_engine_profile
from zenpak.objects import ExportLayout
from zenpak.parsers import BundleLayout, SummaryLayout
from zenpak.serialization import ContainerPositionKind
from zenpak.utils import ByteOrder


@pytest.mark.parametrize("version,layout", [
    ("4.25", SummaryLayout.A),
    ("4.25+", SummaryLayout.B),
    ("4.26", SummaryLayout.B),
    ("4.27", SummaryLayout.B),
    ("5.1", SummaryLayout.C),
    ("5.3", SummaryLayout.D),
])
def test_profiles_pick_summary_layout(version, layout):
    assert get_engine_profile(version).summary_layout == layout


def test_profile_from_branch_string():
    profile = get_engine_profile("++UE4+Release-4.26")
    assert profile.name == "4.26"
    assert profile.bundle_layout == BundleLayout.UE4
    assert profile.export_layout == ExportLayout.UE4_26
    assert profile.container_position == ContainerPositionKind.FIXED

    assert get_engine_profile("++ue5+release-5.0").bundle_layout == BundleLayout.UE5


def test_unknown_version():
    with pytest.raises(ValueError):
        get_engine_profile("3.0")


def test_load_ini(tmp_path):
    path = tmp_path / "engine.ini"
    path.write_text(
        "[engine]\n"
        "version = 4.27 ; retail build\n"
        "byte_order = big\n"
        "build_mode = shallow\n"
        "game_root = /MyGame\n"
        "compression_block_size = 0x20000\n",
        encoding="utf-8",
    )
    config = EngineConfig(path)

    assert config.profile.name == "4.27"
    assert config.byte_order == ByteOrder.BIG
    assert config.build_mode == BuildMode.SHALLOW
    assert config.game_root == "/MyGame"
    assert config.compression_block_size == 0x20000


def test_ini_defaults(tmp_path):
    path = tmp_path / "engine.ini"
    path.write_text("[engine]\nversion = 4.26\n", encoding="utf-8")
    config = EngineConfig(path)

    assert config.byte_order == ByteOrder.LITTLE
    assert config.build_mode == BuildMode.FULL
    assert config.game_root == "/Game"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        EngineConfig(tmp_path / "nope.ini")


def test_missing_section(tmp_path):
    path = tmp_path / "engine.ini"
    path.write_text("[other]\nversion = 4.26\n", encoding="utf-8")
    with pytest.raises(ValueError):
        EngineConfig(path)


def test_bad_values(tmp_path):
    path = tmp_path / "engine.ini"
    path.write_text("[engine]\nversion = 4.26\nbyte_order = middle\n", encoding="utf-8")
    with pytest.raises(ValueError):
        EngineConfig(path)

    path.write_text("[engine]\nversion = 4.26\nbuild_mode = lazy\n", encoding="utf-8")
    with pytest.raises(ValueError):
        EngineConfig(path)


def test_from_values():
    config = EngineConfig.from_values("5.0", byte_order="native")
    assert config.profile.summary_layout == SummaryLayout.C
    assert config.byte_order == ByteOrder.NATIVE
    assert config.config_path is None
