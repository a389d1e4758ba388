import json
import struct

import pytest

from harness import package_header
from zenpak.build_container_header import main
from zenpak.serialization import read_store_entries
from zenpak.utils import ByteOrder, city_hash_path, close_logging, get_counts, init_logging

H1, H2 = 0x0123456789ABCDEF, 0x1111222233334444


@pytest.fixture
def fresh_log(tmp_path):
    close_logging()
    yield tmp_path / "run.log"
    close_logging()
    init_logging(tmp_path / "after.log")


@pytest.fixture
def content(tmp_path):
    root = tmp_path / "Content"
    (root / "Characters").mkdir(parents=True)
    hero = root / "Characters" / "Hero.uasset"
    hero.write_bytes(package_header('B', export_count=2, graph=[(H1, []), (H2, [(0, 1)])]))
    crate = root / "Crate.uasset"
    crate.write_bytes(package_header('B', export_count=1, bundle_entries=[(0, 0), (0, 1)]))
    return root


def test_builds_store_entries_and_manifest(tmp_path, content, fresh_log):
    output = tmp_path / "out" / "store.bin"
    manifest = tmp_path / "manifest.json"
    hero = content / "Characters" / "Hero.uasset"
    crate = content / "Crate.uasset"

    code = main([
        str(hero), str(crate),
        "--engine-version", "4.26",
        "--content-root", str(content),
        "--output", str(output),
        "--manifest", str(manifest),
        "--log", str(fresh_log),
    ])
    assert code == 0

    with open(output, 'rb') as f:
        entries = read_store_entries(f, 2, ByteOrder.LITTLE)
    assert entries[0].export_count == 2
    assert entries[0].export_bundle_byte_size == hero.stat().st_size
    assert entries[0].imported_package_hashes == [H1, H2]
    assert entries[1].export_count == 1
    assert entries[1].imported_package_hashes == []

    listed = json.loads(manifest.read_text(encoding="utf-8"))
    assert [p["path"] for p in listed] == ["/Game/Characters/Hero", "/Game/Crate"]
    assert listed[0]["package_id"] == f"0x{city_hash_path('/Game/Characters/Hero'):016X}"


def test_cooked_asset_is_skipped_with_warning(tmp_path, content, fresh_log):
    cooked = content / "Legacy.uasset"
    cooked.write_bytes(struct.pack('<I', 0x9E2A83C1) + b'\x00' * 0x60)
    output = tmp_path / "store.bin"

    code = main([str(cooked), "--engine-version", "4.26", "--output", str(output), "--log", str(fresh_log)])

    assert code == 0
    assert get_counts() == (0, 1)
    assert output.read_bytes() == b''


def test_failing_package_stops_without_output(tmp_path, content, fresh_log):
    broken = content / "Broken.uasset"
    broken.write_bytes(package_header('B', export_count=1, bundle_entries=[(0, 5)]))
    output = tmp_path / "store.bin"

    code = main([str(broken), "--engine-version", "4.26", "--output", str(output), "--log", str(fresh_log)])

    assert code == 1
    assert not output.exists()


def test_keep_going_writes_remaining_packages(tmp_path, content, fresh_log):
    broken = content / "Broken.uasset"
    broken.write_bytes(package_header('B', export_count=1, bundle_entries=[(0, 5)]))
    output = tmp_path / "store.bin"

    code = main([
        str(broken), str(content / "Crate.uasset"),
        "--engine-version", "4.26", "--keep-going",
        "--output", str(output), "--log", str(fresh_log),
    ])

    assert code == 1
    assert len(output.read_bytes()) == 0x20


def test_config_file_and_shallow_flag(tmp_path, content, fresh_log):
    ini = tmp_path / "engine.ini"
    ini.write_text("[engine]\nversion = ++UE4+Release-4.27\n", encoding="utf-8")
    output = tmp_path / "store.bin"

    code = main([
        str(content / "Characters" / "Hero.uasset"),
        "--config", str(ini), "--shallow",
        "--output", str(output), "--log", str(fresh_log),
    ])

    assert code == 0
    with open(output, 'rb') as f:
        entry = read_store_entries(f, 1, ByteOrder.LITTLE)[0]
    assert entry.imported_package_hashes == [H1, H2]


def test_unsupported_engine_layout_is_reported(tmp_path, content, fresh_log):
    output = tmp_path / "store.bin"
    code = main([
        str(content / "Crate.uasset"),
        "--engine-version", "5.3",
        "--output", str(output), "--log", str(fresh_log),
    ])
    assert code == 1


def test_missing_package_is_logged(tmp_path, content, fresh_log):
    output = tmp_path / "store.bin"

    code = main([str(content / "Missing.uasset"), "--engine-version", "4.26",
                 "--output", str(output), "--log", str(fresh_log)])

    assert code == 1
    assert get_counts()[0] == 1
    assert not output.exists()


def test_package_outside_content_root_is_logged(tmp_path, content, fresh_log):
    other = tmp_path / "Other.uasset"
    other.write_bytes(package_header('B'))
    output = tmp_path / "store.bin"

    code = main([str(other), "--engine-version", "4.26", "--content-root", str(content),
                 "--output", str(output), "--log", str(fresh_log)])

    assert code == 1
    assert get_counts()[0] == 1
    assert not output.exists()


def test_keep_going_skips_unreadable_and_foreign_packages(tmp_path, content, fresh_log):
    other = tmp_path / "Other.uasset"
    other.write_bytes(package_header('B'))
    output = tmp_path / "store.bin"
    manifest = tmp_path / "manifest.json"

    code = main([
        str(content / "Missing.uasset"), str(other), str(content / "Crate.uasset"),
        "--engine-version", "4.26", "--content-root", str(content), "--keep-going",
        "--output", str(output), "--manifest", str(manifest), "--log", str(fresh_log),
    ])

    assert code == 1
    assert get_counts()[0] == 2
    assert len(output.read_bytes()) == 0x20
    assert [p["path"] for p in json.loads(manifest.read_text(encoding="utf-8"))] == ["/Game/Crate"]


def test_shallow_ue5_is_reported(tmp_path, content, fresh_log):
    ue5 = content / "Ue5.uasset"
    ue5.write_bytes(package_header('C', export_count=1, bundle_entries=[(0, 0), (0, 1)], serial_offset=0))
    output = tmp_path / "store.bin"

    code = main([str(ue5), "--engine-version", "5.1", "--shallow",
                 "--output", str(output), "--log", str(fresh_log)])

    assert code == 1
    assert not output.exists()
